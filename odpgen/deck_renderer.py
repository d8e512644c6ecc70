#!/usr/bin/env python3
"""Render an ODP deck from a JSON deck description."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List

from odpgen.config import CONFIG_FILE, OdpConfig
from odpgen.errors import IOFailure, OdpError
from odpgen.geometry import TextProperties
from odpgen.model import Presentation, SlideRef
from odpgen.zorder import duplicate_z_indices


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _read_media(base_dir: Path, raw: str) -> tuple[bytes, str]:
    path = Path(raw)
    if not path.is_absolute():
        path = base_dir / path
    try:
        return path.read_bytes(), path.suffix
    except OSError as exc:
        raise IOFailure(f"cannot read media file {path}: {exc}", path=str(path)) from exc


def _load_deck(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IOFailure(f"cannot read deck description {path}: {exc}", path=str(path)) from exc
    return _dict(json.loads(text))


def _properties(raw: Any) -> TextProperties | None:
    if not isinstance(raw, dict):
        return None
    return TextProperties(
        horizontal_align=str(raw.get("horizontal_align", "left")),
        vertical_align=str(raw.get("vertical_align", "top")),
        left_indent=float(raw.get("left_indent", 0) or 0),
        right_indent=float(raw.get("right_indent", 0) or 0),
        first_line_indent=float(raw.get("first_line_indent", 0) or 0),
    )


def _apply_size(pres: Presentation, raw: Any) -> None:
    if isinstance(raw, dict):
        pres.set_custom_slide_size(float(raw.get("width", 0)), float(raw.get("height", 0)))
    elif raw:
        pres.set_slide_size(str(raw))


def _apply_slide(pres: Presentation, ref: SlideRef, slide: Dict[str, Any], base_dir: Path) -> None:
    background = _dict(slide.get("background"))
    if background.get("image"):
        data, ext = _read_media(base_dir, str(background["image"]))
        pres.set_slide_background(ref, data, ext)
    elif background.get("color"):
        pres.set_slide_background_color(ref, str(background["color"]))
    for box in _list(slide.get("text_boxes")):
        style = _dict(box.get("style"))
        if style:
            pres.set_text_style(
                ref,
                float(style.get("font_size", 18)),
                str(style.get("font_family", "Liberation Sans")),
                str(style.get("color", "#000000")),
                bool(style.get("bold", False)),
                bool(style.get("italic", False)),
            )
        pres.add_text_box(
            ref,
            str(box.get("content", "")),
            float(box.get("x", 0)),
            float(box.get("y", 0)),
            float(box.get("width", 0)),
            float(box.get("height", 0)),
            _properties(box.get("properties")),
            box.get("z_index"),
        )
    for image in _list(slide.get("images")):
        data, ext = _read_media(base_dir, str(image.get("path", "")))
        pres.add_image(
            ref,
            data,
            str(image.get("extension") or ext),
            float(image.get("x", 0)),
            float(image.get("y", 0)),
            float(image.get("width", 0)),
            float(image.get("height", 0)),
            image.get("z_index"),
        )


def build_presentation(payload: Dict[str, Any], base_dir: Path, config: OdpConfig | None = None) -> Presentation:
    pres = Presentation(config=config)
    _apply_size(pres, payload.get("slide_size"))
    background = _dict(payload.get("background"))
    if background.get("image"):
        data, ext = _read_media(base_dir, str(background["image"]))
        pres.set_background_image(data, ext)
    elif background.get("color"):
        pres.set_background_color(str(background["color"]))
    for slide in _list(payload.get("slides")):
        slide = _dict(slide)
        title = str(slide.get("title", "") or "")
        content = str(slide.get("content", "") or "")
        ref = pres.add_slide(title, content) if title or content else pres.add_blank_slide()
        _apply_slide(pres, ref, slide, base_dir)
    return pres


def z_index_warnings(pres: Presentation) -> List[Dict[str, Any]]:
    out = []
    for slide in pres.slides:
        dupes = duplicate_z_indices(slide)
        if dupes:
            out.append({"slide": slide.index, "z_indices": dupes})
    return out


def build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render ODP deck from a JSON deck description")
    parser.add_argument("--spec-json", required=True)
    parser.add_argument("--out-odp", required=True)
    parser.add_argument("--config", default=str(CONFIG_FILE))
    parser.add_argument("--strict-z", action="store_true", help="fail when a slide reuses a z-index")
    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_cli().parse_args(argv)
    spec_path = Path(args.spec_json)
    try:
        pres = build_presentation(_load_deck(spec_path), spec_path.resolve().parent, OdpConfig.from_file(Path(args.config)))
        warnings = z_index_warnings(pres)
        if warnings and args.strict_z:
            print(json.dumps({"ok": False, "error": {"code": "DUPLICATE_Z_INDEX", "details": warnings}}, ensure_ascii=False, indent=2))
            return 2
        out_path = pres.save(args.out_odp)
    except OdpError as exc:
        print(json.dumps({"ok": False, "error": exc.to_dict()}, ensure_ascii=False, indent=2))
        return 2
    result = {"ok": True, "out_odp": str(out_path), "z_index_warnings": warnings}
    result.update(pres.describe())
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
