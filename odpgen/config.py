#!/usr/bin/env python3
"""
ODP builder configuration loader

- built-in defaults for slide presets, title/body styles and locale
- optional YAML override file merged over the defaults
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from odpgen.geometry import ASPECT_RATIO_16_9, PRESET_SIZES, SlideSize, TextStyle

ROOT = Path(__file__).resolve().parents[1]
CONFIG_FILE = ROOT / "config" / "odpgen.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "default_preset": ASPECT_RATIO_16_9,
    "slide_sizes": {name: size.to_dict() for name, size in PRESET_SIZES.items()},
    "title_style": {
        "font_size": "32pt",
        "font_family": "Liberation Sans",
        "color": "#000000",
        "bold": True,
        "italic": False,
    },
    "body_style": {
        "font_size": "18pt",
        "font_family": "Liberation Sans",
        "color": "#000000",
        "bold": False,
        "italic": False,
    },
    "locale": {"language": "es", "country": "ES"},
    "telemetry": {"events_file": ""},
}


def load_config(path: Path = CONFIG_FILE) -> Dict[str, Any]:
    """Load a YAML override file; a missing file means no overrides."""
    if not path.exists():
        return {}

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _style_from(raw: Dict[str, Any]) -> TextStyle:
    return TextStyle(
        font_size=str(raw.get("font_size", "") or ""),
        font_family=str(raw.get("font_family", "") or ""),
        color=str(raw.get("color", "") or ""),
        bold=bool(raw.get("bold", False)),
        italic=bool(raw.get("italic", False)),
    )


class OdpConfig:
    """Resolved builder configuration."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self._config = _merge(DEFAULT_CONFIG, config or {})

    @classmethod
    def from_file(cls, path: Path) -> "OdpConfig":
        return cls(load_config(Path(path)))

    @property
    def slide_sizes(self) -> Dict[str, SlideSize]:
        out: Dict[str, SlideSize] = {}
        for name, raw in (self._config.get("slide_sizes") or {}).items():
            if not isinstance(raw, dict):
                continue
            width = float(raw.get("width", 0) or 0)
            height = float(raw.get("height", 0) or 0)
            if width > 0 and height > 0:
                out[str(name)] = SlideSize(width=width, height=height)
        return out

    @property
    def default_size(self) -> SlideSize:
        sizes = self.slide_sizes
        name = str(self._config.get("default_preset", ASPECT_RATIO_16_9))
        return sizes.get(name) or sizes.get(ASPECT_RATIO_16_9) or PRESET_SIZES[ASPECT_RATIO_16_9]

    def preset(self, name: str) -> SlideSize:
        """Unknown preset names fall back to 16:9, whatever ``default_preset`` says."""
        sizes = self.slide_sizes
        fallback = sizes.get(ASPECT_RATIO_16_9) or PRESET_SIZES[ASPECT_RATIO_16_9]
        return sizes.get(str(name or "").strip(), fallback)

    @property
    def title_style(self) -> TextStyle:
        return _style_from(self._config.get("title_style") or {})

    @property
    def body_style(self) -> TextStyle:
        return _style_from(self._config.get("body_style") or {})

    @property
    def language(self) -> str:
        return str((self._config.get("locale") or {}).get("language", "es"))

    @property
    def country(self) -> str:
        return str((self._config.get("locale") or {}).get("country", "ES"))

    @property
    def telemetry_events_file(self) -> Optional[Path]:
        raw = str((self._config.get("telemetry") or {}).get("events_file", "") or "").strip()
        return Path(raw) if raw else None

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)
