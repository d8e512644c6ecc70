#!/usr/bin/env python3
"""Value-derived style names shared by content.xml and styles.xml."""

from __future__ import annotations

import hashlib
import re
from typing import TYPE_CHECKING, Dict

from odpgen.geometry import TextProperties, TextStyle

if TYPE_CHECKING:
    from odpgen.model import Presentation

DEFAULT_PARAGRAPH_STYLE = "Pdefault"
DEFAULT_GRAPHIC_STYLE = "gr2"

VERTICAL_ALIGN_STYLES: Dict[str, str] = {
    "top": "V1",
    "middle": "V2",
    "bottom": "V3",
}

_UNSAFE = re.compile(r"[^\w\-]")
_PLAIN = re.compile(r"[^\W_]*")


def _safe(text: str) -> str:
    return _UNSAFE.sub("_", text)


def _plain(text: str) -> bool:
    return _PLAIN.fullmatch(text) is not None


def text_style_name(style: TextStyle) -> str:
    """Name derived from the style's field values only.

    Equal styles always produce the same name, whatever the order they are met in.
    Every field is tagged (``s`` size, ``f`` family, ``c`` colour) and the ``.`` of
    the size and the spaces of the family become ``-``. A value that this mapping
    cannot spell back exactly gets an ``h`` digest token of all the fields.
    """
    parts = ["T"]
    lossy = False
    if style.font_size:
        lossy = lossy or not _plain(style.font_size.replace(".", ""))
        parts.append("s" + _safe(style.font_size.replace(".", "-")))
    if style.font_family:
        lossy = lossy or not _plain(style.font_family.replace(" ", ""))
        parts.append("f" + _safe(style.font_family.replace(" ", "-")))
    if style.color:
        body = style.color[1:] if style.color.startswith("#") else style.color
        # a bare colour would spell the same as its "#" form
        lossy = lossy or body == style.color or not _plain(body)
        parts.append("c" + _safe(body))
    if style.bold:
        parts.append("bold")
    if style.italic:
        parts.append("italic")
    if lossy:
        raw = repr((style.font_size, style.font_family, style.color, style.bold, style.italic))
        parts.append("h" + hashlib.sha256(raw.encode("utf-8")).hexdigest()[:8])
    return "_".join(parts)


def is_default_paragraph(properties: TextProperties) -> bool:
    return properties.horizontal_align in ("", "left") and not properties.has_indents


def paragraph_style_name(slide_index: int, z_index: int, properties: TextProperties) -> str:
    if is_default_paragraph(properties):
        return DEFAULT_PARAGRAPH_STYLE
    parts = []
    if properties.horizontal_align:
        parts.append(f"h{_safe(properties.horizontal_align)}")
    parts.append(f"l{properties.left_indent:.2f}")
    parts.append(f"r{properties.right_indent:.2f}")
    parts.append(f"f{properties.first_line_indent:.2f}")
    return f"P{slide_index}_{z_index}_{'_'.join(parts)}"


def vertical_align_style(align: str) -> str:
    return VERTICAL_ALIGN_STYLES.get(align, DEFAULT_GRAPHIC_STYLE)


def collect_text_styles(presentation: "Presentation") -> Dict[str, TextStyle]:
    styles: Dict[str, TextStyle] = {}
    for slide in presentation.slides:
        for box in slide.text_boxes:
            styles.setdefault(text_style_name(box.style), box.style)
    return styles


def collect_paragraph_styles(presentation: "Presentation") -> Dict[str, TextProperties]:
    styles: Dict[str, TextProperties] = {}
    for slide in presentation.slides:
        for box in slide.text_boxes:
            name = paragraph_style_name(slide.index, box.z_index, box.properties)
            if name != DEFAULT_PARAGRAPH_STYLE:
                styles.setdefault(name, box.properties)
    return styles
