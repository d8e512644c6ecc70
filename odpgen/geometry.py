#!/usr/bin/env python3
"""Value types for slide geometry, text styling and embedded media."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Dict, Optional

from odpgen.errors import InvalidColorFormat, UnsupportedFormat

ASPECT_RATIO_16_9 = "16:9"
ASPECT_RATIO_4_3 = "4:3"

SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg")

MEDIA_TYPES: Dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".svg": "image/svg+xml",
}

HORIZONTAL_ALIGNS = ("left", "center", "right", "justify")
VERTICAL_ALIGNS = ("top", "middle", "bottom")

_HEX_DIGITS = set(string.hexdigits)


@dataclass(frozen=True)
class SlideSize:
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}


SIZE_16_9 = SlideSize(width=33.867, height=19.05)
SIZE_4_3 = SlideSize(width=25.4, height=19.05)

PRESET_SIZES: Dict[str, SlideSize] = {
    ASPECT_RATIO_16_9: SIZE_16_9,
    ASPECT_RATIO_4_3: SIZE_4_3,
}


@dataclass(frozen=True)
class TextStyle:
    """Character formatting captured by value on every text box.

    Empty strings and false flags mean "inherit"; they are left out of the
    emitted style definition and of the generated style name.
    """

    font_size: str = ""
    font_family: str = ""
    color: str = ""
    bold: bool = False
    italic: bool = False

    @classmethod
    def sized(cls, points: float, font_family: str, color: str, bold: bool = False, italic: bool = False) -> "TextStyle":
        return cls(
            font_size=f"{float(points):.2f}pt",
            font_family=font_family,
            color=color,
            bold=bool(bold),
            italic=bool(italic),
        )


@dataclass(frozen=True)
class TextProperties:
    horizontal_align: str = "left"
    vertical_align: str = "top"
    left_indent: float = 0.0
    right_indent: float = 0.0
    first_line_indent: float = 0.0

    @property
    def has_indents(self) -> bool:
        return bool(self.left_indent or self.right_indent or self.first_line_indent)


DEFAULT_TEXT_PROPERTIES = TextProperties()


def resolve_properties(properties: Optional[TextProperties]) -> TextProperties:
    """Absent properties resolve to left/top alignment with zero indents."""
    if properties is None:
        return DEFAULT_TEXT_PROPERTIES
    return properties


def normalize_extension(extension: str) -> str:
    ext = str(extension or "").strip().lower()
    if not ext.startswith("."):
        ext = "." + ext
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormat(f"unsupported image format: {ext}", extension=ext, supported=list(SUPPORTED_EXTENSIONS))
    return ext


def normalize_color(color: str) -> str:
    text = str(color or "").strip()
    if not text.startswith("#"):
        text = "#" + text
    if len(text) != 7:
        raise InvalidColorFormat("colour must be #RRGGBB", color=color)
    if any(ch not in _HEX_DIGITS for ch in text[1:]):
        raise InvalidColorFormat("colour contains non-hex digits", color=color)
    return text.upper()


def media_type_for(name: str) -> str:
    dot = name.rfind(".")
    ext = name[dot:].lower() if dot >= 0 else ""
    return MEDIA_TYPES.get(ext, "image/" + ext.lstrip("."))


def format_cm(value: float) -> str:
    return f"{float(value):.2f}cm"


def format_number(value: float) -> str:
    return f"{float(value):g}"
