#!/usr/bin/env python3
"""In-memory presentation model and the mutation API that grows it."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from odpgen import archive
from odpgen.config import OdpConfig
from odpgen.errors import EmptyPayload, InvalidDimensions, InvalidReference, OutOfBounds
from odpgen.geometry import (
    SlideSize,
    TextProperties,
    TextStyle,
    normalize_color,
    normalize_extension,
    resolve_properties,
)
from odpgen.telemetry import telemetry_for

TITLE_PROPERTIES = TextProperties(horizontal_align="center", vertical_align="middle")
BODY_PROPERTIES = TextProperties(horizontal_align="left", vertical_align="top")

MARGIN_X = 2.0
TITLE_Y = 1.0
TITLE_HEIGHT = 3.506
BODY_Y = 5.5
BODY_HEIGHT = 13.23


class BackgroundKind(str, Enum):
    IMAGE = "image"
    COLOR = "color"


@dataclass(frozen=True)
class Background:
    kind: BackgroundKind
    data: bytes = b""
    name: str = ""
    color: str = ""

    @classmethod
    def image(cls, data: bytes, name: str) -> "Background":
        return cls(kind=BackgroundKind.IMAGE, data=bytes(data), name=name)

    @classmethod
    def solid(cls, color: str) -> "Background":
        return cls(kind=BackgroundKind.COLOR, color=color)

    @property
    def is_image(self) -> bool:
        return self.kind is BackgroundKind.IMAGE


@dataclass(frozen=True)
class SlideRef:
    """Opaque handle issued by add_slide/add_blank_slide."""

    owner: str
    index: int


@dataclass
class TextBox:
    content: str
    x: float
    y: float
    width: float
    height: float
    style: TextStyle
    properties: TextProperties
    z_index: int


@dataclass
class Image:
    data: bytes
    x: float
    y: float
    width: float
    height: float
    name: str
    z_index: int


@dataclass
class Slide:
    index: int
    text_boxes: List[TextBox] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)
    background: Optional[Background] = None
    # Builder cursor: copied by value into each new text box, changed only by set_text_style.
    current_style: TextStyle = field(default_factory=TextStyle)
    max_z_index: int = 0

    def next_z_index(self, explicit: Optional[int] = None) -> int:
        z_index = self.max_z_index + 1 if explicit is None else int(explicit)
        self.max_z_index = max(self.max_z_index, z_index)
        return z_index


class Presentation:
    def __init__(self, config: Optional[OdpConfig] = None, telemetry: Any = None):
        self.config = config or OdpConfig()
        self.slide_size: SlideSize = self.config.default_size
        self.background: Optional[Background] = None
        self.slides: List[Slide] = []
        self.telemetry = telemetry if telemetry is not None else telemetry_for(self.config.telemetry_events_file)
        self._owner = uuid.uuid4().hex

    # -- size -----------------------------------------------------------

    def set_slide_size(self, preset: str) -> None:
        self.slide_size = self.config.preset(preset)

    def set_custom_slide_size(self, width: float, height: float) -> None:
        self.slide_size = SlideSize(width=float(width), height=float(height))

    # -- slides ---------------------------------------------------------

    @property
    def slide_count(self) -> int:
        return len(self.slides)

    def slide(self, ref: SlideRef) -> Slide:
        if not isinstance(ref, SlideRef) or ref.owner != self._owner:
            raise InvalidReference("slide does not belong to this presentation", ref=repr(ref))
        if not 0 <= ref.index < len(self.slides):
            raise InvalidReference("slide index out of range", index=ref.index, slide_count=len(self.slides))
        return self.slides[ref.index]

    def _new_slide(self) -> Tuple[Slide, SlideRef]:
        slide = Slide(index=len(self.slides))
        self.slides.append(slide)
        return slide, SlideRef(owner=self._owner, index=slide.index)

    def add_blank_slide(self) -> SlideRef:
        _, ref = self._new_slide()
        return ref

    def add_slide(self, title: str = "", content: str = "") -> SlideRef:
        slide, ref = self._new_slide()
        width = self.slide_size.width - 2 * MARGIN_X
        if title:
            self._append_text_box(slide, title, MARGIN_X, TITLE_Y, width, TITLE_HEIGHT, self.config.title_style, TITLE_PROPERTIES, None)
        if content:
            self._append_text_box(slide, content, MARGIN_X, BODY_Y, width, BODY_HEIGHT, self.config.body_style, BODY_PROPERTIES, None)
        return ref

    # -- text -----------------------------------------------------------

    def set_text_style(
        self,
        ref: SlideRef,
        font_size: float,
        font_family: str,
        color: str,
        bold: bool = False,
        italic: bool = False,
    ) -> None:
        slide = self.slide(ref)
        slide.current_style = TextStyle.sized(font_size, font_family, color, bold, italic)

    def add_text_box(
        self,
        ref: SlideRef,
        content: str,
        x: float,
        y: float,
        width: float,
        height: float,
        properties: Optional[TextProperties] = None,
        z_index: Optional[int] = None,
    ) -> TextBox:
        slide = self.slide(ref)
        return self._append_text_box(slide, content, x, y, width, height, slide.current_style, properties, z_index)

    def _append_text_box(
        self,
        slide: Slide,
        content: str,
        x: float,
        y: float,
        width: float,
        height: float,
        style: TextStyle,
        properties: Optional[TextProperties],
        z_index: Optional[int],
    ) -> TextBox:
        box = TextBox(
            content=str(content),
            x=float(x),
            y=float(y),
            width=float(width),
            height=float(height),
            style=style,
            properties=resolve_properties(properties),
            z_index=slide.next_z_index(z_index),
        )
        slide.text_boxes.append(box)
        return box

    # -- images ---------------------------------------------------------

    def add_image(
        self,
        ref: SlideRef,
        data: bytes,
        extension: str,
        x: float,
        y: float,
        width: float,
        height: float,
        z_index: Optional[int] = None,
    ) -> Image:
        slide = self.slide(ref)
        ext = normalize_extension(extension)
        payload = _payload(data)
        if width <= 0 or height <= 0:
            raise InvalidDimensions("image width and height must be positive", width=width, height=height)
        size = self.slide_size
        if x < 0 or y < 0 or x + width > size.width or y + height > size.height:
            raise OutOfBounds(
                f"image leaves the slide ({size.width:.2f} x {size.height:.2f})",
                x=x,
                y=y,
                width=width,
                height=height,
                slide_width=size.width,
                slide_height=size.height,
            )
        image = Image(
            data=payload,
            x=float(x),
            y=float(y),
            width=float(width),
            height=float(height),
            name=f"Pictures/slide{slide.index}_image{len(slide.images)}{ext}",
            z_index=slide.next_z_index(z_index),
        )
        slide.images.append(image)
        return image

    # -- backgrounds ----------------------------------------------------

    def set_background_image(self, data: bytes, extension: str) -> None:
        ext = normalize_extension(extension)
        self.background = Background.image(_payload(data), f"media/background{ext}")

    def set_slide_background(self, ref: SlideRef, data: bytes, extension: str) -> None:
        slide = self.slide(ref)
        ext = normalize_extension(extension)
        slide.background = Background.image(_payload(data), f"media/slide{slide.index}_background{ext}")

    def set_background_color(self, color: str) -> None:
        self.background = Background.solid(normalize_color(color))

    def set_slide_background_color(self, ref: SlideRef, color: str) -> None:
        slide = self.slide(ref)
        slide.background = Background.solid(normalize_color(color))

    # -- read helpers ---------------------------------------------------

    def iter_embedded_media(self) -> Iterator[Tuple[str, bytes]]:
        """Binary members in archive order."""
        if self.background is not None and self.background.is_image:
            yield self.background.name, self.background.data
        for slide in self.slides:
            if slide.background is not None and slide.background.is_image:
                yield slide.background.name, slide.background.data
        for slide in self.slides:
            for image in slide.images:
                yield image.name, image.data

    def describe(self) -> Dict[str, Any]:
        return {
            "slide_count": len(self.slides),
            "slide_size": self.slide_size.to_dict(),
            "text_boxes": sum(len(slide.text_boxes) for slide in self.slides),
            "media": [name for name, _ in self.iter_embedded_media()],
        }

    # -- output ---------------------------------------------------------

    def save_stream(self) -> bytes:
        return archive.build_archive(self)

    def save(self, filename: str | Path) -> Path:
        return archive.write_archive(self, filename)


def _payload(data: Any) -> bytes:
    if not data:
        raise EmptyPayload("image payload is empty")
    return bytes(data)
