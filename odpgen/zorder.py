#!/usr/bin/env python3
"""Paint order of a slide's text boxes and images."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List

if TYPE_CHECKING:
    from odpgen.model import Slide

KIND_TEXTBOX = "textbox"
KIND_IMAGE = "image"


@dataclass(frozen=True)
class DrawableElement:
    kind: str
    z_index: int
    item: Any


def sorted_elements(slide: "Slide") -> List[DrawableElement]:
    """Text boxes then images, stable-sorted by z-index.

    Equal z-indices keep their position in that concatenation, so a text box
    always precedes an image sharing its z-index.
    """
    elements = [DrawableElement(KIND_TEXTBOX, box.z_index, box) for box in slide.text_boxes]
    elements.extend(DrawableElement(KIND_IMAGE, image.z_index, image) for image in slide.images)
    return sorted(elements, key=lambda element: element.z_index)


def duplicate_z_indices(slide: "Slide") -> List[int]:
    counts = Counter(box.z_index for box in slide.text_boxes)
    counts.update(image.z_index for image in slide.images)
    return sorted(z for z, count in counts.items() if count > 1)
