#!/usr/bin/env python3
"""Typed errors raised by the ODP builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class OdpError(Exception):
    """Base typed exception with stable error code and metadata."""

    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidReference(OdpError):
    """Slide handle does not belong to the presentation."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="INVALID_REFERENCE", message=message, details=details)


class UnsupportedFormat(OdpError):
    """Image extension outside the supported set."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="UNSUPPORTED_FORMAT", message=message, details=details)


class EmptyPayload(OdpError):
    """Zero-length image payload."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="EMPTY_PAYLOAD", message=message, details=details)


class InvalidDimensions(OdpError):
    """Non-positive width or height for a placed image."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="INVALID_DIMENSIONS", message=message, details=details)


class OutOfBounds(OdpError):
    """Placement rectangle leaves the slide."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="OUT_OF_BOUNDS", message=message, details=details)


class InvalidColorFormat(OdpError):
    """Colour is not a #RRGGBB hex string."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="INVALID_COLOR_FORMAT", message=message, details=details)


class IOFailure(OdpError):
    """A file read, archive build or file write failed; the original exception is chained as __cause__."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="IO_FAILURE", message=message, details=details)
