#!/usr/bin/env python3
"""ZIP container assembly for ODP presentations."""

from __future__ import annotations

import io
import os
import tempfile
import time
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Tuple
from zipfile import ZIP_DEFLATED, ZIP_STORED, ZipFile, ZipInfo

from odpgen.errors import IOFailure, OdpError
from odpgen.xml_parts import (
    CONFIGURATIONS_PATH,
    CONTENT_PATH,
    MANIFEST_PATH,
    MIMETYPE,
    SETTINGS_PATH,
    STYLES_PATH,
    configurations_xml,
    content_xml,
    manifest_xml,
    settings_xml,
    styles_xml,
)

if TYPE_CHECKING:
    from odpgen.model import Presentation

MIMETYPE_PATH = "mimetype"
ODP_SUFFIX = ".odp"

# Fixed entry metadata keeps repeated saves byte-identical.
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
ENTRY_MODE = 0o644 << 16

TELEMETRY_MODULE = "odpgen.archive"


def _entry(name: str, compress_type: int) -> ZipInfo:
    info = ZipInfo(name, date_time=ENTRY_DATE_TIME)
    info.compress_type = compress_type
    info.external_attr = ENTRY_MODE
    return info


def archive_members(presentation: "Presentation") -> List[Tuple[str, bytes]]:
    """Every member of the archive, in write order."""
    members: List[Tuple[str, bytes]] = [
        (MIMETYPE_PATH, MIMETYPE.encode("ascii")),
        (CONTENT_PATH, content_xml(presentation).encode("utf-8")),
        (STYLES_PATH, styles_xml(presentation).encode("utf-8")),
        (SETTINGS_PATH, settings_xml(presentation).encode("utf-8")),
        (CONFIGURATIONS_PATH, configurations_xml(presentation).encode("utf-8")),
        (MANIFEST_PATH, manifest_xml(presentation).encode("utf-8")),
    ]
    members.extend(presentation.iter_embedded_media())
    return members


def _zip_bytes(presentation: "Presentation") -> bytes:
    buf = io.BytesIO()
    try:
        with ZipFile(buf, "w") as zf:
            for name, data in archive_members(presentation):
                zf.writestr(_entry(name, ZIP_STORED if name == MIMETYPE_PATH else ZIP_DEFLATED), data)
    except (OSError, zipfile.BadZipFile) as exc:
        raise IOFailure(f"archive write failed: {exc}") from exc
    return buf.getvalue()


def _meta(presentation: "Presentation", size: int = 0) -> Dict[str, Any]:
    return {
        "slides": presentation.slide_count,
        "media": sum(1 for _ in presentation.iter_embedded_media()),
        "bytes": size,
    }


def _emit(presentation: "Presentation", action: str, started: float, *, size: int = 0, error: OdpError | None = None, meta: Dict[str, Any] | None = None) -> None:
    payload = _meta(presentation, size)
    payload.update(meta or {})
    presentation.telemetry.emit(
        module=TELEMETRY_MODULE,
        action=action,
        status="failed" if error else "ok",
        latency_ms=int((time.monotonic() - started) * 1000),
        error_code=error.code if error else "",
        error_message=error.message if error else "",
        meta=payload,
    )


def build_archive(presentation: "Presentation") -> bytes:
    started = time.monotonic()
    try:
        data = _zip_bytes(presentation)
    except OdpError as exc:
        _emit(presentation, "save_stream", started, error=exc)
        raise
    _emit(presentation, "save_stream", started, size=len(data))
    return data


def odp_path(filename: str | Path) -> Path:
    text = str(filename)
    if not text.endswith(ODP_SUFFIX):
        text += ODP_SUFFIX
    return Path(text)


def _write_atomic(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def write_archive(presentation: "Presentation", filename: str | Path) -> Path:
    path = odp_path(filename)
    data = presentation.save_stream()
    started = time.monotonic()
    try:
        _write_atomic(path, data)
    except OSError as exc:
        error = IOFailure(f"cannot write {path}: {exc}", path=str(path))
        _emit(presentation, "save", started, size=len(data), error=error, meta={"path": str(path)})
        raise error from exc
    _emit(presentation, "save", started, size=len(data), meta={"path": str(path)})
    return path
