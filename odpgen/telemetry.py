#!/usr/bin/env python3
"""JSONL telemetry events for archive generation."""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, Optional


def _iso_now() -> str:
    return dt.datetime.now().isoformat(timespec="seconds")


class TelemetryClient:
    def __init__(self, *, events_file: Path):
        self.events_file = Path(events_file)
        self.events_file.parent.mkdir(parents=True, exist_ok=True)

    def emit(
        self,
        *,
        module: str,
        action: str,
        status: str,
        latency_ms: int = 0,
        error_code: str = "",
        error_message: str = "",
        meta: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "ts": _iso_now(),
            "module": module,
            "action": action,
            "status": status,
            "latency_ms": int(latency_ms or 0),
            "error_code": error_code,
            "error_message": error_message,
            "meta": meta or {},
        }
        with self.events_file.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return payload


class NullTelemetry:
    """Drop-in client used when no events file is configured."""

    def emit(self, **kwargs: Any) -> Dict[str, Any]:
        return {}


def telemetry_for(events_file: Optional[Path]) -> "TelemetryClient | NullTelemetry":
    if events_file is None:
        return NullTelemetry()
    return TelemetryClient(events_file=events_file)
