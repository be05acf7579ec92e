from __future__ import annotations

import json
import sys
from typing import Any

from .base import FileRecord, Reporter, get_verbosity


class JsonLinesReporter(Reporter):
    """Machine-readable JSON lines reporter."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def _emit(self, obj: dict) -> None:
        self.stream.write(json.dumps(obj, sort_keys=True) + "\n")

    def start_batch(self, name: str, total: int | None = None) -> None:
        self._emit({"event": "batch_start", "name": name, "total": total})

    def file_done(self, record: FileRecord) -> None:
        self._emit(
            {
                "event": "file",
                "file": record.label,
                "status": record.status.name.lower(),
                "size": record.size,
                "counts": dict(record.counts),
                "failures": record.failures,
                "error": record.error,
                "duration_seconds": record.duration,
            }
        )

    def end_batch(self, ok: bool = True) -> None:
        self._emit({"event": "batch_end", "ok": ok})

    def status(self, message: str, **fields: Any) -> None:
        self._emit(
            {"event": "status", "message": message, "level": "info", **fields}
        )

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self._emit(
            {
                "event": "status",
                "message": message,
                "level": f"verbose{level}",
                **fields,
            }
        )

    def error(self, message: str, **fields: Any) -> None:
        self._emit(
            {"event": "status", "message": message, "level": "error", **fields}
        )

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(
            {
                "event": "status",
                "message": message,
                "level": "warning",
                **fields,
            }
        )

    def section(self, title: str) -> None:
        self._emit({"event": "section", "title": title})
