from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional

__all__ = [
    "FileStatus",
    "FileRecord",
    "Reporter",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "batch",
]


class FileStatus(Enum):
    LOADED = auto()
    PARTIAL = auto()  # some chunks failed to decode
    FAILED = auto()


@dataclass(slots=True)
class FileRecord:
    label: str
    status: FileStatus = FileStatus.LOADED
    size: int = 0
    counts: Dict[str, int] = field(default_factory=dict)
    failures: int = 0
    error: Optional[str] = None
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None

    @property
    def duration(self) -> float:
        return (self.end_time - self.start_time) if self.end_time else 0.0

    def stats_text(self) -> str:
        parts = [f"{k}={v}" for k, v in sorted(self.counts.items()) if v]
        if self.failures:
            parts.append(f"failures={self.failures}")
        return " ".join(parts)


_VERBOSITY: int = 0


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter:
    supports_progress: bool = False

    def start_batch(self, name: str, total: int | None = None) -> None:
        raise NotImplementedError

    def file_done(self, record: FileRecord) -> None:
        raise NotImplementedError

    def end_batch(self, ok: bool = True) -> None:
        raise NotImplementedError

    def status(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        # gated by global verbosity; ignored unless overridden
        pass

    def error(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def section(self, title: str) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        pass


_ACTIVE_REPORTER: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _ACTIVE_REPORTER
    _ACTIVE_REPORTER = rep


def get_reporter() -> Reporter:
    global _ACTIVE_REPORTER
    if _ACTIVE_REPORTER is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _ACTIVE_REPORTER = PlainReporter(stream=sys.stderr)
    return _ACTIVE_REPORTER


@contextmanager
def batch(name: str, total: int | None = None):
    rep = get_reporter()
    rep.start_batch(name, total)
    try:
        yield rep
    except Exception:
        rep.end_batch(ok=False)
        raise
    else:
        rep.end_batch(ok=True)
