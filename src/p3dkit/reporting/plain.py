from __future__ import annotations

import sys
from typing import Any

from .base import FileRecord, FileStatus, Reporter, get_verbosity

ICONS = {
    FileStatus.LOADED: "✔",
    FileStatus.PARTIAL: "!",
    FileStatus.FAILED: "✖",
}


def _size_text(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f}MB"
    if size >= 1024:
        return f"{size / 1024:.1f}KB"
    return f"{size}B"


class PlainReporter(Reporter):
    """Line-oriented reporter with optional ANSI color."""

    def __init__(self, stream=None, use_color: bool | None = None):
        self.stream = stream or sys.stderr
        self.use_color = (
            use_color
            if use_color is not None
            else getattr(self.stream, "isatty", lambda: False)()
        )
        self._batch: str | None = None
        self._done = 0
        self._total: int | None = None

    def _c(self, code: str, text: str) -> str:
        if not self.use_color:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"

    def start_batch(self, name: str, total: int | None = None) -> None:
        self._batch = name
        self._done = 0
        self._total = total

    def file_done(self, record: FileRecord) -> None:
        self._done += 1
        icon = ICONS.get(record.status, "?")
        progress = (
            f" ({self._done}/{self._total})" if self._total is not None else ""
        )
        stats = record.stats_text()
        stats_part = f" [{stats}]" if stats else ""
        self.stream.write(
            f" {icon} {record.label} {_size_text(record.size)}"
            f"{progress} ({record.duration:.2f}s){stats_part}\n"
        )
        if record.error:
            self.stream.write(f"   {self._c('31', record.error)}\n")

    def end_batch(self, ok: bool = True) -> None:
        if self._batch is None:
            return
        word = self._c("32", "done") if ok else self._c("31", "aborted")
        self.stream.write(f"{self._batch}: {word} ({self._done} files)\n")
        self._batch = None

    def status(self, message: str, **fields: Any) -> None:
        self.stream.write(f"{self._c('32', 'INFO')}: {message}\n")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self.stream.write(f"{self._c('36', f'VERB{level}')}: {message}\n")

    def error(self, message: str, **fields: Any) -> None:
        self.stream.write(f"{self._c('31', 'ERROR')}: {message}\n")

    def warning(self, message: str, **fields: Any) -> None:
        self.stream.write(f"{self._c('33', 'WARN')}: {message}\n")

    def section(self, title: str) -> None:
        self.stream.write(f"\n[{title}]\n")
