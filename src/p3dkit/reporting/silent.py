from __future__ import annotations

from .base import FileRecord, Reporter


class SilentReporter(Reporter):
    """No-op reporter (quiet mode)."""

    def start_batch(self, name: str, total: int | None = None) -> None:
        pass

    def file_done(self, record: FileRecord) -> None:
        pass

    def end_batch(self, ok: bool = True) -> None:
        pass

    def status(self, message: str, **fields):
        pass

    def error(self, message: str, **fields):
        pass

    def warning(self, message: str, **fields):
        pass

    def section(self, title: str) -> None:
        pass
