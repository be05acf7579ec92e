from __future__ import annotations

import os
from typing import Any, List

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from .base import FileRecord, FileStatus, Reporter, get_verbosity

_STATUS_STYLE = {
    FileStatus.LOADED: ("✔", "green"),
    FileStatus.PARTIAL: ("!", "yellow"),
    FileStatus.FAILED: ("✖", "bold red"),
}


class RichReporter(Reporter):
    supports_progress = True

    def __init__(self, console: Console | None = None):
        self.console = console or Console(
            stderr=True, highlight=False, soft_wrap=False
        )
        self._transient = os.getenv(
            "P3DKIT_PROGRESS_TRANSIENT", "0"
        ).lower() in ("1", "true", "yes")
        self.progress: Progress | None = None
        self._task_id: Any = None
        self._records: List[FileRecord] = []

    def start_batch(self, name: str, total: int | None = None) -> None:
        self._records = []
        if total is None:
            self.console.rule(name)
            return
        self.progress = Progress(
            SpinnerColumn(spinner_name="dots"),
            TextColumn("{task.description}", justify="left"),
            BarColumn(bar_width=None),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            transient=self._transient,
            console=self.console,
            expand=True,
        )
        self.progress.start()
        self._task_id = self.progress.add_task(name, total=total)

    def file_done(self, record: FileRecord) -> None:
        self._records.append(record)
        if self.progress is not None:
            self.progress.update(
                self._task_id, advance=1, description=record.label
            )
        if not self._transient:
            icon, style = _STATUS_STYLE.get(record.status, ("?", "white"))
            stats = record.stats_text()
            self.console.print(
                f"[{style}]{icon}[/] {record.label} ({record.duration:.2f}s)"
                + (f" [dim]{stats}[/]" if stats else "")
            )
            if record.error:
                self.console.print(f"  [red]{record.error}[/]")

    def end_batch(self, ok: bool = True) -> None:
        self.flush()
        if not self._records:
            return
        table = Table(title="Loaded files" if ok else "Loaded files (aborted)")
        table.add_column("File")
        table.add_column("Status")
        table.add_column("Bytes", justify="right")
        table.add_column("Resources")
        for rec in self._records:
            _, style = _STATUS_STYLE.get(rec.status, ("?", "white"))
            table.add_row(
                rec.label,
                f"[{style}]{rec.status.name.lower()}[/]",
                str(rec.size),
                rec.stats_text(),
            )
        self.console.print(table)
        self._records = []

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {message}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self.console.print(f"[cyan]VERB{level}[/]: {message}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {message}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {message}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        if self.progress is not None:
            try:
                self.progress.stop()
            finally:
                self.progress = None
                self._task_id = None
