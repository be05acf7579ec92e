from .base import (
    FileRecord,
    FileStatus,
    Reporter,
    batch,
    get_reporter,
    set_reporter,
)
from .base import (
    set_verbosity,
    get_verbosity,
)
from .plain import PlainReporter
from .jsonl import JsonLinesReporter
from .silent import SilentReporter
from .rich_reporter import RichReporter

__all__ = [
    "FileRecord",
    "FileStatus",
    "Reporter",
    "batch",
    "get_reporter",
    "set_reporter",
    "set_verbosity",
    "get_verbosity",
    "PlainReporter",
    "JsonLinesReporter",
    "SilentReporter",
    "RichReporter",
]
