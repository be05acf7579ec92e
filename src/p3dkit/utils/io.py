"""File reading helpers."""

from __future__ import annotations
from pathlib import Path

from ..format.constants import DEFAULT_MAX_FILE_SIZE

__all__ = ["safe_read_file", "FileReadError"]


class FileReadError(RuntimeError):
    pass


def safe_read_file(path: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> bytes:
    if not path.is_file():
        raise FileReadError(f"File not found: {path}")
    size = path.stat().st_size
    if size > max_size:
        raise FileReadError(f"File too large: {size}>{max_size}")
    return path.read_bytes()
