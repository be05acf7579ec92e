"""Path helpers for configuration-relative file lists."""

from __future__ import annotations
from pathlib import Path

__all__ = ["safe_file_path"]


def safe_file_path(base_dir: Path, file_path: str | Path) -> Path:
    """Resolve ``file_path`` under ``base_dir``; ValueError if it escapes."""
    root = Path(base_dir).resolve()
    target = (root / file_path).resolve()
    if not target.is_relative_to(root):
        raise ValueError(f"{file_path} resolves outside {root}")
    return target
