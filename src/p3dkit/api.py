"""High-level API: load P3D files from disk into a ResourceManager."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .assets.registry import DecoderRegistry, decode_known_chunks
from .config import LoaderConfig
from .errors import P3DError
from .format.chunks import describe_tree, load_file
from .format.constants import DEFAULT_MAX_FILE_SIZE
from .logging import get_logger
from .reporting import FileRecord, FileStatus, batch
from .resources.manager import LoadSummary, ResourceManager
from .utils.io import FileReadError, safe_read_file

__all__ = [
    "load_path",
    "load_from_config",
    "inspect_file",
]


def load_path(
    manager: ResourceManager,
    path: str | Path,
    *,
    strict: bool = False,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    registry: DecoderRegistry | None = None,
) -> LoadSummary:
    p = Path(path)
    data = safe_read_file(p, max_file_size)
    return manager.load_bytes(
        data, label=p.name, strict=strict, registry=registry
    )


def load_from_config(
    config: LoaderConfig,
    manager: ResourceManager | None = None,
    *,
    registry: DecoderRegistry | None = None,
) -> Tuple[ResourceManager, List[FileRecord]]:
    """Load every file named by ``config``, in order.

    A file that cannot be read or parsed is reported as failed and skipped;
    resources from earlier files stay in place.
    """
    logger = get_logger()
    mgr = manager if manager is not None else ResourceManager(seed=config.seed)
    records: List[FileRecord] = []
    with batch("Loading P3D files", total=len(config.files)) as rep:
        for path in config.files:
            rec = FileRecord(label=path.name)
            try:
                summary = load_path(
                    mgr,
                    path,
                    strict=config.strict,
                    max_file_size=config.max_file_size,
                    registry=registry,
                )
            except (P3DError, FileReadError, OSError) as e:
                rec.status = FileStatus.FAILED
                rec.error = str(e)
                logger.error("Failed to load %s: %s", path.name, e)
            else:
                rec.size = summary.size
                rec.counts = dict(summary.decoded)
                rec.failures = len(summary.failures)
                if summary.failures:
                    rec.status = FileStatus.PARTIAL
            rec.end_time = time.time()
            records.append(rec)
            rep.file_done(rec)
    return mgr, records


def inspect_file(
    path: str | Path,
    *,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    registry: DecoderRegistry | None = None,
) -> Dict[str, Any]:
    """Chunk tree plus a per-category decode tally for one file."""
    p = Path(path)
    data = safe_read_file(p, max_file_size)
    root = load_file(data)
    result = decode_known_chunks(root, registry)
    return {
        "file": p.name,
        "size": len(data),
        "tree": describe_tree(root),
        "decoded": result.counts(),
        "failures": [
            {"chunk": f.name, "offset": f.offset, **f.error.to_dict()}
            for f in result.failures
        ],
    }
