"""Generic chunk tree builder.

Builds a tree of opaque chunks from a P3D buffer without knowing what any tag
means. Each chunk header is ``tag:u32, data_size:u32, total_size:u32`` where
``data_size`` covers header + payload and ``total_size`` additionally covers
the child region. Children are parsed until the child region is exhausted.

Public functions:
- load_file(data) -> Chunk
- parse_chunk(view, offset, end) -> Chunk
- describe_tree(chunk) -> dict
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..errors import (
    E_BAD_SIGNATURE,
    OutOfBounds,
    ParseError,
    corrupt_chunk,
)
from ..logging import get_logger
from .constants import (
    CHUNK_HEADER_SIZE,
    MAX_CHUNK_DEPTH,
    SIGNATURE,
    SIGNATURE_COMPRESSED,
    SIGNATURE_SWAPPED,
    tag_name,
)
from .cursor import Buffer, ByteCursor

__all__ = [
    "Chunk",
    "load_file",
    "parse_chunk",
    "describe_tree",
]


@dataclass(slots=True, eq=False)
class Chunk:
    tag: int
    offset: int
    payload: memoryview
    total_size: int
    children: Tuple["Chunk", ...] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return tag_name(self.tag)

    @property
    def payload_size(self) -> int:
        return len(self.payload)

    def cursor(self) -> ByteCursor:
        return ByteCursor(self.payload)

    def find(self, tag: int) -> Optional["Chunk"]:
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def find_all(self, tag: int) -> List["Chunk"]:
        return [c for c in self.children if c.tag == tag]

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, "Chunk"]]:
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)

    def __repr__(self) -> str:
        return (
            f"Chunk({self.name}, offset={self.offset}, "
            f"payload={self.payload_size}, children={len(self.children)})"
        )


def parse_chunk(
    view: memoryview, offset: int, end: int, depth: int = 0
) -> Chunk:
    """Parse the chunk at ``offset`` whose extent may not pass ``end``."""
    if depth > MAX_CHUNK_DEPTH:
        raise corrupt_chunk(
            f"Chunk nesting deeper than {MAX_CHUNK_DEPTH}",
            {"offset": offset, "depth": depth},
        )
    cur = ByteCursor(view, offset, end)
    try:
        tag = cur.read_u32()
        data_size = cur.read_u32()
        total_size = cur.read_u32()
    except OutOfBounds as e:
        raise corrupt_chunk(
            "Truncated chunk header",
            {"offset": offset, "available": end - offset},
        ) from e
    ctx = {
        "tag": tag_name(tag),
        "offset": offset,
        "data_size": data_size,
        "total_size": total_size,
    }
    if data_size < CHUNK_HEADER_SIZE or total_size < data_size:
        raise corrupt_chunk("Inconsistent chunk sizes", ctx)
    if offset + total_size > end:
        raise corrupt_chunk(
            "Chunk extent overruns enclosing region", {**ctx, "end": end}
        )
    payload = view[offset + CHUNK_HEADER_SIZE : offset + data_size]
    children: List[Chunk] = []
    pos = offset + data_size
    child_end = offset + total_size
    while pos < child_end:
        child = parse_chunk(view, pos, child_end, depth + 1)
        children.append(child)
        pos += child.total_size
    return Chunk(
        tag=tag,
        offset=offset,
        payload=payload,
        total_size=total_size,
        children=tuple(children),
    )


def load_file(data: Buffer) -> Chunk:
    """Parse a whole P3D buffer into its root chunk.

    Raises ``ParseError`` (or its subclasses ``OutOfBounds`` /
    ``CorruptChunk``) when the file structure itself is unusable.
    """
    view = memoryview(data).cast("B")
    signature = ByteCursor(view).read_u32()
    if signature != SIGNATURE:
        if signature == SIGNATURE_SWAPPED:
            reason = "big-endian P3D files are not supported"
        elif signature == SIGNATURE_COMPRESSED:
            reason = "compressed P3DZ files are not supported"
        else:
            reason = "not a P3D file"
        raise ParseError(
            code=E_BAD_SIGNATURE,
            message=reason,
            context={"signature": f"0x{signature:08X}"},
        )
    root = parse_chunk(view, 0, len(view))
    if root.total_size != len(view):
        raise corrupt_chunk(
            "Trailing bytes after root chunk",
            {"root_size": root.total_size, "file_size": len(view)},
        )
    get_logger().debug(
        "Parsed P3D root: %d bytes, %d top-level chunks",
        len(view),
        len(root.children),
    )
    return root


def describe_tree(chunk: Chunk) -> Dict[str, Any]:
    return {
        "tag": chunk.tag,
        "name": chunk.name,
        "offset": chunk.offset,
        "payload_size": chunk.payload_size,
        "total_size": chunk.total_size,
        "children": [describe_tree(c) for c in chunk.children],
    }
