"""Bounds-checked sequential reader over an in-memory buffer.

Every primitive read either succeeds and advances the cursor, or raises
``OutOfBounds`` and leaves the offset where it was.
"""

from __future__ import annotations

import struct
from typing import Tuple, Union

from ..errors import out_of_bounds
from .constants import BYTE_ORDER

__all__ = ["ByteCursor", "Buffer"]

Buffer = Union[bytes, bytearray, memoryview]

_U8 = struct.Struct(BYTE_ORDER + "B")
_U16 = struct.Struct(BYTE_ORDER + "H")
_I16 = struct.Struct(BYTE_ORDER + "h")
_U32 = struct.Struct(BYTE_ORDER + "I")
_I32 = struct.Struct(BYTE_ORDER + "i")
_F32 = struct.Struct(BYTE_ORDER + "f")


def _text(raw: Buffer) -> str:
    return bytes(raw).partition(b"\x00")[0].decode("utf-8", errors="replace")


class ByteCursor:
    __slots__ = ("_view", "_pos", "_end")

    def __init__(
        self, data: Buffer, offset: int = 0, end: int | None = None
    ) -> None:
        view = data if isinstance(data, memoryview) else memoryview(data)
        self._view = view.cast("B") if view.format != "B" else view
        self._end = len(self._view) if end is None else end
        if not 0 <= offset <= self._end <= len(self._view):
            raise out_of_bounds(0, offset, self._end, "cursor window")
        self._pos = offset

    def tell(self) -> int:
        return self._pos

    def remaining(self) -> int:
        return self._end - self._pos

    @property
    def end(self) -> int:
        return self._end

    def _take(self, size: int, what: str = "read") -> int:
        """Reserve ``size`` bytes; return their start offset."""
        if size < 0 or self._pos + size > self._end:
            raise out_of_bounds(size, self._pos, self._end, what)
        start = self._pos
        self._pos += size
        return start

    def _unpack(self, fmt: struct.Struct):
        start = self._take(fmt.size)
        return fmt.unpack_from(self._view, start)[0]

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_i16(self) -> int:
        return self._unpack(_I16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def _read_array(self, code: str, count: int) -> Tuple:
        size = max(count, -1) * struct.calcsize(code)
        start = self._take(size, f"array[{count}{code}]")
        fmt = f"{BYTE_ORDER}{count}{code}"
        return struct.unpack_from(fmt, self._view, start)

    def read_floats(self, count: int) -> Tuple[float, ...]:
        return self._read_array("f", count)

    def read_u16s(self, count: int) -> Tuple[int, ...]:
        return self._read_array("H", count)

    def read_i16s(self, count: int) -> Tuple[int, ...]:
        return self._read_array("h", count)

    def read_u32s(self, count: int) -> Tuple[int, ...]:
        return self._read_array("I", count)

    def read_bytes(self, size: int) -> bytes:
        start = self._take(size)
        return self._view[start : start + size].tobytes()

    def read_view(self, size: int) -> memoryview:
        """Zero-copy variant of ``read_bytes``."""
        start = self._take(size)
        return self._view[start : start + size]

    def read_fixed_string(self, size: int) -> str:
        start = self._take(size)
        return _text(self._view[start : start + size])

    def read_fourcc(self) -> str:
        return self.read_fixed_string(4)

    def read_pstring(self) -> str:
        """u8 length prefix followed by that many bytes."""
        if self._pos + 1 > self._end:
            raise out_of_bounds(1, self._pos, self._end, "pstring length")
        length = self._view[self._pos]
        if self._pos + 1 + length > self._end:
            raise out_of_bounds(1 + length, self._pos, self._end, "pstring")
        self._pos += 1
        start = self._take(length)
        return _text(self._view[start : start + length])

    def read_cstring(self) -> str:
        raw = self._view[self._pos : self._end].tobytes()
        nul = raw.find(b"\x00")
        if nul < 0:
            raise out_of_bounds(len(raw) + 1, self._pos, self._end, "cstring")
        self._pos += nul + 1
        return raw[:nul].decode("utf-8", errors="replace")

    def skip(self, size: int) -> None:
        self._take(size, "skip")

    def __repr__(self) -> str:
        return f"ByteCursor(pos={self._pos}, end={self._end})"
