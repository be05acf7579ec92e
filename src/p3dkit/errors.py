"""Error definitions for p3dkit."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_OUT_OF_BOUNDS = "E_OUT_OF_BOUNDS"
E_CORRUPT_CHUNK = "E_CORRUPT_CHUNK"
E_BAD_SIGNATURE = "E_BAD_SIGNATURE"
E_DECODE = "E_DECODE"
E_BAD_ENUM = "E_BAD_ENUM"
E_MISSING_CHILD = "E_MISSING_CHILD"
E_CONFIG = "E_CONFIG"


@dataclass
class P3DError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class ParseError(P3DError):
    """File structure could not be read (signature, framing, bounds)."""


class OutOfBounds(ParseError):
    pass


class CorruptChunk(ParseError):
    pass


class DecodeError(P3DError):
    """A known chunk's payload does not match its expected layout."""


class ConfigError(P3DError):
    pass


def out_of_bounds(
    size: int, offset: int, end: int, what: str = "read"
) -> OutOfBounds:
    return OutOfBounds(
        code=E_OUT_OF_BOUNDS,
        message=f"{what} of {size} bytes at offset {offset} exceeds end {end}",
        context={"size": size, "offset": offset, "end": end},
    )


def corrupt_chunk(
    message: str, context: Optional[Dict[str, Any]] = None
) -> CorruptChunk:
    return CorruptChunk(code=E_CORRUPT_CHUNK, message=message, context=context)


def decode_error(
    message: str,
    context: Optional[Dict[str, Any]] = None,
    *,
    code: str = E_DECODE,
) -> DecodeError:
    return DecodeError(code=code, message=message, context=context)


def config_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> ConfigError:
    return ConfigError(code=E_CONFIG, message=message, context=context)


__all__ = [
    "P3DError",
    "ParseError",
    "OutOfBounds",
    "CorruptChunk",
    "DecodeError",
    "ConfigError",
    "out_of_bounds",
    "corrupt_chunk",
    "decode_error",
    "config_error",
    "E_OUT_OF_BOUNDS",
    "E_CORRUPT_CHUNK",
    "E_BAD_SIGNATURE",
    "E_DECODE",
    "E_BAD_ENUM",
    "E_MISSING_CHILD",
    "E_CONFIG",
]
