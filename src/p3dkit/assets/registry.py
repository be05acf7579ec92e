"""Tag -> decoder dispatch.

A ``DecoderRegistry`` maps chunk tags to ``(category, decode_fn)`` pairs.
Tags without an entry decode to ``RawChunk`` so that files using chunk kinds
this package does not understand still load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..errors import DecodeError
from ..format.chunks import Chunk
from ..format.constants import ChunkType as CT, tag_name
from ..logging import get_logger
from . import decoders

__all__ = [
    "Decoder",
    "DecoderRegistry",
    "DecodeFailure",
    "DecodeResult",
    "default_registry",
    "decode_chunk",
    "decode_known_chunks",
    "RAW",
]

Decoder = Callable[[Chunk], Any]

RAW = "raw"

_log = get_logger("decode")


class DecoderRegistry:
    def __init__(self) -> None:
        self._decoders: Dict[int, Tuple[str, Decoder]] = {}

    def register(
        self, tag: int, category: str, fn: Decoder | None = None
    ) -> Any:
        """Register ``fn`` for ``tag``; without ``fn`` acts as a decorator."""
        if fn is None:

            def deco(f: Decoder) -> Decoder:
                self._decoders[int(tag)] = (category, f)
                return f

            return deco
        self._decoders[int(tag)] = (category, fn)
        return fn

    def unregister(self, tag: int) -> None:
        self._decoders.pop(int(tag), None)

    def lookup(self, tag: int) -> Optional[Tuple[str, Decoder]]:
        return self._decoders.get(int(tag))

    def __contains__(self, tag: int) -> bool:
        return int(tag) in self._decoders

    def __len__(self) -> int:
        return len(self._decoders)

    def tags(self) -> List[int]:
        return sorted(self._decoders)

    def decode(self, chunk: Chunk) -> Tuple[str, Any]:
        entry = self._decoders.get(chunk.tag)
        if entry is None:
            return RAW, decoders.raw_chunk(chunk)
        category, fn = entry
        return category, fn(chunk)

    def copy(self) -> "DecoderRegistry":
        other = DecoderRegistry()
        other._decoders = dict(self._decoders)
        return other


def default_registry() -> DecoderRegistry:
    reg = DecoderRegistry()
    reg.register(CT.TEXTURE, "texture", decoders.decode_texture)
    reg.register(CT.SHADER, "shader", decoders.decode_shader)
    reg.register(CT.SET, "set", decoders.decode_set)
    reg.register(CT.SPRITE, "sprite", decoders.decode_sprite)
    reg.register(CT.GEOMETRY, "mesh", decoders.decode_geometry)
    reg.register(CT.TEXTURE_FONT, "font", decoders.decode_font)
    reg.register(CT.ANIMATION, "animation", decoders.decode_animation)
    for tag in decoders.CHANNEL_TAGS:
        reg.register(tag, "channel", decoders.decode_channel)
    return reg


_DEFAULT: DecoderRegistry | None = None


def _default() -> DecoderRegistry:
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = default_registry()
    return _DEFAULT


def decode_chunk(
    chunk: Chunk, registry: DecoderRegistry | None = None
) -> Tuple[str, Any]:
    reg = registry if registry is not None else _default()
    return reg.decode(chunk)


@dataclass(slots=True)
class DecodeFailure:
    tag: int
    offset: int
    error: DecodeError

    @property
    def name(self) -> str:
        return tag_name(self.tag)


@dataclass(slots=True)
class DecodeResult:
    """Decoded top-level chunks of one file, in file order."""

    assets: List[Tuple[str, Any]] = field(default_factory=list)
    failures: List[DecodeFailure] = field(default_factory=list)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.assets)

    def __len__(self) -> int:
        return len(self.assets)

    def of(self, category: str) -> List[Any]:
        return [a for c, a in self.assets if c == category]

    def counts(self) -> Dict[str, int]:
        out: Dict[str, int] = {}
        for category, _ in self.assets:
            out[category] = out.get(category, 0) + 1
        return out


def decode_known_chunks(
    root: Chunk,
    registry: DecoderRegistry | None = None,
    *,
    strict: bool = False,
) -> DecodeResult:
    """Decode every top-level chunk under ``root``.

    A ``DecodeError`` only drops the failing chunk unless ``strict`` is set,
    in which case it propagates and nothing is returned.
    """
    reg = registry if registry is not None else _default()
    result = DecodeResult()
    for chunk in root.children:
        try:
            result.assets.append(reg.decode(chunk))
        except DecodeError as e:
            if strict:
                raise
            _log.warning(
                "Skipping %s at offset %d: %s", chunk.name, chunk.offset, e
            )
            result.failures.append(DecodeFailure(chunk.tag, chunk.offset, e))
    return result
