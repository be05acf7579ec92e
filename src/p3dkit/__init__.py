"""p3dkit: reader and resource manager for Pure3D (P3D) asset files."""

from .errors import (
    ConfigError,
    CorruptChunk,
    DecodeError,
    OutOfBounds,
    P3DError,
    ParseError,
)
from .format import ByteCursor, Chunk, ChunkType, load_file
from .assets import (
    DecodeResult,
    DecoderRegistry,
    decode_known_chunks,
    default_registry,
)
from .resources import LoadSummary, Material, ResourceManager

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "CorruptChunk",
    "DecodeError",
    "OutOfBounds",
    "P3DError",
    "ParseError",
    "ByteCursor",
    "Chunk",
    "ChunkType",
    "load_file",
    "DecodeResult",
    "DecoderRegistry",
    "decode_known_chunks",
    "default_registry",
    "LoadSummary",
    "Material",
    "ResourceManager",
]
