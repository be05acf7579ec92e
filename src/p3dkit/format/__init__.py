from .constants import ChunkType, tag_name
from .cursor import ByteCursor
from .chunks import Chunk, load_file, parse_chunk, describe_tree

__all__ = [
    "ChunkType",
    "tag_name",
    "ByteCursor",
    "Chunk",
    "load_file",
    "parse_chunk",
    "describe_tree",
]
