"""Central P3D format constants (chunk tags, header layout, limits)."""

from __future__ import annotations

from enum import IntEnum

BYTE_ORDER = "<"

SIGNATURE = 0xFF443350  # b"P3D\xff"
SIGNATURE_SWAPPED = 0x503344FF
SIGNATURE_COMPRESSED = 0x5A443350  # b"P3DZ"

CHUNK_HEADER_SIZE = 12
MAX_CHUNK_DEPTH = 64

# Fallback texture: 2x2 RGBA8, packed 0xAABBGGRR per texel.
FALLBACK_TEXTURE_NAME = "__fallback__"
FALLBACK_TEXTURE_SIZE = (2, 2)
FALLBACK_TEXTURE_TEXELS = (0xFFFF00DC, 0xFF000000, 0xFF000000, 0xFFFF00DC)

DEFAULT_MAX_FILE_SIZE = 256 * 1024 * 1024


class ChunkType(IntEnum):
    ROOT = SIGNATURE

    GEOMETRY = 0x00010000
    PRIMITIVE_GROUP = 0x00010002
    BOUNDING_BOX = 0x00010003
    BOUNDING_SPHERE = 0x00010004
    POSITION_LIST = 0x00010005
    NORMAL_LIST = 0x00010006
    UV_LIST = 0x00010007
    COLOUR_LIST = 0x00010008
    INDEX_LIST = 0x0001000A

    SHADER = 0x00011000
    SHADER_TEXTURE_PARAM = 0x00011002
    SHADER_INT_PARAM = 0x00011003
    SHADER_FLOAT_PARAM = 0x00011004
    SHADER_COLOUR_PARAM = 0x00011005

    TEXTURE = 0x00019000
    IMAGE = 0x00019001
    IMAGE_DATA = 0x00019002
    SET = 0x00019003
    SPRITE = 0x00019005

    TEXTURE_FONT = 0x00022000
    FONT_GLYPHS = 0x00022001

    ANIMATION = 0x00121000
    ANIMATION_GROUP = 0x00121001
    ANIMATION_GROUP_LIST = 0x00121002
    FLOAT_1_CHANNEL = 0x00121100
    FLOAT_2_CHANNEL = 0x00121101
    VECTOR_1DOF_CHANNEL = 0x00121102
    VECTOR_2DOF_CHANNEL = 0x00121103
    VECTOR_3DOF_CHANNEL = 0x00121104
    QUATERNION_CHANNEL = 0x00121105
    COMPRESSED_QUAT_CHANNEL = 0x00121111


def tag_name(tag: int) -> str:
    """Symbolic name for a tag, or its hex form when the tag is unknown."""
    try:
        return ChunkType(tag).name
    except ValueError:
        return f"0x{tag:08X}"


__all__ = [
    "BYTE_ORDER",
    "SIGNATURE",
    "SIGNATURE_SWAPPED",
    "SIGNATURE_COMPRESSED",
    "CHUNK_HEADER_SIZE",
    "MAX_CHUNK_DEPTH",
    "FALLBACK_TEXTURE_NAME",
    "FALLBACK_TEXTURE_SIZE",
    "FALLBACK_TEXTURE_TEXELS",
    "DEFAULT_MAX_FILE_SIZE",
    "ChunkType",
    "tag_name",
]
