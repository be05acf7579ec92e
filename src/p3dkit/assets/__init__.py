from .models import (
    Animation,
    AnimationChannel,
    AnimationGroup,
    BoundingBox,
    BoundingSphere,
    Font,
    Glyph,
    Image,
    ImageFormat,
    Mesh,
    PrimitiveGroup,
    PrimitiveType,
    RawChunk,
    ShaderMaterial,
    Sprite,
    Texture,
    TextureSet,
)
from .decoders import resolve_set
from .registry import (
    RAW,
    DecodeFailure,
    DecodeResult,
    DecoderRegistry,
    decode_chunk,
    decode_known_chunks,
    default_registry,
)

__all__ = [
    "Animation",
    "AnimationChannel",
    "AnimationGroup",
    "BoundingBox",
    "BoundingSphere",
    "Font",
    "Glyph",
    "Image",
    "ImageFormat",
    "Mesh",
    "PrimitiveGroup",
    "PrimitiveType",
    "RawChunk",
    "ShaderMaterial",
    "Sprite",
    "Texture",
    "TextureSet",
    "resolve_set",
    "RAW",
    "DecodeFailure",
    "DecodeResult",
    "DecoderRegistry",
    "decode_chunk",
    "decode_known_chunks",
    "default_registry",
]
