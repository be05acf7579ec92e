"""Dataclass models for decoded P3D assets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from ..format.constants import tag_name

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Vec4 = Tuple[float, float, float, float]
Colour = Tuple[int, int, int, int]  # r, g, b, a


class ImageFormat(IntEnum):
    RAW = 0
    PNG = 1
    TGA = 2
    BMP = 3
    IPU = 4
    DXT = 5
    DXT1 = 6
    DXT2 = 7
    DXT3 = 8
    DXT4 = 9
    DXT5 = 10
    PS2_4BIT = 11
    PS2_8BIT = 12
    PS2_16BIT = 13
    PS2_32BIT = 14
    GC_4BIT = 15
    GC_8BIT = 16
    GC_16BIT = 17
    GC_32BIT = 18
    GC_DXT1 = 19
    OTHER = 20


class PrimitiveType(IntEnum):
    TRIANGLE_LIST = 0
    TRIANGLE_STRIP = 1
    LINE_LIST = 2
    LINE_STRIP = 3
    POINTS = 4


@dataclass(slots=True)
class Image:
    name: str
    width: int
    height: int
    bpp: int
    format: ImageFormat
    data: bytes = b""
    palettized: bool = False
    has_alpha: bool = False


@dataclass(slots=True)
class Texture:
    name: str
    width: int
    height: int
    format: ImageFormat
    data: bytes = b""
    bpp: int = 32
    alpha_depth: int = 0
    mip_count: int = 1
    texture_type: int = 0
    usage: int = 0
    priority: int = 0
    # additional IMAGE children past the first
    extra_images: List[Image] = field(default_factory=list)

    @property
    def memory_size(self) -> int:
        return len(self.data) + sum(len(i.data) for i in self.extra_images)


@dataclass(slots=True)
class ShaderMaterial:
    name: str
    diffuse_texture_name: str = ""
    pddi_shader: str = ""
    version: int = 0
    translucent: bool = False
    vertex_needs: int = 0
    vertex_mask: int = 0
    texture_params: Dict[str, str] = field(default_factory=dict)
    int_params: Dict[str, int] = field(default_factory=dict)
    float_params: Dict[str, float] = field(default_factory=dict)
    colour_params: Dict[str, Colour] = field(default_factory=dict)


@dataclass(slots=True)
class TextureSet:
    name: str
    candidates: List[Texture] = field(default_factory=list)

    @property
    def candidate_names(self) -> List[str]:
        return [t.name for t in self.candidates]


@dataclass(slots=True)
class Sprite:
    name: str
    native_width: int
    native_height: int
    shader: str
    image_width: int
    image_height: int
    blit_border: int = 0
    images: List[Image] = field(default_factory=list)


@dataclass(slots=True)
class BoundingBox:
    minimum: Vec3
    maximum: Vec3


@dataclass(slots=True)
class BoundingSphere:
    centre: Vec3
    radius: float


@dataclass(slots=True)
class PrimitiveGroup:
    shader: str
    primitive_type: PrimitiveType
    indices: List[int]
    vertex_type: int = 0
    positions: Optional[List[Vec3]] = None
    normals: Optional[List[Vec3]] = None
    uvs: Dict[int, List[Vec2]] = field(default_factory=dict)
    colours: Optional[List[int]] = None

    @property
    def vertex_count(self) -> int:
        return len(self.positions) if self.positions is not None else 0


@dataclass(slots=True)
class Mesh:
    name: str
    groups: List[PrimitiveGroup] = field(default_factory=list)
    bounding_box: Optional[BoundingBox] = None
    bounding_sphere: Optional[BoundingSphere] = None
    version: int = 0

    @property
    def index_count(self) -> int:
        return sum(len(g.indices) for g in self.groups)


@dataclass(slots=True)
class Glyph:
    code: int
    texture_index: int
    bottom_left: Vec2
    top_right: Vec2
    left_bearing: float
    right_bearing: float
    width: float
    advance: float


@dataclass(slots=True)
class Font:
    name: str
    shader: str
    size: float
    width: float
    height: float
    baseline: float
    pages: List[Texture] = field(default_factory=list)
    glyphs: Dict[int, Glyph] = field(default_factory=dict)

    def glyph(self, char: str) -> Optional[Glyph]:
        return self.glyphs.get(ord(char))


@dataclass(slots=True)
class AnimationChannel:
    kind: str  # chunk tag name, e.g. "FLOAT_1_CHANNEL"
    version: int
    parameter: str
    frames: List[int] = field(default_factory=list)
    values: List[Tuple[float, ...]] = field(default_factory=list)
    mapping: Optional[int] = None
    constants: Optional[Vec3] = None

    @property
    def frame_count(self) -> int:
        return len(self.frames)


@dataclass(slots=True)
class AnimationGroup:
    name: str
    group_id: int
    channels: List[AnimationChannel] = field(default_factory=list)
    unrecognized: List["RawChunk"] = field(default_factory=list)


@dataclass(slots=True)
class Animation:
    name: str
    animation_type: str
    frame_count: float
    frame_rate: float
    cyclic: bool
    version: int = 0
    groups: List[AnimationGroup] = field(default_factory=list)


@dataclass(slots=True)
class RawChunk:
    """A chunk no decoder is registered for, kept uninterpreted."""

    tag: int
    payload: bytes
    children: Tuple["RawChunk", ...] = ()

    @property
    def name(self) -> str:
        return tag_name(self.tag)


__all__ = [
    "ImageFormat",
    "PrimitiveType",
    "Image",
    "Texture",
    "ShaderMaterial",
    "TextureSet",
    "Sprite",
    "BoundingBox",
    "BoundingSphere",
    "PrimitiveGroup",
    "Mesh",
    "Glyph",
    "Font",
    "AnimationChannel",
    "AnimationGroup",
    "Animation",
    "RawChunk",
]
