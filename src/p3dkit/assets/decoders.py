"""Pure decode functions for known P3D chunk kinds.

Every decoder takes a ``Chunk`` and returns a model from ``models`` or raises
``DecodeError``. Decoders never touch global state; payload bytes that the
result keeps are copied so the chunk tree can be dropped afterwards.
"""

from __future__ import annotations

import random
from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple, Type, TypeVar

from ..errors import (
    E_BAD_ENUM,
    E_MISSING_CHILD,
    OutOfBounds,
    decode_error,
)
from ..format.chunks import Chunk
from ..format.constants import ChunkType as CT
from ..format.cursor import ByteCursor
from ..logging import get_logger
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

__all__ = [
    "decode_image",
    "decode_texture",
    "decode_shader",
    "decode_set",
    "resolve_set",
    "decode_sprite",
    "decode_geometry",
    "decode_primitive_group",
    "decode_font",
    "decode_channel",
    "decode_animation",
    "raw_chunk",
    "CHANNEL_TAGS",
]

_log = get_logger("decode")

E = TypeVar("E", ImageFormat, PrimitiveType)

# tag -> (components per frame, value code, has mapping/constants prefix)
_CHANNEL_LAYOUT: Dict[int, Tuple[int, str, bool]] = {
    CT.FLOAT_1_CHANNEL: (1, "f", False),
    CT.FLOAT_2_CHANNEL: (2, "f", False),
    CT.VECTOR_1DOF_CHANNEL: (1, "f", True),
    CT.VECTOR_2DOF_CHANNEL: (2, "f", True),
    CT.VECTOR_3DOF_CHANNEL: (3, "f", False),
    CT.QUATERNION_CHANNEL: (4, "f", False),
    CT.COMPRESSED_QUAT_CHANNEL: (4, "h", False),
}
CHANNEL_TAGS = frozenset(_CHANNEL_LAYOUT)

_COMPRESSED_SCALE = 1.0 / 32767.0


@contextmanager
def _payload(chunk: Chunk) -> Iterator[ByteCursor]:
    """Cursor over the chunk payload; short payloads become DecodeError."""
    try:
        yield chunk.cursor()
    except OutOfBounds as e:
        raise decode_error(
            f"{chunk.name} payload too short",
            {"offset": chunk.offset, "payload_size": chunk.payload_size},
        ) from e


def _enum(enum_cls: Type[E], value: int, chunk: Chunk, what: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise decode_error(
            f"Invalid {what} {value} in {chunk.name}",
            {"offset": chunk.offset, "value": value},
            code=E_BAD_ENUM,
        ) from None


def _require(chunk: Chunk, tag: CT, owner: str) -> Chunk:
    child = chunk.find(tag)
    if child is None:
        raise decode_error(
            f"{chunk.name} '{owner}' has no {tag.name} child",
            {"offset": chunk.offset},
            code=E_MISSING_CHILD,
        )
    return child


def _group(values: Tuple, width: int) -> List[Tuple]:
    return [tuple(values[i : i + width]) for i in range(0, len(values), width)]


def raw_chunk(chunk: Chunk) -> RawChunk:
    return RawChunk(
        tag=chunk.tag,
        payload=bytes(chunk.payload),
        children=tuple(raw_chunk(c) for c in chunk.children),
    )


# Textures ---------------------------------------------------------------------


def decode_image(chunk: Chunk) -> Image:
    with _payload(chunk) as cur:
        name = cur.read_pstring()
        cur.read_u32()  # version
        width = cur.read_u32()
        height = cur.read_u32()
        bpp = cur.read_u32()
        palettized = cur.read_u32()
        has_alpha = cur.read_u32()
        fmt = _enum(ImageFormat, cur.read_u32(), chunk, "image format")
    data_chunk = _require(chunk, CT.IMAGE_DATA, name)
    with _payload(data_chunk) as cur:
        data = cur.read_bytes(cur.read_u32())
    return Image(
        name=name,
        width=width,
        height=height,
        bpp=bpp,
        format=fmt,
        data=data,
        palettized=bool(palettized),
        has_alpha=bool(has_alpha),
    )


def decode_texture(chunk: Chunk) -> Texture:
    with _payload(chunk) as cur:
        name = cur.read_pstring()
        cur.read_u32()  # version
        width = cur.read_u32()
        height = cur.read_u32()
        bpp = cur.read_u32()
        alpha_depth = cur.read_u32()
        mip_count = cur.read_u32()
        texture_type = cur.read_u32()
        usage = cur.read_u32()
        priority = cur.read_u32()
    _require(chunk, CT.IMAGE, name)
    images = [decode_image(c) for c in chunk.find_all(CT.IMAGE)]
    base = images[0]
    _log.debug(
        "texture %s %dx%d %s (%d bytes)",
        name,
        width,
        height,
        base.format.name,
        len(base.data),
    )
    return Texture(
        name=name,
        width=width,
        height=height,
        format=base.format,
        data=base.data,
        bpp=bpp,
        alpha_depth=alpha_depth,
        mip_count=mip_count,
        texture_type=texture_type,
        usage=usage,
        priority=priority,
        extra_images=images[1:],
    )


def decode_set(chunk: Chunk) -> TextureSet:
    with _payload(chunk) as cur:
        name = cur.read_pstring()
        cur.read_u32()  # version
        cur.read_u32()  # declared texture count; the children are authoritative
    _require(chunk, CT.TEXTURE, name)
    candidates = [decode_texture(c) for c in chunk.find_all(CT.TEXTURE)]
    return TextureSet(name=name, candidates=candidates)


def resolve_set(texture_set: TextureSet, rng: random.Random) -> Texture:
    """Pick one candidate uniformly at random using ``rng``."""
    if not texture_set.candidates:
        raise decode_error(
            f"Set '{texture_set.name}' has no candidates",
            code=E_MISSING_CHILD,
        )
    return rng.choice(texture_set.candidates)


def decode_sprite(chunk: Chunk) -> Sprite:
    with _payload(chunk) as cur:
        name = cur.read_pstring()
        cur.read_u32()  # version
        native_width = cur.read_u32()
        native_height = cur.read_u32()
        shader = cur.read_pstring()
        image_width = cur.read_u32()
        image_height = cur.read_u32()
        cur.read_u32()  # image count
        blit_border = cur.read_u32()
    _require(chunk, CT.IMAGE, name)
    return Sprite(
        name=name,
        native_width=native_width,
        native_height=native_height,
        shader=shader,
        image_width=image_width,
        image_height=image_height,
        blit_border=blit_border,
        images=[decode_image(c) for c in chunk.find_all(CT.IMAGE)],
    )


# Shaders ----------------------------------------------------------------------


def decode_shader(chunk: Chunk) -> ShaderMaterial:
    """Decode a shader; the diffuse texture stays a name, unresolved."""
    with _payload(chunk) as cur:
        name = cur.read_pstring()
        version = cur.read_u32()
        pddi_shader = cur.read_pstring()
        translucent = cur.read_u32()
        vertex_needs = cur.read_u32()
        vertex_mask = cur.read_u32()
        cur.read_u32()  # parameter count
    shader = ShaderMaterial(
        name=name,
        pddi_shader=pddi_shader,
        version=version,
        translucent=bool(translucent),
        vertex_needs=vertex_needs,
        vertex_mask=vertex_mask,
    )
    # later parameters override earlier ones with the same key
    for param in chunk.children:
        with _payload(param) as cur:
            if param.tag == CT.SHADER_TEXTURE_PARAM:
                key = cur.read_fourcc()
                shader.texture_params[key] = cur.read_pstring()
            elif param.tag == CT.SHADER_INT_PARAM:
                key = cur.read_fourcc()
                shader.int_params[key] = cur.read_u32()
            elif param.tag == CT.SHADER_FLOAT_PARAM:
                key = cur.read_fourcc()
                shader.float_params[key] = cur.read_f32()
            elif param.tag == CT.SHADER_COLOUR_PARAM:
                key = cur.read_fourcc()
                argb = cur.read_u32()
                shader.colour_params[key] = (
                    (argb >> 16) & 0xFF,
                    (argb >> 8) & 0xFF,
                    argb & 0xFF,
                    (argb >> 24) & 0xFF,
                )
    shader.diffuse_texture_name = shader.texture_params.get("TEX", "")
    return shader


# Geometry ---------------------------------------------------------------------


def _vectors(chunk: Chunk, width: int) -> List[Tuple]:
    with _payload(chunk) as cur:
        count = cur.read_u32()
        return _group(cur.read_floats(count * width), width)


def decode_primitive_group(chunk: Chunk) -> PrimitiveGroup:
    with _payload(chunk) as cur:
        cur.read_u32()  # version
        shader = cur.read_pstring()
        prim = _enum(PrimitiveType, cur.read_u32(), chunk, "primitive type")
        vertex_type = cur.read_u32()
    index_chunk = _require(chunk, CT.INDEX_LIST, shader)
    with _payload(index_chunk) as cur:
        indices = list(cur.read_u32s(cur.read_u32()))
    group = PrimitiveGroup(
        shader=shader,
        primitive_type=prim,
        indices=indices,
        vertex_type=vertex_type,
    )
    for child in chunk.children:
        if child.tag == CT.POSITION_LIST:
            group.positions = _vectors(child, 3)
        elif child.tag == CT.NORMAL_LIST:
            group.normals = _vectors(child, 3)
        elif child.tag == CT.UV_LIST:
            with _payload(child) as cur:
                count = cur.read_u32()
                channel = cur.read_u32()
                group.uvs[channel] = _group(cur.read_floats(count * 2), 2)
        elif child.tag == CT.COLOUR_LIST:
            with _payload(child) as cur:
                group.colours = list(cur.read_u32s(cur.read_u32()))
    return group


def decode_geometry(chunk: Chunk) -> Mesh:
    with _payload(chunk) as cur:
        name = cur.read_pstring()
        version = cur.read_u32()
        cur.read_u32()  # primitive group count
    _require(chunk, CT.PRIMITIVE_GROUP, name)
    mesh = Mesh(
        name=name,
        version=version,
        groups=[
            decode_primitive_group(c)
            for c in chunk.find_all(CT.PRIMITIVE_GROUP)
        ],
    )
    box = chunk.find(CT.BOUNDING_BOX)
    if box is not None:
        with _payload(box) as cur:
            v = cur.read_floats(6)
        mesh.bounding_box = BoundingBox(minimum=v[:3], maximum=v[3:])
    sphere = chunk.find(CT.BOUNDING_SPHERE)
    if sphere is not None:
        with _payload(sphere) as cur:
            v = cur.read_floats(4)
        mesh.bounding_sphere = BoundingSphere(centre=v[:3], radius=v[3])
    _log.debug(
        "mesh %s: %d groups, %d indices",
        name,
        len(mesh.groups),
        mesh.index_count,
    )
    return mesh


# Fonts ------------------------------------------------------------------------


def decode_font(chunk: Chunk) -> Font:
    with _payload(chunk) as cur:
        name = cur.read_pstring()
        cur.read_u32()  # version
        shader = cur.read_pstring()
        size, width, height, baseline = cur.read_floats(4)
        cur.read_u32()  # texture count
    glyph_chunk = _require(chunk, CT.FONT_GLYPHS, name)
    glyphs: Dict[int, Glyph] = {}
    with _payload(glyph_chunk) as cur:
        for _ in range(cur.read_u32()):
            texture_index = cur.read_u32()
            blx, bly, trx, try_, lb, rb, w, adv = cur.read_floats(8)
            code = cur.read_u32()
            glyphs[code] = Glyph(
                code=code,
                texture_index=texture_index,
                bottom_left=(blx, bly),
                top_right=(trx, try_),
                left_bearing=lb,
                right_bearing=rb,
                width=w,
                advance=adv,
            )
    return Font(
        name=name,
        shader=shader,
        size=size,
        width=width,
        height=height,
        baseline=baseline,
        pages=[decode_texture(c) for c in chunk.find_all(CT.TEXTURE)],
        glyphs=glyphs,
    )


# Animation --------------------------------------------------------------------


def decode_channel(chunk: Chunk) -> AnimationChannel:
    layout = _CHANNEL_LAYOUT.get(chunk.tag)
    if layout is None:
        raise decode_error(
            f"{chunk.name} is not an animation channel",
            {"offset": chunk.offset},
        )
    width, code, has_mapping = layout
    with _payload(chunk) as cur:
        channel = AnimationChannel(
            kind=chunk.name, version=cur.read_u32(), parameter=cur.read_fourcc()
        )
        if has_mapping:
            channel.mapping = cur.read_u16()
            channel.constants = cur.read_floats(3)
        count = cur.read_u32()
        channel.frames = list(cur.read_u16s(count))
        if code == "h":
            raw = cur.read_i16s(count * width)
            values = tuple(v * _COMPRESSED_SCALE for v in raw)
        else:
            values = cur.read_floats(count * width)
    channel.values = _group(values, width)
    return channel


def decode_animation(chunk: Chunk) -> Animation:
    with _payload(chunk) as cur:
        anim = Animation(
            name=cur.read_pstring(),
            version=cur.read_u32(),
            animation_type=cur.read_fourcc(),
            frame_count=cur.read_f32(),
            frame_rate=cur.read_f32(),
            cyclic=bool(cur.read_u32()),
        )
    for group_list in chunk.find_all(CT.ANIMATION_GROUP_LIST):
        for group_chunk in group_list.find_all(CT.ANIMATION_GROUP):
            with _payload(group_chunk) as cur:
                cur.read_u32()  # version
                group = AnimationGroup(
                    name=cur.read_pstring(), group_id=cur.read_u32()
                )
            for child in group_chunk.children:
                if child.tag in CHANNEL_TAGS:
                    group.channels.append(decode_channel(child))
                else:
                    group.unrecognized.append(raw_chunk(child))
            anim.groups.append(group)
    return anim
