"""Decoders for the known chunk kinds."""

import pytest

from p3dkit.assets import decoders
from p3dkit.assets.models import ImageFormat, PrimitiveType, RawChunk
from p3dkit.errors import DecodeError
from p3dkit.format.chunks import load_file
from p3dkit.format.constants import ChunkType as CT

from p3d_builder import (
    animation_chunk,
    channel_chunk,
    chunk,
    f32,
    font_chunk,
    fourcc,
    geometry_chunk,
    glyph_record,
    i16,
    image_chunk,
    prim_group_chunk,
    pstring,
    p3d_file,
    set_chunk,
    shader_chunk,
    sprite_chunk,
    texture_chunk,
    u32,
)


def _first(*chunks):
    return load_file(p3d_file(*chunks)).children[0]


# Textures ---------------------------------------------------------------------


def test_texture_takes_pixels_from_first_image():
    pixels = bytes(range(16))
    tex = decoders.decode_texture(
        _first(texture_chunk("brick", 2, 2, pixels, fmt=ImageFormat.PNG))
    )
    assert tex.name == "brick"
    assert (tex.width, tex.height) == (2, 2)
    assert tex.format is ImageFormat.PNG
    assert tex.data == pixels
    assert tex.extra_images == []
    assert tex.memory_size == 16


def test_texture_keeps_extra_images():
    images = [
        image_chunk("lod0", 4, 4, b"\x00" * 64),
        image_chunk("lod1", 2, 2, b"\x01" * 16),
    ]
    tex = decoders.decode_texture(
        _first(texture_chunk("t", 4, 4, images=images))
    )
    assert len(tex.data) == 64
    assert [i.name for i in tex.extra_images] == ["lod1"]
    assert tex.memory_size == 80


def test_texture_without_image_child_fails():
    with pytest.raises(DecodeError) as info:
        decoders.decode_texture(_first(texture_chunk("t", images=[])))
    assert info.value.code == "E_MISSING_CHILD"


def test_image_without_pixel_child_fails():
    payload = pstring("img") + u32(14000, 2, 2, 32, 0, 1, 0)
    bad_image = chunk(CT.IMAGE, payload)
    with pytest.raises(DecodeError):
        decoders.decode_texture(_first(texture_chunk("t", images=[bad_image])))


def test_truncated_texture_header_is_decode_error():
    with pytest.raises(DecodeError) as info:
        decoders.decode_texture(
            _first(chunk(CT.TEXTURE, pstring("t") + u32(1)))
        )
    assert "too short" in info.value.message


def test_unknown_image_format_is_rejected():
    with pytest.raises(DecodeError) as info:
        decoders.decode_texture(_first(texture_chunk("t", fmt=99)))
    assert info.value.code == "E_BAD_ENUM"


def test_pixel_length_past_payload_is_decode_error():
    data_chunk = chunk(CT.IMAGE_DATA, u32(100) + b"\x00" * 4)
    image = chunk(
        CT.IMAGE, pstring("i") + u32(14000, 2, 2, 32, 0, 1, 0), [data_chunk]
    )
    with pytest.raises(DecodeError):
        decoders.decode_texture(_first(texture_chunk("t", images=[image])))


# Sets and sprites -------------------------------------------------------------


def test_set_collects_candidates_in_order():
    s = decoders.decode_set(
        _first(set_chunk("grass", [texture_chunk(n) for n in "abc"]))
    )
    assert s.name == "grass"
    assert s.candidate_names == ["a", "b", "c"]


def test_empty_set_fails():
    with pytest.raises(DecodeError):
        decoders.decode_set(_first(set_chunk("empty", [])))


def test_sprite():
    sprite = decoders.decode_sprite(
        _first(sprite_chunk("logo", [image_chunk("logo_img")], shader="hud"))
    )
    assert sprite.name == "logo"
    assert sprite.shader == "hud"
    assert (sprite.native_width, sprite.native_height) == (64, 32)
    assert [i.name for i in sprite.images] == ["logo_img"]


# Shaders ----------------------------------------------------------------------


def test_shader_keeps_texture_as_name():
    shader = decoders.decode_shader(_first(shader_chunk("wall", "brick")))
    assert shader.name == "wall"
    assert shader.diffuse_texture_name == "brick"
    assert shader.pddi_shader == "simple"


def test_shader_without_texture_param():
    shader = decoders.decode_shader(_first(shader_chunk("flat")))
    assert shader.diffuse_texture_name == ""


def test_shader_params_later_wins():
    shader = decoders.decode_shader(
        _first(
            shader_chunk(
                "s",
                textures=[("TEX", "first"), ("TEX", "second")],
                ints=[("2SID", 1), ("SHMO", 3)],
                floats=[("SHIN", 0.5)],
                colours=[("DIFF", 0x80FF2010)],
            )
        )
    )
    assert shader.diffuse_texture_name == "second"
    assert shader.int_params == {"2SID": 1, "SHMO": 3}
    assert shader.float_params == {"SHIN": 0.5}
    assert shader.colour_params == {"DIFF": (0xFF, 0x20, 0x10, 0x80)}


# Geometry ---------------------------------------------------------------------


_TRI = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]


def test_mesh_with_all_streams():
    group = prim_group_chunk(
        "wall",
        positions=_TRI,
        normals=[(0.0, 0.0, 1.0)] * 3,
        uvs={0: [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]},
        colours=[0xFFFFFFFF] * 3,
        indices=(0, 1, 2),
    )
    mesh = decoders.decode_geometry(
        _first(
            geometry_chunk(
                "box",
                [group],
                bbox=(0, 0, 0, 1, 1, 0),
                sphere=(0.5, 0.5, 0.0, 0.75),
            )
        )
    )
    assert mesh.name == "box"
    assert mesh.index_count == 3
    g = mesh.groups[0]
    assert g.shader == "wall"
    assert g.primitive_type is PrimitiveType.TRIANGLE_LIST
    assert g.positions == _TRI
    assert g.vertex_count == 3
    assert g.normals == [(0.0, 0.0, 1.0)] * 3
    assert g.uvs[0][1] == (1.0, 0.0)
    assert g.colours == [0xFFFFFFFF] * 3
    assert mesh.bounding_box.maximum == (1.0, 1.0, 0.0)
    assert mesh.bounding_sphere.radius == 0.75


def test_mesh_optional_streams_may_be_absent():
    mesh = decoders.decode_geometry(
        _first(geometry_chunk("bare", [prim_group_chunk(positions=_TRI)]))
    )
    g = mesh.groups[0]
    assert g.normals is None
    assert g.uvs == {}
    assert g.colours is None
    assert mesh.bounding_box is None
    assert mesh.bounding_sphere is None


def test_mesh_without_index_list_fails():
    with pytest.raises(DecodeError) as info:
        decoders.decode_geometry(
            _first(
                geometry_chunk(
                    "m", [prim_group_chunk(positions=_TRI, indices=None)]
                )
            )
        )
    assert info.value.code == "E_MISSING_CHILD"


def test_mesh_bad_primitive_type():
    with pytest.raises(DecodeError) as info:
        decoders.decode_geometry(
            _first(geometry_chunk("m", [prim_group_chunk(prim_type=42)]))
        )
    assert info.value.code == "E_BAD_ENUM"


def test_mesh_multiple_groups_keep_order():
    mesh = decoders.decode_geometry(
        _first(
            geometry_chunk(
                "m",
                [
                    prim_group_chunk("a", indices=(0, 1, 2)),
                    prim_group_chunk("b", indices=(2, 1, 0, 3), prim_type=1),
                ],
            )
        )
    )
    assert [g.shader for g in mesh.groups] == ["a", "b"]
    assert mesh.groups[1].primitive_type is PrimitiveType.TRIANGLE_STRIP
    assert mesh.index_count == 7


# Fonts ------------------------------------------------------------------------


def test_font_glyphs_and_pages():
    font = decoders.decode_font(
        _first(
            font_chunk(
                "hud",
                [glyph_record(ord("A"), advance=9.0), glyph_record(ord("B"))],
                pages=[texture_chunk("hud_page0")],
            )
        )
    )
    assert font.name == "hud"
    assert font.size == 16.0
    assert [p.name for p in font.pages] == ["hud_page0"]
    assert font.glyph("A").advance == 9.0
    assert font.glyph("B").top_right == (0.5, 0.5)
    assert font.glyph("Z") is None


def test_font_without_glyph_table_fails():
    with pytest.raises(DecodeError):
        decoders.decode_font(_first(font_chunk("f", [], include_glyphs=False)))


# Animation --------------------------------------------------------------------


def test_float_channel():
    ch = decoders.decode_channel(
        _first(
            channel_chunk(CT.FLOAT_1_CHANNEL, "FOV", [0, 10], f32(1.0, 2.0))
        )
    )
    assert ch.kind == "FLOAT_1_CHANNEL"
    assert ch.parameter == "FOV"
    assert ch.frames == [0, 10]
    assert ch.values == [(1.0,), (2.0,)]
    assert ch.mapping is None


def test_dof_channel_reads_mapping_and_constants():
    ch = decoders.decode_channel(
        _first(
            channel_chunk(
                CT.VECTOR_2DOF_CHANNEL,
                "TRAN",
                [0],
                f32(3.0, 4.0),
                mapping=2,
                constants=(1.0, 0.0, 0.0),
            )
        )
    )
    assert ch.mapping == 2
    assert ch.constants == (1.0, 0.0, 0.0)
    assert ch.values == [(3.0, 4.0)]


def test_compressed_quaternion_channel_is_scaled():
    ch = decoders.decode_channel(
        _first(
            channel_chunk(
                CT.COMPRESSED_QUAT_CHANNEL, "ROT", [0], i16(32767, 0, 0, -32767)
            )
        )
    )
    assert ch.values[0] == pytest.approx((1.0, 0.0, 0.0, -1.0))


def test_channel_with_short_value_array_fails():
    with pytest.raises(DecodeError):
        decoders.decode_channel(
            _first(channel_chunk(CT.VECTOR_3DOF_CHANNEL, "P", [0, 1], f32(1.0)))
        )


def test_decode_channel_rejects_other_tags():
    with pytest.raises(DecodeError):
        decoders.decode_channel(_first(chunk(CT.TEXTURE)))


def test_animation_groups_keep_unknown_children():
    pos = channel_chunk(CT.VECTOR_3DOF_CHANNEL, "TRAN", [0], f32(1.0, 2.0, 3.0))
    rot = channel_chunk(CT.QUATERNION_CHANNEL, "ROT", [0], f32(1, 0, 0, 0))
    mystery = chunk(0xABCD0001, b"opaque")
    anim = decoders.decode_animation(
        _first(
            animation_chunk(
                "walk", [("hip", 7, [pos, rot, mystery]), ("knee", 8, [])]
            )
        )
    )
    assert anim.name == "walk"
    assert anim.animation_type == "PTRN"
    assert anim.frame_rate == 30.0
    assert anim.cyclic is True
    assert [g.name for g in anim.groups] == ["hip", "knee"]
    hip = anim.groups[0]
    assert hip.group_id == 7
    assert [c.parameter for c in hip.channels] == ["TRAN", "ROT"]
    assert hip.channels[1].values == [(1.0, 0.0, 0.0, 0.0)]
    assert len(hip.unrecognized) == 1
    assert hip.unrecognized[0].payload == b"opaque"
    assert anim.groups[1].channels == []


def test_raw_chunk_preserves_payload_and_children():
    node = _first(chunk(0x5151, fourcc("ABCD"), [chunk(0x5252, b"kid")]))
    raw = decoders.raw_chunk(node)
    assert raw.tag == 0x5151
    assert raw.name == "0x00005151"
    assert raw.payload == b"ABCD"
    (kid,) = raw.children
    assert isinstance(kid, RawChunk)
    assert kid.payload == b"kid"
