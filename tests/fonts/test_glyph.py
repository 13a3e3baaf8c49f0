from pytest import raises

from glyphlayout import Glyph


def test_glyph_defaults():
    glyph = Glyph(65)
    assert glyph.index == 65
    assert glyph.advance == 0.0
    assert glyph.bearing == (0.0, 0.0)
    assert glyph.extent == (0.0, 0.0)
    assert not glyph.depictable
    assert glyph.kerning(66) == 0.0


def test_glyph_depictable():
    glyph = Glyph(65)
    glyph.sub_texture_extent = 0.1, 0.0
    assert not glyph.depictable
    glyph.sub_texture_extent = 0.0, 0.1
    assert not glyph.depictable
    glyph.sub_texture_extent = 0.1, 0.1
    assert glyph.depictable


def test_glyph_setters_validate():
    glyph = Glyph(65)
    with raises(ValueError):
        glyph.bearing = 1, 2, 3
    with raises(TypeError):
        glyph.extent = 4


def test_glyph_bearing_from_offsets():
    glyph = Glyph(65)
    glyph.set_bearing_from_offsets(30, 2, 8)
    assert glyph.bearing == (2.0, 22.0)


def test_glyph_kerning():
    glyph = Glyph(65)
    glyph.set_kerning(86, -2)
    assert glyph.kerning(86) == -2.0
    assert glyph.kerning(87) == 0.0
    assert glyph.kernings == {86: -2.0}

    # The map is a copy
    glyph.kernings[87] = 1
    assert glyph.kerning(87) == 0.0


def test_glyph_pen_vectors_without_padding():
    glyph = Glyph(65)
    glyph.bearing = 1, 8
    glyph.extent = 6, 10
    glyph.sub_texture_origin = 0.5, 0.25
    glyph.sub_texture_extent = 0.0625, 0.125

    assert glyph.pen_origin == (1.0, -2.0)
    assert glyph.pen_tangent == (6.0, 0.0)
    assert glyph.pen_bitangent == (0.0, 10.0)
    assert glyph.subtexture_rectangle == (0.5, 0.25, 0.5625, 0.375)


def test_glyph_pen_vectors_with_padding():
    glyph = Glyph(65)
    glyph.bearing = 1, 8
    glyph.extent = 6, 10
    glyph.sub_texture_origin = 0.5, 0.25
    glyph.sub_texture_extent = 0.0625, 0.125

    # top, right, bottom, left; and an atlas of 64x32
    glyph._set_face_geometry((1.0, 2.0, 3.0, 4.0), (1 / 64, 1 / 32))

    assert glyph.pen_origin == (1 - 4, 8 - 10 - 3)
    assert glyph.pen_tangent == (6 + 4 + 2, 0.0)
    assert glyph.pen_bitangent == (0.0, 10 + 1 + 3)
    u0, v0, u1, v1 = glyph.subtexture_rectangle
    assert u0 == 0.5 - 4 / 64
    assert v0 == 0.25 - 3 / 32
    assert u1 == 0.5 + 0.0625 + 2 / 64
    assert v1 == 0.25 + 0.125 + 1 / 32

    # Re-derived on each change
    glyph.bearing = 0, 8
    assert glyph.pen_origin == (-4, -5)


if __name__ == "__main__":
    test_glyph_defaults()
    test_glyph_depictable()
    test_glyph_setters_validate()
    test_glyph_bearing_from_offsets()
    test_glyph_kerning()
    test_glyph_pen_vectors_without_padding()
    test_glyph_pen_vectors_with_padding()
