import numpy as np
import pylinalg as la
from pytest import raises

from glyphlayout.text import is_delimiter
from glyphlayout import (
    GlyphVertexCloud,
    Label,
    Text,
    Texture,
    Typesetter,
    typeset,
    extent,
)


# The monospace face: advance 10, bearing (1, 8), extent (8, 10), no padding,
# ascent 8, descent -2, so size 10 and line height 12.
# Each glyph's quad origin is thus the pen position + (1, -2).


def origins_x(cloud):
    return cloud.vertices["origin"][:, 0].tolist()


def origins_y(cloud):
    return cloud.vertices["origin"][:, 1].tolist()


def test_single_line(monospace_face):
    cloud = GlyphVertexCloud()
    label = Label("abc", monospace_face)
    assert typeset(cloud, label) == (30, 12)
    assert len(cloud) == 3
    assert origins_x(cloud) == [1, 11, 21]
    assert origins_y(cloud) == [-2, -2, -2]

    v = cloud.vertices
    assert np.all(v["vtan"] == (8, 0, 0))
    assert np.all(v["vbitan"] == (0, 10, 0))
    glyph = monospace_face.get_glyph(ord("b"))
    assert np.allclose(v["uv_rect"][1], glyph.subtexture_rectangle)


def test_empty_text(monospace_face):
    cloud = GlyphVertexCloud()
    assert typeset(cloud, Label("", monospace_face)) == (0, 0)
    assert len(cloud) == 0
    assert extent(Label("", monospace_face)) == (0, 0)


def test_no_wrap_width_is_sum_of_advances(monospace_face):
    # Trailing whitespace does not count
    assert extent(Label("ab ab ", monospace_face)) == (50, 12)
    assert extent(Label("ab ab", monospace_face)) == (50, 12)

    # Kerning is included
    monospace_face.set_kerning(ord("a"), ord("b"), -2)
    cloud = GlyphVertexCloud()
    assert typeset(cloud, Label("ab ab", monospace_face)) == (46, 12)
    assert origins_x(cloud) == [1, 9, 29, 37]


def test_missing_glyphs(monospace_face):
    # "?" is not in the face, it has no advance and is not depicted
    cloud = GlyphVertexCloud()
    assert typeset(cloud, Label("a?b", monospace_face)) == (20, 12)
    assert origins_x(cloud) == [1, 11]


def test_line_feed(monospace_face):
    cloud = GlyphVertexCloud()
    assert typeset(cloud, Label("ab\ncd", monospace_face)) == (20, 24)
    assert origins_x(cloud) == [1, 11, 1, 11]
    assert origins_y(cloud) == [-2, -2, -14, -14]

    # Empty lines count
    assert extent(Label("\n", monospace_face)) == (0, 24)
    assert extent(Label("a\n\nb", monospace_face)) == (10, 36)

    # A custom line feed
    assert extent(Label(Text("ab|cd", line_feed="|"), monospace_face)) == (20, 24)
    assert extent(Label(Text("ab\ncd", line_feed="|"), monospace_face)) == (40, 12)


def test_word_wrap_breaks_after_words(monospace_face):
    cloud = GlyphVertexCloud()
    label = Label("a b c", monospace_face, word_wrap=True, line_width=15)
    assert typeset(cloud, label) == (10, 36)
    assert origins_x(cloud) == [1, 1, 1]
    assert origins_y(cloud) == [-2, -14, -26]


def test_word_wrap_moves_whole_word(monospace_face):
    cloud = GlyphVertexCloud()
    label = Label("ab cd", monospace_face, word_wrap=True, line_width=45)
    assert typeset(cloud, label) == (20, 24)
    # "c" was placed on the first line, and moved with "d" to the second
    assert origins_x(cloud) == [1, 11, 1, 11]
    assert origins_y(cloud) == [-2, -2, -14, -14]


def test_word_wrap_keeps_fitting_text(monospace_face):
    label = Label("ab cd", monospace_face, word_wrap=True, line_width=50)
    assert extent(label) == (50, 12)

    # A zero line width means unbounded
    label = Label("ab cd", monospace_face, word_wrap=True, line_width=0)
    assert extent(label) == (50, 12)

    # Without word wrap, the line width is ignored
    label = Label("ab cd", monospace_face, word_wrap=False, line_width=15)
    assert extent(label) == (50, 12)


def test_word_wrap_breaks_long_words(monospace_face):
    cloud = GlyphVertexCloud()
    label = Label("abcdef", monospace_face, word_wrap=True, line_width=25)
    assert typeset(cloud, label) == (20, 36)
    assert origins_x(cloud) == [1, 11, 1, 11, 1, 11]
    assert origins_y(cloud) == [-2, -2, -14, -14, -26, -26]


def test_word_wrap_after_punctuation(monospace_face):
    # The hyphen stays on the first line
    cloud = GlyphVertexCloud()
    label = Label("ab-cd", monospace_face, word_wrap=True, line_width=40)
    assert typeset(cloud, label) == (30, 24)
    assert origins_y(cloud) == [-2, -2, -2, -14, -14]
    assert origins_x(cloud)[3:] == [1, 11]


def test_oversized_glyph_is_not_wrapped_forever(face_factory):
    face = face_factory(advance=30)
    cloud = GlyphVertexCloud()
    label = Label("abc", face, word_wrap=True, line_width=15)
    # Each glyph is wider than the line, and gets its own line
    assert typeset(cloud, label) == (30, 36)
    assert origins_x(cloud) == [1, 1, 1]
    assert origins_y(cloud) == [-2, -14, -26]

    # A single oversized glyph stays on the first line
    assert typeset(cloud, Label("a", face, word_wrap=True, line_width=15)) == (30, 12)
    assert origins_y(cloud) == [-2]

    # After a space, the oversized glyph moves to a new line, but not further
    assert typeset(cloud, Label("a b", face, word_wrap=True, line_width=15)) == (30, 24)
    assert origins_y(cloud) == [-2, -14]


def test_alignment(monospace_face):
    # Measured width is 40
    results = {}
    for alignment in ("left", "center", "right"):
        cloud = GlyphVertexCloud()
        label = Label("ab c", monospace_face, alignment=alignment)
        assert typeset(cloud, label) == (40, 12)
        results[alignment] = np.array(origins_x(cloud))

    pen_origin_x = monospace_face.get_glyph(ord("a")).pen_origin[0]
    assert results["left"][0] == pen_origin_x
    assert np.all(results["center"] == results["left"] - 20)
    assert np.all(results["right"] == results["left"] - 40)


def test_alignment_ignores_trailing_whitespace(monospace_face):
    cloud = GlyphVertexCloud()
    typeset(cloud, Label("ab  ", monospace_face, alignment="right"))
    assert origins_x(cloud) == [1 - 20, 11 - 20]


def test_alignment_per_line(monospace_face):
    cloud = GlyphVertexCloud()
    label = Label("ab\nabcd", monospace_face, alignment="right")
    assert typeset(cloud, label) == (40, 24)
    assert origins_x(cloud) == [1 - 20, 11 - 20, 1 - 40, 11 - 40, 21 - 40, 31 - 40]

    cloud = GlyphVertexCloud()
    label = Label("ab cd", monospace_face, alignment="center")
    label.word_wrap = True
    label.line_width = 25
    assert typeset(cloud, label) == (20, 24)
    assert origins_x(cloud) == [1 - 10, 11 - 10, 1 - 10, 11 - 10]


def test_line_anchor(monospace_face):
    ys = {}
    for anchor in ("ascent", "center", "baseline", "descent"):
        cloud = GlyphVertexCloud()
        typeset(cloud, Label("ab\ncd", monospace_face, line_anchor=anchor))
        ys[anchor] = np.array(origins_y(cloud))

    ascent = monospace_face.ascent
    assert np.all(ys["baseline"] == ys["ascent"] + ascent)
    assert np.all(ys["center"] == ys["baseline"] - 3)
    assert np.all(ys["descent"] == ys["baseline"] + 2)

    # The anchor does not change the extent
    assert extent(Label("ab\ncd", monospace_face, line_anchor="ascent")) == (20, 24)


def test_transform(monospace_face):
    cloud = GlyphVertexCloud()
    label = Label("ab", monospace_face)
    label.transform = la.mat_from_scale((2, 3, 1))
    assert typeset(cloud, label) == (40, 36)
    assert origins_x(cloud) == [2, 22]
    assert origins_y(cloud) == [-6, -6]
    assert np.all(cloud.vertices["vtan"] == (16, 0, 0))
    assert np.all(cloud.vertices["vbitan"] == (0, 30, 0))

    # Rotating a quarter turn rotates the edge vectors, the extent keeps its lengths
    label.transform = la.mat_from_quat(la.quat_from_axis_angle((0, 0, 1), np.pi / 2))
    w, h = typeset(cloud, label)
    assert np.allclose((w, h), (20, 12))
    assert np.allclose(cloud.vertices["vtan"], [(0, 8, 0), (0, 8, 0)], atol=1e-5)
    assert np.allclose(cloud.vertices["vbitan"], [(-10, 0, 0), (-10, 0, 0)], atol=1e-5)


def test_color(monospace_face):
    cloud = GlyphVertexCloud()
    typeset(cloud, Label("ab", monospace_face, text_color="red"))
    assert np.all(cloud.vertices["color"] == (1, 0, 0, 1))


def test_extent_matches_typeset(monospace_face):
    texts = ["", "a", "ab cd", "abc def, ghi-jkl\n\nmno p", "  ab  ", "abcdefghij klm"]
    for text in texts:
        for alignment in ("left", "center", "right"):
            for line_width in (0, 5, 15, 25, 45, 100):
                for anchor in ("ascent", "baseline"):
                    label = Label(
                        text,
                        monospace_face,
                        word_wrap=True,
                        line_width=line_width,
                        alignment=alignment,
                        line_anchor=anchor,
                    )
                    cloud = GlyphVertexCloud()
                    assert typeset(cloud, label) == extent(label)
                    assert len(cloud) == label.depictable_count()


def test_idempotence(monospace_face):
    label = Label("abc def\nghi", monospace_face, word_wrap=True, line_width=35)
    cloud = GlyphVertexCloud()
    extent1 = typeset(cloud, label)
    vertices1 = cloud.vertices.copy()
    extent2 = typeset(cloud, label)
    assert extent1 == extent2
    assert cloud.vertices.tobytes() == vertices1.tobytes()

    # Also when the cloud held more vertices before
    typeset(cloud, Label("abcdefghijklmnop", monospace_face))
    typeset(cloud, label)
    assert cloud.vertices.tobytes() == vertices1.tobytes()


def test_multiple_labels(monospace_face):
    cloud = GlyphVertexCloud()
    label1 = Label("ab", monospace_face)
    label2 = Label("abc\nd", monospace_face)
    assert typeset(cloud, [label1, None, label2]) == (30, 24)
    assert len(cloud) == 6
    assert cloud.ranges == [range(0, 2), range(2, 6)]

    # A single label gives one range
    typeset(cloud, label1)
    assert cloud.ranges == [range(0, 2)]


def test_multiple_labels_need_one_face(monospace_face, face_factory):
    cloud = GlyphVertexCloud()
    label1 = Label("ab", monospace_face)
    label2 = Label("ab", face_factory())
    with raises(ValueError) as err:
        typeset(cloud, [label1, label2])
    assert err.match("same font face")


def test_label_without_face():
    with raises(ValueError) as err:
        typeset(GlyphVertexCloud(), Label("ab"))
    assert err.match("no font face")
    with raises(ValueError):
        extent(Label("ab"))
    with raises(TypeError):
        typeset(GlyphVertexCloud(), ["ab"])


def test_optimize(monospace_face):
    label = Label("abba cab", monospace_face)
    cloud = GlyphVertexCloud()
    typeset(cloud, label)
    plain = cloud.vertices.copy()

    typeset(cloud, label, optimize=True)
    assert cloud.ranges is None
    optimized = cloud.vertices.copy()

    # Same multiset of vertices
    assert len(plain) == len(optimized) == 7
    assert sorted(v.tobytes() for v in plain) == sorted(v.tobytes() for v in optimized)

    # Grouped per glyph, in ascending code point order
    firsts = optimized["uv_rect"][:, 0].tolist()
    a, b, c = (monospace_face.get_glyph(ord(ch)).subtexture_rectangle[0] for ch in "abc")
    assert np.allclose(firsts, [a, a, a, b, b, b, c])

    # Within a group the original order is kept
    a_origins = optimized["origin"][:3, 0].tolist()
    assert a_origins == sorted(a_origins)


def test_texture_and_buffer(monospace_face):
    texture = Texture(np.zeros((4, 4), np.uint8))
    monospace_face.glyph_texture = texture

    cloud = GlyphVertexCloud()
    typeset(cloud, Label("abc", monospace_face))
    assert cloud.texture is texture
    assert cloud.buffer is not None
    assert cloud.buffer.draw_range == (0, 3)
    assert cloud.buffer.view[:3].tobytes() == cloud.vertices.tobytes()


def test_dryrun(monospace_face):
    cloud = GlyphVertexCloud()
    typeset(cloud, Label("abc", monospace_face))
    rev = cloud.buffer.rev
    assert Typesetter.typeset(cloud, Label("a b", monospace_face), dryrun=True) == (30, 12)
    assert len(cloud) == 3
    assert cloud.buffer.rev == rev
    assert Typesetter.extent(Label("a b", monospace_face)) == (30, 12)


def test_word_wrap_starts_moved_word_at_line_origin(monospace_face):
    # Kerning between the space and "c" does not carry over to the new line
    monospace_face.set_kerning(ord(" "), ord("c"), -2)

    # "c" fits on the first line, then moves with "d"
    cloud = GlyphVertexCloud()
    label = Label("ab cd", monospace_face, word_wrap=True, line_width=45)
    assert typeset(cloud, label) == (20, 24)
    assert origins_x(cloud) == [1, 11, 1, 11]
    assert origins_y(cloud) == [-2, -2, -14, -14]

    # "c" itself overflows
    label.line_width = 35
    assert typeset(cloud, label) == (20, 24)
    assert origins_x(cloud) == [1, 11, 1, 11]

    # On the first line the kerning applies
    label.line_width = 100
    assert typeset(cloud, label) == (48, 12)
    assert origins_x(cloud) == [1, 11, 29, 39]


def test_word_wrap_keeps_kerning_inside_moved_word(monospace_face):
    monospace_face.set_kerning(ord("c"), ord("d"), -3)
    cloud = GlyphVertexCloud()
    label = Label("ab cde", monospace_face, word_wrap=True, line_width=55)
    assert typeset(cloud, label) == (27, 24)
    assert origins_x(cloud) == [1, 11, 1, 8, 18]


def test_transform_is_affine(monospace_face):
    # The bottom row of the matrix does not cause a division
    matrix = np.identity(4)
    matrix[3, 0] = 0.1
    cloud = GlyphVertexCloud()
    label = Label("ab", monospace_face, transform=matrix)
    assert typeset(cloud, label) == (20, 12)
    assert np.allclose(cloud.vertices["origin"], [(1, -2, 0), (11, -2, 0)])
    assert np.allclose(cloud.vertices["vtan"], [(8, 0, 0), (8, 0, 0)])


def test_texture_handle_without_weak_references(monospace_face):
    class Handle:
        __slots__ = ["name"]

    for handle in (7, "atlas", Handle()):
        monospace_face.glyph_texture = handle
        cloud = GlyphVertexCloud()
        assert typeset(cloud, Label("ab", monospace_face)) == (20, 12)
        assert cloud.texture is handle


def test_delimiters():
    for c in " \t\n,.-/?!":
        assert is_delimiter(ord(c))
    for c in "aZ0_'":
        assert not is_delimiter(ord(c))


if __name__ == "__main__":
    from conftest import make_monospace_face

    for name, func in list(globals().items()):
        if name.startswith("test_"):
            args = [make_monospace_face()]
            if name == "test_oversized_glyph_is_not_wrapped_forever":
                args = [make_monospace_face]
            elif name == "test_multiple_labels_need_one_face":
                args.append(make_monospace_face)
            elif name in ("test_label_without_face", "test_delimiters"):
                args = []
            func(*args)
