"""
The typesetter: lays out labels into glyph vertices.

The layout runs in the font face's native units. The pen starts at the
origin (shifted vertically to realize the label's line anchor) and moves
right by the advance of each glyph. A new line moves the pen down by the
face's line height.

Word wrapping uses two spans of glyphs: the current line, and the
segment since the last delimiter. When a glyph overflows the line width,
the segment is moved to the next line as a whole. If the segment already
starts the line (a word that is wider than the line), the line is broken
at the glyph instead. Kerning within a moved segment is kept, but the
kerning between the segment and the delimiter before it is dropped, so that
every line starts at x=0.

The width of a line is the pen position after its last depictable glyph,
so that trailing whitespace does not count for alignment or extent.
"""

import numpy as np
import pylinalg as la

from ._delimiters import is_delimiter
from ._label import Label
from ..utils.enums import Alignment
from ..utils import logger


class _LineState:
    """The mutable state of the layout of one label."""

    def __init__(self, pen_y, emit_count):
        self.pen_x = 0.0
        self.pen_y = pen_y
        self.width = 0.0
        self.height = 0.0
        self.line_count = 0
        # Vertex index where the current line starts, and its right edge
        self.line_start = 0
        self.line_right = 0.0
        # The segment since the last delimiter
        self.segment_start = 0
        self.segment_x = 0.0
        self.segment_line_right = 0.0
        self.segment_right = None
        # Kerning applied to the first glyph of the segment, None before it
        self.segment_kerning = None
        # Local positions of the emitted glyph quads (pre-transform)
        self.origins = np.zeros((emit_count, 2), np.float64) if emit_count else None
        self.count = 0

    def restart_segment(self):
        self.segment_start = self.count
        self.segment_x = self.pen_x
        self.segment_line_right = self.line_right
        self.segment_right = None
        self.segment_kerning = None


class Typesetter:
    """Lay out labels into a :class:`GlyphVertexCloud`.

    The typesetter has no state of its own; its methods can be used as
    plain functions (see also the module level ``typeset()`` and ``extent()``).
    """

    @staticmethod
    def typeset(cloud, labels, *, optimize=False, dryrun=False):
        """Lay out one or more labels into the given cloud.

        The cloud is cleared first. All labels must use the same font face,
        because the cloud is drawn with a single texture. If ``optimize`` is
        set, the vertices are grouped per glyph for better texture cache
        locality. With ``dryrun`` no vertices are produced, and the cloud
        can be None.

        Returns the extent (width, height) of the text in the target space
        of the labels (the component-wise maximum for multiple labels).
        After the call ``cloud.ranges`` holds the vertex range of each label
        (None when optimized).
        """
        if isinstance(labels, Label):
            labels = [labels]
        labels = [label for label in labels if label is not None]

        face = None
        for label in labels:
            if not isinstance(label, Label):
                raise TypeError(f"Expected Label objects, got {label.__class__.__name__}.")
            if label.font_face is None:
                raise ValueError("Cannot typeset a label that has no font face.")
            if face is None:
                face = label.font_face
            elif label.font_face is not face:
                raise ValueError(
                    "All labels that are typeset into one cloud must use the same font face."
                )

        if not dryrun:
            cloud.clear()
            cloud.texture = None if face is None else face.glyph_texture

        buckets = {}
        ranges = []
        extent_w = extent_h = 0.0
        for label in labels:
            start = 0 if dryrun else len(cloud)
            w, h = _typeset_label(label, None if dryrun else cloud, buckets)
            extent_w, extent_h = max(extent_w, w), max(extent_h, h)
            if not dryrun:
                ranges.append(range(start, len(cloud)))

        if not dryrun:
            if optimize:
                cloud.optimize(buckets)
            else:
                cloud.ranges = ranges
            cloud.update()

        return extent_w, extent_h

    @staticmethod
    def extent(label):
        """Measure the extent (width, height) of the label, without producing vertices."""
        return Typesetter.typeset(None, label, dryrun=True)


def _typeset_label(label, cloud, buckets):
    face = label.font_face
    text = label.text
    code_points = text.text
    line_feed = text.line_feed
    line_height = face.line_height
    line_width = label.line_width
    wrap = label.word_wrap and line_width > 0
    alignment = label.alignment

    if not code_points:
        return 0.0, 0.0

    emit = cloud is not None
    emit_count = label.depictable_count() if emit else 0
    state = _LineState(label.line_anchor_offset, emit_count)
    glyphs = []

    def overflows(glyph, kerning):
        # A glyph that is wider than the line is allowed on an empty line
        if glyph.advance > line_width and state.pen_x <= 0.0:
            return False
        return state.pen_x + kerning + glyph.advance > line_width

    def feed_line(right, end):
        state.width = max(state.width, right)
        state.height += line_height
        state.line_count += 1
        if emit and alignment != Alignment.left and right != 0.0:
            shift = right if alignment == Alignment.right else right * 0.5
            state.origins[state.line_start : end, 0] -= shift
        state.line_start = end
        state.pen_y -= line_height

    prev = None
    for c in code_points:
        if c == line_feed:
            feed_line(state.line_right, state.count)
            state.pen_x = 0.0
            state.line_right = 0.0
            state.restart_segment()
            prev = None
            continue

        glyph = face.glyph(c)
        kerning = 0.0 if prev is None else face.kerning(prev, c)

        if wrap and glyph.depictable and overflows(glyph, kerning):
            if state.segment_x > 0.0:
                # Move the segment to a new line, which starts at x=0
                dx = state.segment_x
                if state.segment_kerning is None:
                    kerning = 0.0
                else:
                    dx += state.segment_kerning
                    state.segment_kerning = 0.0
                feed_line(state.segment_line_right, state.segment_start)
                if emit:
                    moved = state.origins[state.segment_start : state.count]
                    moved[:, 0] -= dx
                    moved[:, 1] -= line_height
                state.pen_x -= dx
                if state.segment_right is None:
                    state.line_right = 0.0
                else:
                    state.segment_right -= dx
                    state.line_right = state.segment_right
                state.segment_x = 0.0
                state.segment_line_right = 0.0
            if overflows(glyph, kerning):
                # Break the line at this glyph, which starts a new segment
                feed_line(state.line_right, state.count)
                state.pen_x = 0.0
                state.line_right = 0.0
                kerning = 0.0
                state.restart_segment()

        if state.segment_kerning is None:
            state.segment_kerning = kerning
        state.pen_x += kerning

        if glyph.depictable:
            if emit:
                ox, oy = glyph.pen_origin
                state.origins[state.count] = state.pen_x + ox, state.pen_y + oy
                glyphs.append(glyph)
                buckets.setdefault(glyph.index, []).append(len(cloud) + state.count)
            state.count += 1

        state.pen_x += glyph.advance

        if glyph.depictable:
            state.line_right = state.pen_x
            state.segment_right = state.pen_x

        if is_delimiter(c):
            state.restart_segment()
        prev = c

    feed_line(state.line_right, state.count)
    logger.debug(f"Typeset {len(code_points)} code points in {state.line_count} lines.")

    if emit and state.count:
        _write_vertices(cloud, label, state.origins[: state.count], glyphs)

    return _transform_extent(label.transform, state.width, state.height)


def _write_vertices(cloud, label, origins, glyphs):
    """Transform the glyph quads with the label's transform and write them to the cloud."""
    n = len(glyphs)
    tangents = np.array([g.pen_tangent for g in glyphs], np.float64)
    bitangents = np.array([g.pen_bitangent for g in glyphs], np.float64)
    uv_rects = np.array([g.subtexture_rectangle for g in glyphs], np.float32)

    ll = np.zeros((n, 3), np.float64)
    ll[:, :2] = origins
    lr = ll.copy()
    lr[:, :2] += tangents
    ul = ll.copy()
    ul[:, :2] += bitangents

    # Transform the corners, the edge vectors follow from them.
    # No division by w: the matrix is applied as an affine map.
    matrix = np.asarray(label.transform, np.float64)
    ll = la.vec_transform(ll, matrix, projection=False)
    lr = la.vec_transform(lr, matrix, projection=False)
    ul = la.vec_transform(ul, matrix, projection=False)

    index_range = cloud.allocate(n)
    cloud.write(
        index_range,
        origin=ll,
        vtan=lr - ll,
        vbitan=ul - ll,
        uv_rect=uv_rects,
        color=np.asarray(label.text_color),
    )


def _transform_extent(transform, width, height):
    matrix = np.asarray(transform, np.float64)
    points = la.vec_transform(
        np.array([[0, 0, 0], [width, 0, 0], [0, height, 0]], np.float64),
        matrix,
        projection=False,
    )
    return (
        float(la.vec_dist(points[1], points[0])),
        float(la.vec_dist(points[2], points[0])),
    )


def typeset(cloud, labels, *, optimize=False, dryrun=False):
    """Lay out one or more labels into the given cloud. See :meth:`Typesetter.typeset`."""
    return Typesetter.typeset(cloud, labels, optimize=optimize, dryrun=dryrun)


def extent(label):
    """Measure the extent of a label. See :meth:`Typesetter.extent`."""
    return Typesetter.extent(label)
