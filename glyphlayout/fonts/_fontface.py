"""The FontFace class: a bitmap font with its glyphs and metrics."""

from ._glyph import Glyph
from ..utils import as_vec


EMPTY_GLYPH = Glyph(0)


class FontFace:
    """A collection of glyphs with font-wide metrics and an atlas texture.

    A font face is usually created with :func:`~glyphlayout.load_font`. Once
    loaded it is shared (read-only) by all labels that reference it.

    The vertical metrics are relative to the baseline: ``ascent`` is
    positive, ``descent`` is usually negative. The ``size`` of the font is
    ``ascent - descent`` and the distance between two baselines is
    ``line_height = size + linegap``.
    """

    def __init__(self):
        self._ascent = 1.0
        self._descent = 0.0
        self._linegap = 0.0
        self._glyph_texture = None
        self._glyph_texture_extent = 1.0, 1.0
        self._inverse_glyph_texture_extent = 1.0, 1.0
        self._glyph_texture_padding = 0.0, 0.0, 0.0, 0.0
        self._glyphs = {}
        self._kerning_memo = None, None, 0.0

    def __repr__(self):
        return f"<FontFace {len(self._glyphs)} glyphs, size {self.size} at {hex(id(self))}>"

    def __len__(self):
        return len(self._glyphs)

    # %% Vertical metrics

    @property
    def ascent(self):
        """The distance from the baseline to the top of the font. Must be positive."""
        return self._ascent

    @ascent.setter
    def ascent(self, ascent):
        ascent = float(ascent)
        if not ascent > 0.0:
            raise ValueError(f"FontFace ascent must be positive, got {ascent}.")
        self._ascent = ascent

    @property
    def descent(self):
        """The distance from the baseline to the bottom of the font, usually negative."""
        return self._descent

    @descent.setter
    def descent(self, descent):
        self._descent = float(descent)

    @property
    def linegap(self):
        """The extra space between two lines."""
        return self._linegap

    @linegap.setter
    def linegap(self, linegap):
        self._linegap = float(linegap)

    @property
    def size(self):
        """The font size, i.e. ``ascent - descent``."""
        return self._ascent - self._descent

    @property
    def line_height(self):
        """The distance between two baselines. Setting it changes the linegap."""
        return self.size + self._linegap

    @line_height.setter
    def line_height(self, line_height):
        self._linegap = float(line_height) - self.size

    @property
    def linespace(self):
        """The ratio of size and line height. Zero if the line height is zero.
        Setting it changes the linegap.
        """
        line_height = self.line_height
        if line_height == 0.0:
            return 0.0
        return self.size / line_height

    @linespace.setter
    def linespace(self, spacing):
        self._linegap = self.size * (float(spacing) - 1.0)

    # %% Atlas

    @property
    def glyph_texture(self):
        """The atlas texture handle, as created by the texture factory."""
        return self._glyph_texture

    @glyph_texture.setter
    def glyph_texture(self, texture):
        self._glyph_texture = texture

    @property
    def glyph_texture_extent(self):
        """The size of the atlas in pixels (width, height)."""
        return self._glyph_texture_extent

    @glyph_texture_extent.setter
    def glyph_texture_extent(self, extent):
        w, h = as_vec("glyph_texture_extent", extent, 2)
        if not (w > 0.0 and h > 0.0):
            raise ValueError(f"Glyph texture extent must be positive, got {(w, h)}.")
        self._glyph_texture_extent = w, h
        self._inverse_glyph_texture_extent = 1.0 / w, 1.0 / h
        self._update_glyph_geometry()

    @property
    def inverse_glyph_texture_extent(self):
        """The reciprocal of the atlas size."""
        return self._inverse_glyph_texture_extent

    @property
    def glyph_texture_padding(self):
        """The padding around each glyph in the atlas as (top, right, bottom, left)."""
        return self._glyph_texture_padding

    @glyph_texture_padding.setter
    def glyph_texture_padding(self, padding):
        padding = as_vec("glyph_texture_padding", padding, 4)
        if any(p < 0.0 for p in padding):
            raise ValueError(f"Glyph texture padding cannot be negative, got {padding}.")
        self._glyph_texture_padding = padding
        self._update_glyph_geometry()

    def _update_glyph_geometry(self):
        for glyph in self._glyphs.values():
            glyph._set_face_geometry(
                self._glyph_texture_padding, self._inverse_glyph_texture_extent
            )

    # %% Glyphs

    def has_glyph(self, index):
        """Get whether a glyph for the given code point exists."""
        return index in self._glyphs

    def get_glyph(self, index):
        """Get the glyph for the given code point, or None if there is none."""
        return self._glyphs.get(index)

    def glyph(self, index):
        """Get the glyph for the given code point.

        If the face has no such glyph, an empty glyph is returned, which is
        not depictable and has zero advance. The face is never modified.
        """
        return self._glyphs.get(index, EMPTY_GLYPH)

    def insert_glyph(self, glyph):
        """Insert a glyph, replacing an existing glyph with the same index."""
        if not isinstance(glyph, Glyph):
            raise TypeError(f"Expected a Glyph, got {glyph.__class__.__name__}.")
        glyph._set_face_geometry(
            self._glyph_texture_padding, self._inverse_glyph_texture_extent
        )
        self._glyphs[glyph.index] = glyph
        self._kerning_memo = None, None, 0.0

    def glyphs(self):
        """Get a sorted list of the code points that have a glyph."""
        return sorted(self._glyphs)

    def depictable(self, index):
        """Get whether the glyph for the given code point is depictable."""
        glyph = self._glyphs.get(index)
        return glyph is not None and glyph.depictable

    # %% Kerning

    def kerning(self, index, subsequent_index):
        """Get the horizontal adjustment between two glyphs.

        Returns 0.0 for pairs without kerning information.
        """
        memo_index, memo_subsequent, memo_amount = self._kerning_memo
        if index == memo_index and subsequent_index == memo_subsequent:
            return memo_amount
        glyph = self._glyphs.get(index)
        amount = 0.0 if glyph is None else glyph.kerning(subsequent_index)
        self._kerning_memo = index, subsequent_index, amount
        return amount

    def set_kerning(self, index, subsequent_index, amount):
        """Set the horizontal adjustment between two glyphs. The first glyph must exist."""
        glyph = self._glyphs.get(index)
        if glyph is None:
            raise ValueError(f"Cannot set kerning for missing glyph {index}.")
        glyph.set_kerning(subsequent_index, amount)
        self._kerning_memo = None, None, 0.0
