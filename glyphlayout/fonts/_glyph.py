"""The Glyph class: per-character metrics of a bitmap font."""

from ..utils import as_vec


class Glyph:
    """The metrics of a single character in a font face.

    All values are expressed in the font's native size. The sub texture
    origin and extent are in normalized atlas coordinates (origin at the
    lower-left). A glyph with a zero-area sub texture (e.g. a space) is not
    depictable: it only advances the pen.

    The glyph also caches render-space vectors that the typesetter adds to
    the pen position. These depend on the padding and atlas extent of the
    font face the glyph belongs to, which the face provides when the glyph
    is inserted.

    Parameters
    ----------
    index : int
        The code point of the glyph.
    """

    def __init__(self, index=0):
        self._index = int(index)
        self._sub_texture_origin = 0.0, 0.0
        self._sub_texture_extent = 0.0, 0.0
        self._bearing = 0.0, 0.0
        self._extent = 0.0, 0.0
        self._advance = 0.0
        self._kernings = {}
        # Face geometry: (top, right, bottom, left) and (1/width, 1/height)
        self._padding = 0.0, 0.0, 0.0, 0.0
        self._inverse_atlas_extent = 1.0, 1.0
        self._update_pen_vectors()

    def __repr__(self):
        return f"<Glyph {self._index} advance {self._advance} at {hex(id(self))}>"

    @property
    def index(self):
        """The code point of this glyph."""
        return self._index

    @index.setter
    def index(self, index):
        self._index = int(index)

    @property
    def sub_texture_origin(self):
        """The lower-left corner of the glyph in the atlas, in normalized coordinates."""
        return self._sub_texture_origin

    @sub_texture_origin.setter
    def sub_texture_origin(self, origin):
        self._sub_texture_origin = as_vec("sub_texture_origin", origin, 2)
        self._update_pen_vectors()

    @property
    def sub_texture_extent(self):
        """The size of the glyph in the atlas, in normalized coordinates."""
        return self._sub_texture_extent

    @sub_texture_extent.setter
    def sub_texture_extent(self, extent):
        self._sub_texture_extent = as_vec("sub_texture_extent", extent, 2)
        self._update_pen_vectors()

    @property
    def bearing(self):
        """The offset from the pen position to the upper-left corner of the glyph box."""
        return self._bearing

    @bearing.setter
    def bearing(self, bearing):
        self._bearing = as_vec("bearing", bearing, 2)
        self._update_pen_vectors()

    def set_bearing_from_offsets(self, ascent, xoffset, yoffset):
        """Set the bearing from a font's ascent and the offsets of a bitmap
        font description (where y points down from the line top).
        """
        self.bearing = float(xoffset), float(ascent) - float(yoffset)

    @property
    def extent(self):
        """The size of the glyph box."""
        return self._extent

    @extent.setter
    def extent(self, extent):
        self._extent = as_vec("extent", extent, 2)
        self._update_pen_vectors()

    @property
    def advance(self):
        """The horizontal pen movement after placing this glyph."""
        return self._advance

    @advance.setter
    def advance(self, advance):
        self._advance = float(advance)

    @property
    def depictable(self):
        """Whether this glyph has a visual representation."""
        w, h = self._sub_texture_extent
        return w > 0.0 and h > 0.0

    # %% Kerning

    def kerning(self, subsequent_index):
        """Get the horizontal adjustment when this glyph is followed by the
        given glyph. Returns 0.0 for unknown pairs.
        """
        return self._kernings.get(subsequent_index, 0.0)

    def set_kerning(self, subsequent_index, amount):
        """Set the horizontal adjustment for when this glyph is followed by the given glyph."""
        self._kernings[int(subsequent_index)] = float(amount)

    @property
    def kernings(self):
        """A copy of the kerning map (subsequent index -> amount)."""
        return dict(self._kernings)

    # %% Derived pen vectors

    def _set_face_geometry(self, padding, inverse_atlas_extent):
        self._padding = padding
        self._inverse_atlas_extent = inverse_atlas_extent
        self._update_pen_vectors()

    def _update_pen_vectors(self):
        top, right, bottom, left = self._padding
        inv_w, inv_h = self._inverse_atlas_extent
        bx, by = self._bearing
        ex, ey = self._extent
        ox, oy = self._sub_texture_origin
        sx, sy = self._sub_texture_extent

        self._pen_origin = bx - left, by - ey - bottom
        self._pen_tangent = ex + left + right, 0.0
        self._pen_bitangent = 0.0, ey + top + bottom
        self._subtexture_rectangle = (
            ox - left * inv_w,
            oy - bottom * inv_h,
            ox + sx + right * inv_w,
            oy + sy + top * inv_h,
        )

    @property
    def pen_origin(self):
        """The lower-left corner of the (padded) glyph quad, relative to the pen."""
        return self._pen_origin

    @property
    def pen_tangent(self):
        """The horizontal edge of the (padded) glyph quad."""
        return self._pen_tangent

    @property
    def pen_bitangent(self):
        """The vertical edge of the (padded) glyph quad."""
        return self._pen_bitangent

    @property
    def subtexture_rectangle(self):
        """The (padded) atlas rectangle as (u0, v0, u1, v1)."""
        return self._subtexture_rectangle
