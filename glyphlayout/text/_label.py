"""The Label class: a styled request to lay out a piece of text."""

import numpy as np
import pylinalg as la

from ._text import Text
from ..fonts import FontFace
from ..utils import Color, assert_type, as_vec
from ..utils.enums import Alignment, LineAnchor, to_enum


class Label:
    """A piece of text with its font and styling, ready to be typeset.

    The label references (but does not own) a font face; the face must
    outlive the label. The typesetter only reads the label.

    Parameters
    ----------
    text : str | Text | None
        The text. A :class:`Text` object is shared, a str is wrapped in a new Text.
    font_face : FontFace | None
        The font to lay out the text with. Must be set before typesetting.
    font_size : float
        The target size of the font, used by the transform helpers. Default 16.
    word_wrap : bool
        Whether to wrap lines that are wider than ``line_width``. Default False.
    line_width : float
        The width at which lines are wrapped, in the font face's native units.
        Zero means unbounded. Default 0.
    alignment : str | Alignment
        The horizontal alignment of the lines. Default "left".
    line_anchor : str | LineAnchor
        Which guide of the first line is placed at the origin. Default "baseline".
    text_color : Color
        The color of the text. Default black.
    margins : tuple
        The margins (top, right, bottom, left) used by ``set_transform_2d()``.
    transform : array | None
        A 4x4 matrix that maps the laid-out text to the target space.
        Default the identity.
    """

    def __init__(
        self,
        text=None,
        font_face=None,
        *,
        font_size=16,
        word_wrap=False,
        line_width=0,
        alignment="left",
        line_anchor="baseline",
        text_color=(0, 0, 0, 1),
        margins=(0, 0, 0, 0),
        transform=None,
    ):
        self.text = text
        self.font_face = font_face
        self.font_size = font_size
        self.word_wrap = word_wrap
        self.line_width = line_width
        self.alignment = alignment
        self.line_anchor = line_anchor
        self.text_color = text_color
        self.margins = margins
        self.transform = transform

    def __repr__(self):
        return f"<Label {len(self._text)} code points at {hex(id(self))}>"

    # %% Content

    @property
    def text(self):
        """The :class:`Text` object of this label.

        Can be set with a Text (which is then shared) or with a str.
        """
        return self._text

    @text.setter
    def text(self, text):
        if isinstance(text, Text):
            self._text = text
        else:
            self._text = Text(text)

    @property
    def font_face(self):
        """The font face to lay out the text with."""
        return self._font_face

    @font_face.setter
    def font_face(self, font_face):
        assert_type("font_face", font_face, None, FontFace)
        self._font_face = font_face

    def depictable_count(self):
        """The number of code points that produce a glyph quad."""
        face = self._require_font_face()
        return sum(1 for c in self._text.text if face.depictable(c))

    def depictable_chars(self):
        """The code points that produce a glyph quad, in text order."""
        face = self._require_font_face()
        return tuple(c for c in self._text.text if face.depictable(c))

    def _require_font_face(self):
        if self._font_face is None:
            raise ValueError("The label has no font face.")
        return self._font_face

    def _font_scale(self, face):
        if face.size == 0:
            raise ValueError("Cannot scale the label, its font face has zero size.")
        return self._font_size / face.size

    # %% Layout parameters

    @property
    def font_size(self):
        """The target size of the font."""
        return self._font_size

    @font_size.setter
    def font_size(self, size):
        size = float(size)
        if not size > 0:
            raise ValueError(f"Font size must be positive, got {size}.")
        self._font_size = size

    @property
    def word_wrap(self):
        """Whether lines wider than ``line_width`` are wrapped."""
        return self._word_wrap

    @word_wrap.setter
    def word_wrap(self, wrap):
        self._word_wrap = bool(wrap)

    @property
    def line_width(self):
        """The wrap width in the font face's native units. Zero means unbounded."""
        return self._line_width

    @line_width.setter
    def line_width(self, width):
        self._line_width = max(float(width or 0), 0.0)

    def set_line_width(self, width, *, font_size_space=False):
        """Set the wrap width.

        If ``font_size_space`` is set, the width is expressed in the label's
        font size rather than in the font face's native size, and is converted
        using the font face.
        """
        if font_size_space:
            face = self._require_font_face()
            width = float(width) * face.size / self._font_size
        self.line_width = width

    @property
    def alignment(self):
        """The horizontal alignment of the lines. See :obj:`Alignment`."""
        return self._alignment

    @alignment.setter
    def alignment(self, alignment):
        self._alignment = to_enum("alignment", Alignment, alignment, "left")

    @property
    def line_anchor(self):
        """The guide of the first line that is placed at the origin. See :obj:`LineAnchor`."""
        return self._line_anchor

    @line_anchor.setter
    def line_anchor(self, anchor):
        self._line_anchor = to_enum("line_anchor", LineAnchor, anchor, "baseline")

    @property
    def line_anchor_offset(self):
        """The vertical pen offset of the first line that realizes the line anchor."""
        face = self._require_font_face()
        anchor = self._line_anchor
        if anchor == LineAnchor.ascent:
            return -face.ascent
        elif anchor == LineAnchor.center:
            return -(face.size * 0.5 + face.descent)
        elif anchor == LineAnchor.descent:
            return -face.descent
        return 0.0

    # %% Appearance and placement

    @property
    def text_color(self):
        """The :class:`Color` of the text."""
        return self._text_color

    @text_color.setter
    def text_color(self, color):
        self._text_color = Color(color)

    @property
    def margins(self):
        """The margins (top, right, bottom, left), applied in ``set_transform_2d()``."""
        return self._margins

    @margins.setter
    def margins(self, margins):
        self._margins = as_vec("margins", margins, 4)

    @property
    def transform(self):
        """The 4x4 matrix that maps the laid-out text to the target space."""
        return self._transform

    @transform.setter
    def transform(self, transform):
        if transform is None:
            transform = np.identity(4, np.float32)
        transform = np.array(transform, np.float32)
        if transform.shape != (4, 4):
            raise ValueError(f"Label transform must be a 4x4 matrix, got shape {transform.shape}.")
        self._transform = transform

    def set_transform_2d(self, origin, viewport_extent, pixel_per_inch=72):
        """Set the transform to place the text in normalized device coordinates.

        The ``origin`` is in NDC (-1..1) and is mapped into the viewport
        minus the margins. Glyphs are scaled from the face's size to
        ``font_size`` points, where a point is ``pixel_per_inch / 72`` pixels.
        """
        face = self._require_font_face()
        ox, oy = as_vec("origin", origin, 2)
        vw, vh = as_vec("viewport_extent", viewport_extent, 2)
        top, right, bottom, left = self._margins
        ppi_scale = float(pixel_per_inch) / 72.0

        margined_w = vw / ppi_scale - (left + right)
        margined_h = vh / ppi_scale - (bottom + top)
        position = (
            (0.5 * ox + 0.5) * margined_w + left,
            (0.5 * oy + 0.5) * margined_h + bottom,
            0.0,
        )
        font_scale = self._font_scale(face)

        self.transform = (
            la.mat_from_translation((-1.0, -1.0, 0.0))
            @ la.mat_from_scale((2.0 / vw, 2.0 / vh, 1.0))
            @ la.mat_from_scale((ppi_scale, ppi_scale, 1.0))
            @ la.mat_from_translation(position)
            @ la.mat_from_scale((font_scale, font_scale, 1.0))
        )

    def set_transform_3d(self, origin, transform=None):
        """Set the transform to place the text in world space.

        The text is first transformed by the given matrix (e.g. a rotation),
        then scaled from the face's size to ``font_size`` world units, and
        finally translated to the origin.
        """
        face = self._require_font_face()
        origin = as_vec("origin", origin, 3)
        if transform is None:
            transform = np.identity(4)
        font_scale = self._font_scale(face)

        self.transform = (
            la.mat_from_translation(origin)
            @ la.mat_from_scale((font_scale, font_scale, font_scale))
            @ np.asarray(transform, np.float64)
        )
