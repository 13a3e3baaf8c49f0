"""
Text layout: labels, the typesetter, and the glyph vertex cloud it produces.

The stages of getting text on screen:

* Loading a bitmap font (see ``glyphlayout.fonts``).
* Describing the text and its style with a ``Label``.
* Typesetting the label(s) into a ``GlyphVertexCloud``.
* Rendering the cloud's buffer with the font's atlas texture (not part of glyphlayout).

.. currentmodule:: glyphlayout.text

.. autosummary::
    :toctree: text/
    :template: ../_templates/custom_layout.rst

    Text
    Label
    Typesetter
    GlyphVertexCloud
    typeset
    extent
    optimize_vertices

"""

# ruff: noqa: F401

from ._text import Text
from ._label import Label
from ._delimiters import DELIMITERS, is_delimiter
from ._vertexcloud import GlyphVertexCloud, VERTEX_DTYPE, optimize_vertices
from ._typesetter import Typesetter, typeset, extent

__all__ = [
    "GlyphVertexCloud",
    "Label",
    "Text",
    "Typesetter",
    "VERTEX_DTYPE",
    "extent",
    "optimize_vertices",
    "typeset",
]
