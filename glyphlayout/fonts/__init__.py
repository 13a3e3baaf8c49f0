"""
Bitmap fonts: glyph metrics, font faces, and loading them from font descriptions.

.. currentmodule:: glyphlayout.fonts

.. autosummary::
    :toctree: fonts/
    :template: ../_templates/custom_layout.rst

    Glyph
    FontFace
    FontLoader
    load_font

"""

# ruff: noqa: F401

from ._glyph import Glyph
from ._fontface import FontFace
from ._loader import FontLoader, load_font

__all__ = ["FontFace", "FontLoader", "Glyph", "load_font"]
