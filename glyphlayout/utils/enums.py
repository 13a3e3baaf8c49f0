"""
The enums used in glyphlayout. The enums are all available from the root ``glyphlayout`` namespace.

.. currentmodule:: glyphlayout.utils.enums

.. autosummary::
    :toctree: utils/enums
    :template: ../_templates/custom_layout.rst

    Alignment
    LineAnchor
    TextureFilter
    TextureAddressMode

"""

import wgpu
from wgpu.utils import BaseEnum


__all__ = [
    "Alignment",
    "LineAnchor",
    "TextureAddressMode",
    "TextureFilter",
]


class Enum(BaseEnum):
    """Enum base class for glyphlayout."""


class Alignment(Enum):
    """How the lines of a label are aligned horizontally."""

    left = None  #: The line starts at the label origin.
    center = None  #: The line is centered on the label origin.
    right = None  #: The line ends at the label origin.


class LineAnchor(Enum):
    """Which horizontal guide of the first line is placed at the label origin."""

    ascent = None  #: The top of the font's ascender.
    center = None  #: Halfway between the ascender and the descender.
    baseline = None  #: The baseline (the default).
    descent = None  #: The bottom of the font's descender.


class TextureFilter(Enum):
    """The sampling filter requested for a glyph atlas texture."""

    nearest = wgpu.FilterMode.nearest  #: Nearest-neighbour sampling.
    linear = wgpu.FilterMode.linear  #: Linear interpolation (used for glyph atlases).


class TextureAddressMode(Enum):
    """The wrap mode requested for a glyph atlas texture."""

    clamp_to_edge = wgpu.AddressMode.clamp_to_edge  #: Clamp to the border texel.
    repeat = wgpu.AddressMode.repeat  #: Repeat the texture.
    mirror_repeat = wgpu.AddressMode.mirror_repeat  #: Repeat, mirrored.


def to_enum(name, enum, value, default=None):
    """Resolve a str (or None) to a value of the given enum.

    Matching is case insensitive, and dashes are treated as underscores.
    """
    if value is None:
        value = default
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, not {value.__class__.__name__}.")
    key = value.lower().strip().replace("-", "_")
    if key not in enum.__fields__:
        # Allow passing the enum value itself, e.g. "clamp-to-edge"
        for field in enum.__fields__:
            if enum[field] == value:
                return enum[field]
        raise ValueError(f"{name} must be one of {enum}. Got {value!r}.")
    return enum[key]


# NOTE: Don't forget to add new enums to the toctree and __all__
