"""Glyphlayout: lay out text with bitmap fonts into glyph quads for GPU rendering."""

# ruff: noqa: F401, F403

from ._version import __version__, version_info
from . import utils

from .resources import *
from .fonts import *
from .text import *

from .utils.color import Color
from .utils import enums, logger
from .utils.enums import *
