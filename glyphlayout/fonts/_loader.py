"""Loading of bitmap fonts from text font descriptions (the BMFont text format).

A description consists of lines like::

    info face="Open Sans" size=32 padding=4,4,4,4
    common lineHeight=44 base=34 scaleW=512 scaleH=512
    page id=0 file="opensans.raw"
    char id=65 x=10 y=20 width=18 height=23 xoffset=0 yoffset=8 xadvance=19
    kerning first=65 second=86 amount=-2

The atlas image is resolved relative to the description file. A ``.raw``
file holds a single channel uint8 raster without header. Other formats are
read with imageio, of which the first channel is used.
"""

import shlex
import logging
from pathlib import Path

import numpy as np
import imageio.v3 as iio

from ._glyph import Glyph
from ._fontface import FontFace
from ..resources import create_texture


logger = logging.getLogger("glyphlayout")


MANDATORY_KEYS = {
    "info": ("size", "padding"),
    "common": ("lineHeight", "base", "scaleW", "scaleH"),
    "page": ("file",),
    "char": ("id", "x", "y", "width", "height", "xoffset", "yoffset", "xadvance"),
    "kerning": ("first", "second", "amount"),
}


class RecordError(Exception):
    """Raised for a record that cannot be used. The loader skips such records."""


def parse_record(line):
    """Parse a line of a font description into a (tag, dict) tuple.

    Values may be quoted (quotes are removed). Returns (None, {}) for
    empty lines.
    """
    line = line.replace("\r", "").strip()
    if not line:
        return None, {}
    tag, _, rest = line.partition(" ")
    try:
        items = shlex.split(rest)
    except ValueError as err:
        raise RecordError(f"cannot split {tag!r} record: {err}") from None
    record = dict(item.split("=", 1) for item in items if "=" in item)
    return tag, record


def get_values(tag, record):
    """Get the mandatory values of a record, in the order of MANDATORY_KEYS."""
    missing = [key for key in MANDATORY_KEYS[tag] if key not in record]
    if missing:
        raise RecordError(f"{tag!r} record misses {', '.join(missing)}")
    return [record[key] for key in MANDATORY_KEYS[tag]]


def to_float(key, value):
    try:
        return float(value)
    except ValueError:
        raise RecordError(f"cannot convert {key}={value!r} to a number") from None


def to_int(key, value):
    try:
        return int(value)
    except ValueError:
        raise RecordError(f"cannot convert {key}={value!r} to an integer") from None


class FontLoader:
    """Create font faces from bitmap font descriptions.

    Parameters
    ----------
    texture_factory : callable | None
        Called as ``texture_factory(width, height, pixels, filter=..., address_mode=...)``
        to create the atlas texture for the renderer in use. The result is
        stored as the face's ``glyph_texture``. Default :func:`~glyphlayout.resources.create_texture`.
    """

    def __init__(self, texture_factory=None):
        self._texture_factory = texture_factory or create_texture

    @property
    def texture_factory(self):
        """The callable that creates atlas textures."""
        return self._texture_factory

    def load(self, path):
        """Load the font description at the given path.

        Returns a :class:`FontFace`, or None if the file cannot be read, is
        empty, or does not provide an atlas texture. Records that are
        incomplete or malformed are skipped with a warning.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as err:
            logger.warning(f"Cannot read font description {path}: {err}")
            return None
        if not text.strip():
            logger.warning(f"Font description {path} is empty.")
            return None

        state = _LoadState(path, FontFace())
        for lineno, line in enumerate(text.splitlines(), 1):
            try:
                tag, record = parse_record(line)
                if tag is None:
                    continue
                handler = getattr(self, f"_load_{tag}", None)
                if handler is None:
                    logger.debug(f"{path.name}:{lineno}: ignoring {tag!r} record.")
                    continue
                handler(state, *get_values(tag, record))
            except RecordError as err:
                logger.warning(f"{path.name}:{lineno}: skipping record, {err}.")

        if state.face.glyph_texture is None:
            logger.warning(f"Font description {path} has no usable page.")
            return None
        return state.face

    def _load_info(self, state, size, padding):
        state.size = abs(to_float("size", size))
        values = [to_float("padding", v) for v in padding.split(",")]
        if len(values) != 4:
            raise RecordError(f"expected 4 padding values, got {len(values)}")
        if any(v < 0 for v in values):
            raise RecordError("padding cannot be negative")
        # Map the file values to (top, right, bottom, left)
        state.padding = values[2], values[1], values[3], values[0]

    def _load_common(self, state, line_height, base, scale_w, scale_h):
        face = state.face
        ascent = to_float("base", base)
        extent = to_float("scaleW", scale_w), to_float("scaleH", scale_h)
        if not ascent > 0:
            raise RecordError(f"base must be positive, got {ascent}")
        if not (extent[0] > 0 and extent[1] > 0):
            raise RecordError(f"atlas size must be positive, got {extent}")
        face.glyph_texture_padding = state.padding
        face.ascent = ascent
        face.descent = ascent - state.size
        face.line_height = to_float("lineHeight", line_height)
        face.glyph_texture_extent = extent
        state.common_seen = True

    def _load_page(self, state, file):
        face = state.face
        if not state.common_seen:
            raise RecordError("'page' record before 'common' record")
        if face.glyph_texture is not None:
            raise RecordError("only a single page is supported")
        width, height = (int(v) for v in face.glyph_texture_extent)
        filename = state.path.parent / file
        pixels = self._read_pixels(filename, width, height)
        logger.info(f"Loaded font atlas {filename} ({width}x{height}).")
        texture = self._texture_factory(
            width, height, pixels, filter="linear", address_mode="clamp-to-edge"
        )
        if texture is None:
            raise RecordError(f"no texture created for {file!r}")
        face.glyph_texture = texture

    def _read_pixels(self, filename, width, height):
        try:
            if filename.suffix.lower() == ".raw":
                pixels = np.fromfile(filename, dtype=np.uint8)
                if pixels.size != width * height:
                    raise RecordError(
                        f"raw atlas {filename.name} has {pixels.size} bytes, expected {width * height}"
                    )
                return pixels.reshape(height, width)
            im = np.asarray(iio.imread(filename))
        except (OSError, ValueError) as err:
            raise RecordError(f"cannot read atlas {filename.name}: {err}") from None
        if im.ndim == 3:
            im = im[:, :, 0]
        if im.shape != (height, width):
            raise RecordError(
                f"atlas {filename.name} has shape {im.shape}, expected {(height, width)}"
            )
        return np.ascontiguousarray(im, dtype=np.uint8)

    def _load_char(self, state, id, x, y, width, height, xoffset, yoffset, xadvance):
        face = state.face
        atlas_w, atlas_h = face.glyph_texture_extent
        x, y = to_float("x", x), to_float("y", y)
        w, h = to_float("width", width), to_float("height", height)

        glyph = Glyph(to_int("id", id))
        # Flip y, the atlas coordinates have their origin at the lower-left
        glyph.sub_texture_origin = x / atlas_w, 1.0 - (y + h) / atlas_h
        glyph.sub_texture_extent = w / atlas_w, h / atlas_h
        glyph.set_bearing_from_offsets(
            face.ascent, to_float("xoffset", xoffset), to_float("yoffset", yoffset)
        )
        glyph.extent = w, h
        glyph.advance = to_float("xadvance", xadvance)
        face.insert_glyph(glyph)

    def _load_kerning(self, state, first, second, amount):
        try:
            state.face.set_kerning(
                to_int("first", first),
                to_int("second", second),
                to_float("amount", amount),
            )
        except ValueError as err:
            raise RecordError(str(err)) from None


class _LoadState:
    def __init__(self, path, face):
        self.path = path
        self.face = face
        self.size = 0.0
        self.padding = 0.0, 0.0, 0.0, 0.0
        self.common_seen = False


def load_font(path, texture_factory=None):
    """Load a font face from a bitmap font description.

    Returns None if the font cannot be loaded. See :class:`FontLoader`.
    """
    return FontLoader(texture_factory).load(path)
