"""The Color class, used for the text color of labels."""

import ctypes
import colorsys

F4 = ctypes.c_float * 4


class Color:
    """An sRGB color with alpha, stored as 4 32-bit floats.

    Accepted forms:

        * `Color(r, g, b, a)`, `Color(r, g, b)`, `Color(gray, a)`, `Color(gray)`,
          with values between 0 and 1 (alpha defaults to 1).
        * `Color((r, g, b, a))`: any of the above as a single sequence.
        * `Color("red")`: a name from ``NAMED_COLORS`` (including Matlab chars like `"m"`).
        * `Color("#f00")`, `Color("#f00f")`, `Color("#ff0000")`, `Color("#ff0000ff")`.
        * `Color("rgb(255, 0, 0)")`, `Color("rgba(100%, 0%, 0%, 0.5)")`.

    The alpha is clipped between 0 and 1; the color channels are not. A
    Color can be passed to ``numpy.asarray()`` without copying, e.g. to
    stamp it on glyph vertices.
    """

    __slots__ = ["_val"]

    def __init__(self, *args):
        if len(args) == 1 and isinstance(args[0], str):
            rgba = parse_color_str(args[0])
        elif len(args) == 1 and isinstance(args[0], Color):
            rgba = args[0].rgba
        elif len(args) == 1 and not isinstance(args[0], (int, float)):
            # A sequence, raises TypeError if it is not iterable
            rgba = expand_to_rgba(args[0])
        else:
            rgba = expand_to_rgba(args)
        r, g, b, a = rgba
        self._val = F4(r, g, b, min(max(a, 0.0), 1.0))

    def __repr__(self):
        def fmt(v):
            return f"{v:0.4f}".rstrip("0").ljust(3, "0")

        return f"Color({', '.join(fmt(v) for v in self.rgba)})"

    @property
    def __array_interface__(self):
        # A read-only view on our ctypes memory
        ptr = ctypes.addressof(self._val)
        return dict(version=3, shape=(4,), typestr="<f4", data=(ptr, True))

    def __len__(self):
        return 4

    def __getitem__(self, index):
        return self._val[index]

    def __iter__(self):
        return iter(self.rgba)

    def __eq__(self, other):
        if not isinstance(other, Color):
            other = Color(other)
        return self.rgba == other.rgba

    def __hash__(self):
        return hash(self.rgba)

    @property
    def rgba(self):
        """The (r, g, b, a) tuple."""
        return tuple(self._val)

    @property
    def rgb(self):
        """The (r, g, b) tuple."""
        return tuple(self._val[:3])

    @property
    def r(self):
        return self._val[0]

    @property
    def g(self):
        return self._val[1]

    @property
    def b(self):
        return self._val[2]

    @property
    def a(self):
        """The alpha (opacity), between 0 and 1."""
        return self._val[3]

    @property
    def hex(self):
        """The color as "#rrggbb", ignoring alpha. Channels are clipped first."""
        return "#" + "".join(f"{int(v * 255 + 0.5):02x}" for v in self.clip().rgb)

    def clip(self):
        """Get a new Color with all channels clipped between 0 and 1."""
        return Color(*(min(max(v, 0.0), 1.0) for v in self.rgba))

    @classmethod
    def from_hsv(cls, hue, saturation, value, alpha=1):
        """Create a Color from hue, saturation and value (all between 0 and 1)."""
        return Color(*colorsys.hsv_to_rgb(hue, saturation, value), alpha)


def expand_to_rgba(values):
    """Expand 1-4 numbers (gray, gray+alpha, rgb, rgba) to an rgba tuple."""
    values = tuple(float(v) for v in values)
    n = len(values)
    if n == 1:
        return values * 3 + (1.0,)
    elif n == 2:
        return values[:1] * 3 + values[1:]
    elif n == 3:
        return values + (1.0,)
    elif n == 4:
        return values
    raise ValueError(f"A color needs 1-4 values, got {n}.")


def parse_color_str(text):
    """Parse a color name, hex string or CSS rgb()/rgba() into an rgba tuple."""
    text = text.lower().strip()
    if text in NAMED_COLORS:
        text = NAMED_COLORS[text]

    if text.startswith("#"):
        digits = text[1:]
        if len(digits) in (3, 4):
            values = [int(d, 16) / 15 for d in digits]
        elif len(digits) in (6, 8):
            values = [int(digits[i : i + 2], 16) / 255 for i in range(0, len(digits), 2)]
        else:
            raise ValueError(f"A hex color needs 3, 4, 6 or 8 digits, got {text!r}.")
        return expand_to_rgba(values)

    func, sep, args = text.partition("(")
    if sep and func in ("rgb", "rgba") and args.endswith(")"):
        parts = [p.strip() for p in args[:-1].split(",")]
        if len(parts) not in (3, 4):
            raise ValueError(f"{func}() needs 3 or 4 values, got {len(parts)}.")
        values = []
        for i, part in enumerate(parts):
            if part.endswith("%"):
                values.append(float(part[:-1]) / 100)
            elif i < 3:
                values.append(float(part) / 255)
            else:
                values.append(float(part))
        return expand_to_rgba(values)

    raise ValueError(f"Unknown color: {text!r}")


NAMED_COLORS = {
    "black": "#000000",
    "white": "#ffffff",
    "gray": "#808080",
    "grey": "#808080",
    "silver": "#c0c0c0",
    "red": "#ff0000",
    "maroon": "#800000",
    "orange": "#ffa500",
    "yellow": "#ffff00",
    "olive": "#808000",
    "lime": "#00ff00",
    "green": "#008000",
    "teal": "#008080",
    "cyan": "#00ffff",
    "aqua": "#00ffff",
    "blue": "#0000ff",
    "navy": "#000080",
    "magenta": "#ff00ff",
    "fuchsia": "#ff00ff",
    "purple": "#800080",
    "transparent": "#00000000",
    # Matlab style single chars
    "k": "#000000",
    "w": "#ffffff",
    "r": "#ff0000",
    "g": "#00ff00",
    "b": "#0000ff",
    "c": "#00ffff",
    "m": "#ff00ff",
    "y": "#ffff00",
}
