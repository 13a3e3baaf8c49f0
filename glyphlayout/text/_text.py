"""The Text class: a sequence of code points that labels can share."""


class Text:
    """A text buffer: a sequence of code points plus the line feed code point.

    A Text can be shared between multiple labels, e.g. to show the same
    (possibly large) string with different styles without copying it.

    Parameters
    ----------
    text : str | iterable of int
        The text, as a str or as a sequence of code points.
    line_feed : str | int
        The code point that starts a new line. Default "\\n".
    """

    def __init__(self, text="", line_feed="\n"):
        self.text = text
        self.line_feed = line_feed

    def __repr__(self):
        return f"<Text {len(self._code_points)} code points at {hex(id(self))}>"

    def __len__(self):
        return len(self._code_points)

    def __iter__(self):
        return iter(self._code_points)

    def __str__(self):
        return "".join(map(chr, self._code_points))

    @property
    def text(self):
        """The text as a tuple of code points. Can be set with a str or code points."""
        return self._code_points

    @text.setter
    def text(self, text):
        if text is None:
            text = ""
        if isinstance(text, str):
            self._code_points = tuple(map(ord, text))
        else:
            try:
                self._code_points = tuple(int(c) for c in text)
            except TypeError:
                raise TypeError(
                    f"Text must be a str or a sequence of code points, not {text.__class__.__name__}."
                ) from None

    @property
    def line_feed(self):
        """The code point that starts a new line."""
        return self._line_feed

    @line_feed.setter
    def line_feed(self, line_feed):
        if isinstance(line_feed, str):
            if len(line_feed) != 1:
                raise ValueError(f"Line feed must be a single character, got {line_feed!r}.")
            line_feed = ord(line_feed)
        self._line_feed = int(line_feed)
