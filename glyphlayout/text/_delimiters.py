"""The code points after which a line may be wrapped."""

DELIMITER_CHARS = "\n\t\r ,.;:!?-/()[]<>…"

DELIMITERS = frozenset(map(ord, DELIMITER_CHARS))


def is_delimiter(code_point):
    """Get whether a line may be wrapped after the given code point."""
    return code_point in DELIMITERS
