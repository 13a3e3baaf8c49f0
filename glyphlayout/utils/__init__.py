"""
Utility functions for glyphlayout.

.. currentmodule:: glyphlayout.utils

.. autosummary::
    :toctree: utils/
    :template: ../_templates/custom_layout.rst

    Color
    enums

"""

import os
import types
import logging
import inspect

from .color import Color  # noqa: F401
from . import enums  # noqa: F401


logger = logging.getLogger("glyphlayout")


def _set_log_level():
    # Set default level
    logger.setLevel(logging.WARN)
    # Set user-specified level
    level = os.getenv("GLYPHLAYOUT_LOG_LEVEL", "")
    if level:
        try:
            if level.isnumeric():
                logger.setLevel(int(level))
            else:
                logger.setLevel(level.upper())
        except Exception:
            logger.warning(f"Invalid glyphlayout log level: {level}")


_set_log_level()


def assert_type(name, value, *classes):
    allow_none = False
    if classes[0] is None:
        if value is None:
            return
        allow_none = True
        classes = classes[1:]

    if not isinstance(value, classes):
        # Get traceback object to point of the frame of interest
        f = inspect.currentframe()
        f = f.f_back
        if name:
            # Step back to calling code
            f = f.f_back
            # If this is a constructor that has name as a (kw) argument, take another step back
            if f.f_code.co_name == "__init__" and name in f.f_code.co_varnames:
                f = f.f_back
        tb = types.TracebackType(None, f, f.f_lasti, f.f_lineno)

        # Build error message
        msg = "Expected"
        if name:
            msg += f" '{name}' to be"
        class_strings = [cls.__name__ for cls in classes]
        msg += f" an instance of {' | '.join(class_strings)}"
        if allow_none:
            msg += " or None"
        valuestr = value.__class__.__name__
        msg += f", but got {valuestr} object."

        # Raise message with alt traceback
        raise TypeError(msg).with_traceback(tb) from None


def as_vec(name, value, n):
    """Convert the given value to a tuple of n floats, or raise ValueError."""
    try:
        vec = tuple(float(v) for v in value)
    except TypeError:
        raise TypeError(f"Expected '{name}' to be a sequence of {n} numbers.") from None
    if len(vec) != n:
        raise ValueError(f"Expected '{name}' to have {n} elements, got {len(vec)}.")
    return vec
