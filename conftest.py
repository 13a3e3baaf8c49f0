"""Global configuration for pytest"""

import numpy as np
import pytest

from glyphlayout import FontFace, Glyph


@pytest.fixture(autouse=True)
def predictable_random_numbers():
    """
    Called at start of each test, guarantees that calls to random produce the same output over subsequent tests runs,
    see http://docs.scipy.org/doc/numpy-1.10.1/reference/generated/numpy.random.seed.html
    """
    np.random.seed(0)


@pytest.fixture(autouse=True, scope="session")
def numerical_exceptions():
    """
    Ensure any numerical errors raise a warning in our test suite
    The point is that we enforce such cases to be handled explicitly in our code
    Preferably using local `with np.errstate(...)` constructs
    """
    np.seterr(all="raise")


def make_monospace_face(advance=10.0, chars="abcdefghijklmnopqrstuvwxyz,.-"):
    """Create a face in which each char (and the space) advances the pen by the same amount."""
    face = FontFace()
    face.ascent = 8
    face.descent = -2
    face.linegap = 2
    face.glyph_texture_extent = 100, 100
    for i, c in enumerate(chars):
        glyph = Glyph(ord(c))
        glyph.sub_texture_origin = (i % 10) / 10, (i // 10) / 10
        glyph.sub_texture_extent = 0.08, 0.1
        glyph.bearing = 1, 8
        glyph.extent = 8, 10
        glyph.advance = advance
        face.insert_glyph(glyph)
    space = Glyph(ord(" "))
    space.advance = advance
    face.insert_glyph(space)
    return face


@pytest.fixture
def monospace_face():
    return make_monospace_face()


@pytest.fixture
def face_factory():
    return make_monospace_face
