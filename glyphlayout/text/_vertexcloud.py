"""The GlyphVertexCloud: the output of the typesetter."""

import weakref

import numpy as np

from ..resources import Buffer


# A glyph vertex describes one glyph quad. The quad spans from origin along
# vtan and vbitan; uv_rect is (u0, v0, u1, v1) in the atlas.
VERTEX_DTYPE = np.dtype(
    [
        ("origin", "<f4", (3,)),
        ("vtan", "<f4", (3,)),
        ("vbitan", "<f4", (3,)),
        ("uv_rect", "<f4", (4,)),
        ("color", "<f4", (4,)),
    ]
)


def optimize_vertices(vertices, buckets):
    """Get the vertices reordered so that vertices of the same glyph are contiguous.

    The ``buckets`` map glyph indices to lists of vertex indices. The
    buckets are concatenated in ascending glyph index order. Vertices that
    are in no bucket follow at the end, in their original order.
    """
    n = len(vertices)
    order = [i for key in sorted(buckets) for i in buckets[key]]
    if len(order) < n:
        seen = np.zeros(n, bool)
        seen[order] = True
        order.extend(np.flatnonzero(~seen).tolist())
    return vertices[np.asarray(order, np.intp)]


class GlyphVertexCloud:
    """A growable sequence of glyph vertices plus the atlas texture to draw them with.

    The cloud is filled by the :class:`Typesetter`, and can be reused: each
    ``typeset()`` call clears and rebuilds it. Vertices are stored in a
    numpy structured array (see ``VERTEX_DTYPE``) that is addressed by
    integer offsets only. After each change the cloud writes its vertices
    into ``buffer``, which a renderer can upload.

    Parameters
    ----------
    capacity : int
        The initial number of vertices that fit without growing.
    """

    def __init__(self, capacity=64):
        self._arena = np.zeros((max(int(capacity), 1),), VERTEX_DTYPE)
        self._size = 0
        self._texture_ref = None
        self._buffer = None
        self.ranges = None

    def __repr__(self):
        return f"<GlyphVertexCloud {self._size} vertices at {hex(id(self))}>"

    def __len__(self):
        return self._size

    @property
    def capacity(self):
        """The number of vertices that fit without growing."""
        return self._arena.shape[0]

    @property
    def vertices(self):
        """A read-only view on the vertices."""
        view = self._arena[: self._size]
        view.flags.writeable = False
        return view

    @property
    def texture(self):
        """The atlas texture to draw the vertices with, or None.

        The texture is owned by the font face. The cloud keeps a weak
        reference to it, unless the handle does not support that (e.g. an
        int texture name), in which case the handle itself is kept.
        """
        if self._texture_ref is None:
            return None
        return self._texture_ref()

    @texture.setter
    def texture(self, texture):
        if texture is None:
            self._texture_ref = None
            return
        try:
            self._texture_ref = weakref.ref(texture)
        except TypeError:
            self._texture_ref = lambda: texture

    @property
    def buffer(self):
        """The :class:`Buffer` with the vertices for the renderer, or None before the first update."""
        return self._buffer

    def clear(self):
        """Remove all vertices."""
        self._size = 0
        self.ranges = None

    def allocate(self, n):
        """Append n zeroed vertices and return their index range."""
        n = int(n)
        if n < 0:
            raise ValueError("Cannot allocate a negative number of vertices.")
        start = self._size
        end = start + n
        if end > self._arena.shape[0]:
            capacity = 2 ** int(np.ceil(np.log2(end)))
            arena = np.zeros((capacity,), VERTEX_DTYPE)
            arena[:start] = self._arena[:start]
            self._arena = arena
        else:
            self._arena[start:end] = 0
        self._size = end
        return range(start, end)

    def truncate(self, n):
        """Drop all vertices from index n onwards."""
        n = int(n)
        if not 0 <= n <= self._size:
            raise ValueError(f"Cannot truncate {self._size} vertices to {n}.")
        self._size = n

    def write(self, index_range, **fields):
        """Write vertex fields for an allocated range, e.g. ``write(r, origin=a, color=c)``."""
        start, stop = index_range.start, index_range.stop
        if not 0 <= start <= stop <= self._size:
            raise IndexError(f"Vertex range {index_range} out of bounds.")
        target = self._arena[start:stop]
        for name, values in fields.items():
            target[name] = values

    def optimize(self, buckets):
        """Reorder the vertices so that vertices of the same glyph are contiguous.

        See :func:`optimize_vertices`. Invalidates ``ranges``.
        """
        self._arena[: self._size] = optimize_vertices(self._arena[: self._size], buckets)
        self.ranges = None

    def update(self):
        """Write the vertices into ``buffer`` and mark them for upload."""
        if self._buffer is None or self._buffer.data is not self._arena:
            self._buffer = Buffer(self._arena)
        else:
            self._buffer.update_range(0, self._size)
        self._buffer.draw_range = 0, self._size
