from math import floor, ceil
import numpy as np

from ._base import Resource
from ._utils import (
    get_element_format_from_numpy_array,
    combine_format,
    as_array_view,
    calculate_buffer_chunk_size,
    get_merged_blocks_from_mask_1d,
    check_data_is_clean_for_performance,
    is_little_endian,
    make_little_endian,
    logger,
)


class Buffer(Resource):
    """A contiguous piece of data to be uploaded to the GPU by a renderer.

    Glyphlayout uses buffers to hand glyph vertices to the rendering
    collaborator: the :class:`~glyphlayout.GlyphVertexCloud` writes into
    its buffer and marks the changed items. The renderer polls
    ``chunk_descriptions()`` to find out which parts to upload.

    Parameters
    ----------
    data : array
        The data of the buffer. It must support the buffer-protocol (e.g. a
        bytes or numpy array). The data will be accessible at ``buffer.data``,
        no copies are made.
    nitems : int | None
        The number of elements in the buffer. If given, the data is
        interpreted as having that many items (reshaped internally).
    format : None | str
        A format string describing the item layout, e.g. "3xf4". Optional: if
        None, it is automatically determined from the data. Structured arrays
        (like glyph vertices) have format None.
    chunk_size : None | int
        The chunk size used for tracking changes, expressed in items. When
        None (default) a suitable chunk size is determined automatically.
    force_contiguous : bool
        When set to true, the set data must be c_contiguous and little endian.
    """

    def __init__(
        self,
        data,
        *,
        nitems=None,
        format=None,
        chunk_size=None,
        force_contiguous=False,
    ):
        super().__init__()
        self._bump_rev()

        self._force_contiguous = bool(force_contiguous)

        self._data = data
        self._view = view = as_array_view(data)
        if self._force_contiguous:
            check_data_is_clean_for_performance("buffer", view)

        # Establish number of items
        if nitems is not None:
            the_nitems = int(nitems)
        elif view.shape:
            the_nitems = view.shape[0]
        else:
            the_nitems = 1
        if the_nitems == 0:
            raise ValueError("Buffer size cannot be zero.")
        view = self._view = reshape_array(view, the_nitems)

        # Establish format
        detected_format = None
        element_format = get_element_format_from_numpy_array(view)
        if element_format:
            elements_per_item = int(np.prod(view.shape[1:], initial=1))
            detected_format = combine_format(elements_per_item, element_format)

        self._nbytes = view.nbytes
        self._nitems = the_nitems
        self._format = str(format) if format is not None else detected_format
        self._draw_range = 0, the_nitems

        if chunk_size is None:
            chunk_size = calculate_buffer_chunk_size(
                the_nitems, bytes_per_item=self._nbytes // the_nitems
            )
        else:
            chunk_size = min(max(int(chunk_size), 1), the_nitems)

        # All chunks are dirty initially
        self._chunks_dirt_flag = 2
        self._chunk_size = chunk_size
        self._chunk_mask = np.ones((ceil(the_nitems / chunk_size),), bool)
        self._mark_for_sync()

    def __repr__(self):
        return f"<Buffer {self._nitems} items, format {self._format} at {hex(id(self))}>"

    @property
    def data(self):
        """The data for this buffer, as given at construction or ``set_data()``."""
        return self._data

    @property
    def view(self):
        """A numpy array view on the data. The first dimension matches ``nitems``."""
        return self._view

    @property
    def nbytes(self):
        """The number of bytes in the buffer."""
        return self._nbytes

    @property
    def nitems(self):
        """The number of items in the buffer."""
        return self._nitems

    @property
    def itemsize(self):
        """The number of bytes for a single item."""
        return self._nbytes // self._nitems

    @property
    def format(self):
        """The buffer format, e.g. '3xf4', or None for structured data."""
        return self._format

    @property
    def chunk_size(self):
        """The number of items per tracked chunk."""
        return self._chunk_size

    @property
    def draw_range(self):
        """The range of items (origin, size) that the renderer should draw."""
        return self._draw_range

    @draw_range.setter
    def draw_range(self, draw_range):
        origin, size = draw_range
        origin, size = int(origin), int(size)
        if not (origin == 0 or 0 < origin < self._nitems):
            raise ValueError("draw_range origin out of bounds.")
        if not (size >= 0 and origin + size <= self._nitems):
            raise ValueError("draw_range size out of bounds.")
        self._draw_range = origin, size
        self._bump_rev()

    def set_data(self, data):
        """Reset the data to a new array of the same size and dtype."""
        view = as_array_view(data)
        if self._force_contiguous:
            check_data_is_clean_for_performance("buffer", view)
        if view.nbytes != self._view.nbytes:
            raise ValueError("buffer.set_data() nbytes does not match.")
        if view.dtype != self._view.dtype:
            raise ValueError("buffer.set_data() format does not match.")
        view = reshape_array(view, self._nitems)
        self._data = data
        self._view = view
        self.update_full()

    def update_full(self):
        """Mark the whole data for upload."""
        self._chunk_mask.fill(True)
        self._chunks_dirt_flag = 2
        self._bump_rev()
        self._mark_for_sync()

    def update_indices(self, indices):
        """Mark specific item indices for upload."""
        indices = np.asarray(indices)
        self._chunk_mask[indices // self._chunk_size] = True
        self._chunks_dirt_flag = max(self._chunks_dirt_flag, 1)
        self._bump_rev()
        self._mark_for_sync()

    def update_range(self, offset=0, size=None):
        """Mark a certain range of the data for upload.

        The offset and size are expressed in integer number of items.
        """
        nitems = self._nitems
        offset = int(offset or 0)
        size = int(nitems if size is None else size)
        if size == 0:
            return
        elif size < 0:
            raise ValueError("Update size must not be negative")
        elif offset < 0:
            raise ValueError("Update offset must not be negative")
        index1 = offset
        index2 = min(nitems, offset + size)
        if index1 == 0 and index2 == nitems:
            return self.update_full()
        div = self._chunk_size
        self._chunk_mask[floor(index1 / div) : ceil(index2 / div)] = True
        self._chunks_dirt_flag = max(self._chunks_dirt_flag, 1)
        self._bump_rev()
        self._mark_for_sync()

    def chunk_descriptions(self):
        """Get a list of (offset, size) tuples of items that need uploading.

        The renderer calls this, followed by ``chunk_data()`` for each tuple.
        This method also clears the dirty state.
        """
        if not self._chunks_dirt_flag:
            return []
        elif self._chunks_dirt_flag == 2 or np.all(self._chunk_mask):
            chunk_descriptions = [(0, self._nitems)]
        else:
            chunk_descriptions = []
            chunk_size = self._chunk_size
            for x, nx in get_merged_blocks_from_mask_1d(self._chunk_mask):
                offset = x * chunk_size
                size = min(nx * chunk_size, self._nitems - offset)
                chunk_descriptions.append((offset, size))

        self._chunks_dirt_flag = 0
        self._chunk_mask.fill(False)
        return chunk_descriptions

    def chunk_data(self, offset, size):
        """Return subdata as a contiguous little endian array."""
        if offset == 0 and size == self._nitems:
            chunk = self._view
        else:
            chunk = self._view[offset : offset + size]

        if not is_little_endian(chunk):
            chunk = make_little_endian(chunk)
            if self._force_contiguous:
                logger.warning(
                    "force_contiguous was set, but chunk data is still big endian"
                )
        elif not chunk.flags.c_contiguous:
            if self._force_contiguous:
                logger.warning(
                    "force_contiguous was set, but chunk data is still discontiguous"
                )
            chunk = np.ascontiguousarray(chunk)

        return chunk


def reshape_array(view, n):
    """Get a view with shape[0] equal to n."""
    if view.shape and view.shape[0] == n:
        return view
    # This can fail if the data is not contiguous and strides don't work out.
    return view.reshape(n, -1)
