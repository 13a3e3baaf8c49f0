import numpy as np

from ._base import Resource
from ._utils import (
    get_element_format_from_numpy_array,
    combine_format,
    as_array_view,
    check_data_is_clean_for_performance,
    is_little_endian,
    make_little_endian,
)
from ..utils.enums import TextureFilter, TextureAddressMode, to_enum


class Texture(Resource):
    """A 2D texture, e.g. the glyph atlas of a font face.

    Glyphlayout does not talk to a graphics API. The texture holds the
    pixel data together with the sampling parameters that the renderer
    should use when it creates the GPU texture.

    Parameters
    ----------
    data : array
        The pixel data with shape (height, width) or (height, width,
        channels). It must support the buffer-protocol. No copies are made.
    size : tuple | None
        The extent ``(width, height)``. If None, it is derived from the shape
        of the data.
    format : None | str
        A format string describing the pixel format, e.g. "u1" for a single
        channel uint8 texture. If None, it is determined from the data.
    filter : str
        The sampling filter, see :obj:`TextureFilter`. Default "linear".
    address_mode : str
        The wrap mode, see :obj:`TextureAddressMode`. Default "clamp-to-edge".
    force_contiguous : bool
        When set to true, the set data must be c_contiguous and little endian.
    """

    def __init__(
        self,
        data,
        *,
        size=None,
        format=None,
        filter="linear",
        address_mode="clamp-to-edge",
        force_contiguous=False,
    ):
        super().__init__()
        self._bump_rev()

        self._force_contiguous = bool(force_contiguous)
        self._filter = to_enum("filter", TextureFilter, filter)
        self._address_mode = to_enum("address_mode", TextureAddressMode, address_mode)

        self._data = data
        self._view = view = as_array_view(data)
        if self._force_contiguous:
            check_data_is_clean_for_performance("texture", view)

        if size is not None:
            the_size = int(size[0]), int(size[1])
        else:
            the_size = size_from_array(view)
        if not all(s > 0 for s in the_size):
            raise ValueError("Texture size cannot be zero.")
        view = self._view = reshape_array(view, the_size)

        element_format = get_element_format_from_numpy_array(view)
        if element_format is None:
            raise ValueError(f"Unsupported dtype/format for texture data: {view.dtype}")
        nchannels = view.shape[2]
        if not (1 <= nchannels <= 4):
            raise ValueError(f"Expected 1-4 texture color channels, got {nchannels}.")

        self._size = the_size
        self._nbytes = view.nbytes
        self._format = (
            str(format)
            if format is not None
            else combine_format(nchannels, element_format)
        )
        self._dirty = True
        self._mark_for_sync()

    def __repr__(self):
        w, h = self._size
        return f"<Texture {w}x{h} {self._format} at {hex(id(self))}>"

    @property
    def data(self):
        """The data for this texture, as given at construction or ``set_data()``."""
        return self._data

    @property
    def view(self):
        """A numpy array view on the data, with shape (height, width, channels)."""
        return self._view

    @property
    def size(self):
        """The size of the texture as (width, height)."""
        return self._size

    @property
    def nbytes(self):
        """The number of bytes in the texture."""
        return self._nbytes

    @property
    def format(self):
        """The texture format, e.g. 'u1' or '4xu1'."""
        return self._format

    @property
    def filter(self):
        """The sampling filter that the renderer should use, a wgpu filter mode."""
        return self._filter

    @property
    def address_mode(self):
        """The wrap mode that the renderer should use, a wgpu address mode."""
        return self._address_mode

    @property
    def dirty(self):
        """Whether the data has pending changes that are not uploaded yet."""
        return self._dirty

    def set_data(self, data):
        """Reset the data to a new array of the same shape and dtype."""
        view = as_array_view(data)
        if self._force_contiguous:
            check_data_is_clean_for_performance("texture", view)
        if view.nbytes != self._nbytes:
            raise ValueError("texture.set_data() nbytes does not match.")
        if view.dtype != self._view.dtype:
            raise ValueError("texture.set_data() format does not match.")
        self._data = data
        self._view = reshape_array(view, self._size)
        self.update_full()

    def update_full(self):
        """Mark the whole data for upload."""
        self._dirty = True
        self._bump_rev()
        self._mark_for_sync()

    def pending_data(self):
        """Return the pixel data as a contiguous little endian array, or None.

        Returns None if there are no pending changes. Clears the dirty state.
        """
        if not self._dirty:
            return None
        self._dirty = False
        data = self._view
        if not is_little_endian(data):
            data = make_little_endian(data)
        return np.ascontiguousarray(data)


def size_from_array(data):
    shape = data.shape
    if len(shape) not in (2, 3):
        raise ValueError(f"Can't map shape {shape} on 2D texture. Maybe also specify size?")
    return shape[1], shape[0]


def reshape_array(view, size):
    """Get a view with shape (height, width, channels)."""
    width, height = size
    # This can fail if the data is not contiguous and strides don't work out.
    return view.reshape(height, width, -1)


def create_texture(width, height, pixels, *, filter="linear", address_mode="clamp-to-edge"):
    """The default texture factory used by the font loader.

    Creates a :class:`Texture` of the given size from the given pixel data.
    A replacement factory must accept the same arguments, and can return
    any object that represents a texture for the renderer in use.
    """
    return Texture(pixels, size=(width, height), filter=filter, address_mode=address_mode)
