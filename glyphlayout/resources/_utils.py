"""Utils for the Buffer and Texture classes."""

import sys
import logging
from math import ceil, log2

import numpy as np

logger = logging.getLogger("glyphlayout")


SYS_ENDIANNESS = "<" if sys.byteorder == "little" else ">"


def get_element_format_from_numpy_array(array):
    """Get the per-element format specifier from a numpy array.
    Returns None if the format appears to be a structured array (e.g. vertex records).
    Raises an error if GPU-incompatible dtypes are used (64 bit).
    """
    if array.dtype.kind not in "iuf":
        return None
    if array.itemsize == 8:
        raise ValueError(
            f"A dtype of {array.dtype.name} is not supported for resources, use a 32-bit variant instead."
        )
    return array.dtype.str.lstrip("<>=|")


def is_little_endian(arr):
    """Get whether the given array is little endian."""
    byteorder = arr.dtype.byteorder
    if byteorder == "=":
        byteorder = SYS_ENDIANNESS
    elif byteorder == "|":  # single-byte dtype, or structured dtype
        byteorder = "<"
    return byteorder == "<"


def make_little_endian(arr):
    """Get a copy of the array that has the same dtype but little endian."""
    return arr.astype(arr.dtype.newbyteorder("<"))


def check_data_is_clean_for_performance(kind, arr):
    """Check that data is c_contiguous and little endian. Raise an error if not."""
    missing_props = []
    if not is_little_endian(arr):
        missing_props.append("little endian")
    if not arr.flags.c_contiguous:
        missing_props.append("c_contiguous")
    if missing_props:
        raise ValueError(
            f"Given {kind} data is not {', '.join(missing_props)} (enforced because force_contiguous is set)."
        )


def calculate_buffer_chunk_size(
    nitems,
    *,
    bytes_per_item=1,
    byte_align=16,
    target_chunk_count=32,
    min_chunk_bytes=2**8,
):
    """Calculate the number of items per upload chunk.

    Aims for ``target_chunk_count`` chunks, with chunks of at least
    ``min_chunk_bytes``, and a chunk byte size that is a multiple of ``byte_align``.
    """
    nitems = int(nitems)
    bytes_per_item = max(1, int(bytes_per_item))

    factor_max = log2(byte_align)
    if not factor_max.is_integer():
        raise ValueError("align must be factor of two")
    item_align = 1
    for factor in range(int(factor_max) + 1):
        item_align = 2**factor
        if not (item_align * bytes_per_item) % byte_align:
            break

    min_chunk_size = max(1, int(min_chunk_bytes / bytes_per_item))
    approx_chunk_size = max(nitems / target_chunk_count, min_chunk_size)
    chunk_size = ceil(approx_chunk_size / item_align) * item_align
    return min(max(1, nitems), max(1, chunk_size))


def get_merged_blocks_from_mask_1d(chunk_mask):
    """Get a list of (offset, size) tuples from an 1D mask, with neighbouring chunks merged."""
    blocks = []
    size = chunk_mask.size
    i = 0
    while i < size:
        if chunk_mask[i]:
            x = i
            nx = 1
            i += 1
            while i < size and chunk_mask[i]:
                nx += 1
                i += 1
            blocks.append((x, nx))
        else:
            i += 1
    return blocks


def combine_format(count, element_format):
    """Get a format like '3xf4' for items of count elements, or e.g. 'f4' for single elements."""
    if count == 1:
        return element_format
    return f"{count}x{element_format}"


def as_array_view(data):
    """Get a numpy view of data that follows the buffer protocol."""
    if isinstance(data, np.ndarray):
        # Structured arrays do not always survive a memoryview roundtrip
        return data
    return np.asarray(memoryview(data))
