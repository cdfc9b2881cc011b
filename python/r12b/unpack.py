"""R12B block unpacking.

Two interchangeable frame paths are provided, both driven by
:data:`~r12b.layout.EXTRACTION_TABLE`:

- :func:`unpack_python` walks every block and sample in pure Python (reference only,
  far too slow for real-time use);
- :func:`unpack_numpy` decodes one (channel, pixel) column across the whole frame
  per table entry.

Both expect already validated arguments; see :func:`r12b.decode.decode_frame` for
the checked entry point. Destination planes are flat, writable sequences of samples
with a row `stride` given in samples.
"""

import numpy

from .layout import (
    BYTES_PER_BLOCK,
    EXTRACTION_TABLE,
    PIXELS_PER_BLOCK,
    block_row_bytes,
)


def unpack_block(src, g, b, r, src_offset=0, dst_offsets=(0, 0, 0)):
    """Decode a single 36-byte block into 8 samples per channel.

    Parameters
    ----------
    src : bytes-like
        Packed data. Only ``src[src_offset:src_offset + 36]`` is read.
    g, b, r : mutable sequence
        Destination samples; 8 consecutive slots are written to each, in pixel order.
    src_offset : int, optional
        Byte offset of the block in `src`.
    dst_offsets : tuple of int, optional
        Offset of the first slot in each of `g`, `b` and `r`.
    """
    for dst, dst_offset, samples in zip((g, b, r), dst_offsets, EXTRACTION_TABLE):
        for pixel, sample in enumerate(samples):
            dst[dst_offset + pixel] = sample.extract(src, src_offset)


def unpack_block_values(block):
    """Decode a single block, returning ``(g, b, r)`` tuples of 8 samples each."""
    block = memoryview(block).cast("B")
    if len(block) != BYTES_PER_BLOCK:
        raise ValueError(f"Expected {BYTES_PER_BLOCK} bytes, got {len(block)}")
    g, b, r = ([0] * PIXELS_PER_BLOCK for _ in range(3))
    unpack_block(block, g, b, r)
    return tuple(g), tuple(b), tuple(r)


def unpack_python(src, g, b, r, width, height, strides):
    """Decode a frame block by block in pure Python."""
    src = memoryview(src).cast("B")
    row_bytes = block_row_bytes(width)
    blocks_per_line = width // PIXELS_PER_BLOCK
    g_stride, b_stride, r_stride = strides

    for row in range(height):
        for block in range(blocks_per_line):
            col = block * PIXELS_PER_BLOCK
            unpack_block(
                src,
                g,
                b,
                r,
                src_offset=row * row_bytes + block * BYTES_PER_BLOCK,
                dst_offsets=(
                    row * g_stride + col,
                    row * b_stride + col,
                    row * r_stride + col,
                ),
            )


def unpack_numpy(src, g, b, r, width, height, strides):
    """Decode a frame with numpy, one table entry at a time."""
    blocks_per_line = width // PIXELS_PER_BLOCK
    nbytes = height * block_row_bytes(width)
    blocks = (
        numpy.frombuffer(src, dtype=numpy.uint8, count=nbytes)
        .reshape((height, blocks_per_line, BYTES_PER_BLOCK))
        .astype(numpy.uint16)
    )

    for plane, stride, samples in zip((g, b, r), strides, EXTRACTION_TABLE):
        rows = plane[: height * stride].reshape((height, stride))
        for pixel, sample in enumerate(samples):
            # pixel `pixel` of every block lands in every 8th column
            rows[:, pixel:width:PIXELS_PER_BLOCK] = sample.select(blocks)


BACKENDS = {
    "numpy": unpack_numpy,
    "python": unpack_python,
}
