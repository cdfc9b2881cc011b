"""Decoding of R12B packed 12-bit RGB video

R12B packs 8 pixels of 12-bit RGB into 36 bytes with no padding. This package
unpacks it into three planar little-endian 16-bit channel buffers (12 significant
bits) in G, B, R plane order, the ``gbrp12le`` pixel format.

Decoding a packet into caller-owned planes with :func:`~r12b.decode.decode_frame`::

    import numpy
    from r12b import decode_frame

    g, b, r = (numpy.zeros((height, width), dtype="<u2") for _ in range(3))
    got_frame, consumed, _ = decode_frame(packet, width, height, g, b, r)

Or with a :class:`~r12b.decode.Decoder` that allocates a
:class:`~r12b.frame.Frame` per packet::

    from r12b import Decoder

    frame = Decoder(width, height).decode(packet).frame

Raw streams of back-to-back frames are read with
:class:`~r12b.reader.R12bReader`::

    from r12b import R12bReader

    with R12bReader("capture.r12b", width=1920, height=1080) as reader:
        img = reader.read_frame(0)  # shape (3, 1080, 1920)
"""

from .decode import (
    DecodeResult,
    Decoder,
    check_dimensions,
    decode_frame,
    validate_geometry,
)
from .errors import AllocationFailure, DecodeError, InsufficientData, InvalidGeometry
from .frame import Frame
from .layout import PIXEL_FORMAT
from .reader import R12bReader
