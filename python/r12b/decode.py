"""R12B frame decoding

Typical usage, decoding into caller-owned planes::

    from r12b.decode import decode_frame

    g, b, r = (numpy.zeros((height, width), dtype="<u2") for _ in range(3))
    result = decode_frame(packet, width, height, g, b, r)
    assert result.consumed == len(packet)

or letting a :class:`Decoder` allocate a :class:`~r12b.frame.Frame` per packet::

    dec = Decoder(width, height)
    frame = dec.decode(packet).frame
"""

import numbers
from collections import namedtuple

import numpy

from .errors import AllocationFailure, InsufficientData, InvalidGeometry
from .frame import Frame
from .layout import (
    MAX_DIMENSION,
    PIXEL_FORMAT,
    PIXELS_PER_BLOCK,
    PLANE_ORDER,
    packet_size,
)
from .unpack import BACKENDS

DecodeResult = namedtuple(
    "DecodeResult", ["got_frame", "consumed", "frame"], defaults=(None,)
)


def check_dimensions(width, height):
    """Check that `width` x `height` is a frame size R12B can represent.

    Raises
    ------
    InvalidGeometry : a dimension is not an integer, `width` is not a positive
        multiple of 8, `height` is not positive, or either exceeds
        :data:`~r12b.layout.MAX_DIMENSION`
    """
    for dim in (width, height):
        if isinstance(dim, bool) or not isinstance(dim, numbers.Integral):
            raise InvalidGeometry(f"Image size {width!r}x{height!r} is not integral")
    if width % PIXELS_PER_BLOCK != 0:
        raise InvalidGeometry(f"Image width {width} not a multiple of {PIXELS_PER_BLOCK}")
    if width <= 0 or height <= 0:
        raise InvalidGeometry(f"Invalid image size {width}x{height}")
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise InvalidGeometry(
            f"Image size {width}x{height} exceeds {MAX_DIMENSION}x{MAX_DIMENSION}"
        )


def validate_geometry(width, height, size):
    """Check that a packet of `size` bytes holds a full `width` x `height` frame.

    Parameters
    ----------
    width, height : int
        Frame size, in pixels.
    size : int
        Length of the packed input, in bytes.

    Returns
    -------
    required : int
        Number of bytes the frame occupies, ``height * (width // 8) * 36``.

    Raises
    ------
    InvalidGeometry
        See :func:`check_dimensions`.
    InsufficientData : `size` is less than the required byte count
    """
    check_dimensions(width, height)

    required = packet_size(width, height)
    if size < required:
        raise InsufficientData(size, required)
    return required


def _normalize_strides(strides, planes, width):
    if strides is None or isinstance(strides, numbers.Integral):
        strides = (strides,) * len(planes)
    elif len(strides) != len(planes):
        raise ValueError(f"Expected {len(planes)} strides, got {len(strides)}")

    out = []
    for plane, stride in zip(planes, strides):
        if stride is None:
            if isinstance(plane, numpy.ndarray) and plane.ndim == 2:
                stride = plane.shape[1]
            else:
                stride = width
        out.append(stride)
    return tuple(out)


def _plane_view(plane, name, width, height, stride):
    """Flat, writable uint16 view of a destination plane"""
    if isinstance(plane, numpy.ndarray):
        arr = plane
        if arr.dtype != numpy.dtype(PIXEL_FORMAT.dtype):
            raise ValueError(
                f"Plane {name} has dtype {arr.dtype}, expected {PIXEL_FORMAT.dtype}"
            )
        if not arr.flags.c_contiguous:
            raise ValueError(f"Plane {name} is not contiguous")
    else:
        arr = numpy.frombuffer(plane, dtype=PIXEL_FORMAT.dtype)

    if not arr.flags.writeable:
        raise ValueError(f"Plane {name} is read-only")
    if stride < width:
        raise ValueError(f"Plane {name} stride {stride} is less than width {width}")
    if arr.size < height * stride:
        raise ValueError(
            f"Plane {name} holds {arr.size} samples, need {height * stride}"
        )
    return arr.reshape(-1)


def decode_frame(src, width, height, g, b, r, strides=None, backend="numpy"):
    """Decode one packed frame into three planar channel buffers.

    All arguments are checked before the first sample is written; on error the
    planes are left untouched.

    Parameters
    ----------
    src : bytes-like
        Packed R12B data. Bytes beyond the frame size are ignored.
    width, height : int
        Frame size, in pixels.
    g, b, r : ndarray or writable buffer
        Destination planes of little-endian uint16 samples. numpy arrays must be
        C-contiguous; any other object exposing a writable buffer is also accepted.
    strides : int or sequence of int, optional
        Row stride of each plane, in samples. A single int applies to all planes.
        Defaults to the row length of 2D arrays, `width` otherwise.
    backend : {"numpy", "python"}, optional
        Unpacking implementation. "python" is *very* slow.

    Returns
    -------
    result : DecodeResult
        ``got_frame`` is True and ``consumed`` is the number of bytes decoded.

    Raises
    ------
    InvalidGeometry, InsufficientData
        See :func:`validate_geometry`.
    ValueError : unknown `backend`, or a plane cannot hold the frame
    """
    consumed = validate_geometry(width, height, memoryview(src).nbytes)

    try:
        unpack = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown backend: {backend}") from None

    planes = (g, b, r)
    strides = _normalize_strides(strides, planes, width)
    views = [
        _plane_view(plane, name, width, height, stride)
        for plane, name, stride in zip(planes, PLANE_ORDER, strides)
    ]

    unpack(src, *views, width, height, strides)
    return DecodeResult(got_frame=True, consumed=consumed)


class Decoder:
    """Packet-to-frame decoder for a fixed geometry.

    Parameters
    ----------
    width, height : int
        Frame size, in pixels.
    backend : {"numpy", "python"}, optional
        Unpacking implementation, see :func:`decode_frame`.
    get_buffer : callable, optional
        ``get_buffer(width, height) -> Frame`` supplying output planes. May raise
        :class:`~r12b.errors.AllocationFailure`. Defaults to
        :meth:`Frame.allocate <r12b.frame.Frame.allocate>`.
    """

    name = "r12b"
    long_name = "Uncompressed RGB 12-bit 8px in 36B"
    pixel_format = PIXEL_FORMAT
    bits_per_raw_sample = PIXEL_FORMAT.bits_per_raw_sample

    def __init__(self, width, height, backend="numpy", get_buffer=None):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {backend}")
        self.width = width
        self.height = height
        self.backend = backend
        self.get_buffer = Frame.allocate if get_buffer is None else get_buffer

    @property
    def packet_size(self):
        """Bytes consumed per decoded frame"""
        return packet_size(self.width, self.height)

    def decode(self, packet):
        """Decode a packet into a newly acquired frame.

        Returns
        -------
        result : DecodeResult
            With ``frame`` set to the decoded :class:`~r12b.frame.Frame`.

        Raises
        ------
        InvalidGeometry, InsufficientData
            See :func:`validate_geometry`.
        AllocationFailure : `get_buffer` could not provide a frame
        """
        validate_geometry(self.width, self.height, memoryview(packet).nbytes)

        try:
            frame = self.get_buffer(self.width, self.height)
        except AllocationFailure:
            raise
        except MemoryError as e:
            raise AllocationFailure(str(e)) from e

        got_frame, consumed, _ = decode_frame(
            packet,
            self.width,
            self.height,
            frame.g,
            frame.b,
            frame.r,
            strides=frame.linesize,
            backend=self.backend,
        )
        return DecodeResult(got_frame, consumed, frame)
