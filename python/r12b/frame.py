"""Decoded frame container and the default plane allocator."""

import numpy

from .errors import AllocationFailure, InvalidGeometry
from .layout import PIXEL_FORMAT, PLANE_ORDER


class Frame:
    """Three 12-bit sample planes plus geometry.

    Planes are stored in :data:`~r12b.layout.PLANE_ORDER` (G, B, R) as
    ``(height, linesize)`` little-endian uint16 arrays; columns at and beyond `width`
    are row padding.

    Parameters
    ----------
    width, height : int
        Frame size, in pixels.
    g, b, r : ndarray, shape (height, linesize)
        Sample planes.
    linesize : int
        Row stride shared by all planes, in samples.

    Attributes
    ----------
    key_frame : bool
        Always True, R12B is intra-only.
    pict_type : str
        Always ``"I"``.
    """

    pixel_format = PIXEL_FORMAT
    key_frame = True
    pict_type = "I"

    def __init__(self, width, height, g, b, r, linesize):
        self.width = width
        self.height = height
        self.g = g
        self.b = b
        self.r = r
        self.linesize = linesize

    @classmethod
    def allocate(cls, width, height, align=16):
        """Allocate a zero-filled frame.

        Parameters
        ----------
        width, height : int
            Frame size, in pixels.
        align : int, optional
            Row stride is rounded up to a multiple of this many samples.

        Raises
        ------
        InvalidGeometry : `width` or `height` is not positive
        AllocationFailure : the planes could not be allocated
        """
        if width <= 0 or height <= 0:
            raise InvalidGeometry(f"Invalid frame size {width}x{height}")
        linesize = -(-width // align) * align
        try:
            planes = [
                numpy.zeros((height, linesize), dtype=PIXEL_FORMAT.dtype)
                for _ in PLANE_ORDER
            ]
        except MemoryError as e:
            raise AllocationFailure(
                f"Could not allocate {width}x{height} frame"
            ) from e
        return cls(width, height, *planes, linesize=linesize)

    @property
    def planes(self):
        """``(g, b, r)`` views cropped to the frame width"""
        return tuple(p[:, : self.width] for p in (self.g, self.b, self.r))

    def to_array(self):
        """Copy the visible samples into an array of shape (3, height, width)"""
        return numpy.stack(self.planes)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}({self.width}x{self.height}, "
            f"{self.pixel_format.name}, linesize={self.linesize})"
        )
