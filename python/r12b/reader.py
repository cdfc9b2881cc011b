"""Reader for raw R12B streams.

A raw stream is a file of back-to-back packed frames with no header. Frame geometry
is supplied by the caller or read from a JSON sidecar file next to the stream::

    {"width": 1920, "height": 1080, "frame_rate": 25}
"""

import json
import logging
import os

import numpy

from .base import VideoReader
from .decode import check_dimensions, decode_frame
from .layout import BITS_PER_SAMPLE, PLANE_ORDER, packet_size

log = logging.getLogger(__name__)


class R12bReader(VideoReader):
    """Raw R12B stream reader.

    Frames are returned as ``(3, height, width)`` uint16 arrays in
    :data:`~r12b.layout.PLANE_ORDER` (G, B, R).

    Parameters
    ----------
    path : path-like
        Path to the raw stream.
    width, height : int, optional
        Frame size, in pixels. Missing values are taken from the sidecar file.
    frame_rate : float, optional
        Frame rate, in Hz. Missing values are taken from the sidecar file.
    meta_path : path-like, optional
        Path to the JSON sidecar. If not provided, a file with the same base name
        and path as the stream and a ``.json`` extension is used, if it exists.
    backend : {"numpy", "python"}, optional
        Unpacking implementation, see :func:`~r12b.decode.decode_frame`.

    Attributes
    ----------
    meta : dict
        Sidecar contents merged with the explicit arguments.
    """

    def __init__(
        self, path, width=None, height=None, frame_rate=None, meta_path=None,
        backend="numpy"
    ):
        super().__init__(path)
        self.meta_path = meta_path
        if meta_path is None:
            base, _ = os.path.splitext(path)
            self.meta_path = f"{base}.json"
        self.backend = backend
        self._overrides = {
            "width": width,
            "height": height,
            "frame_rate": frame_rate,
        }
        self.meta = {}
        self._frame_count = 0

    def initialize(self):
        """Resolve frame geometry and count the frames in the file"""
        meta = load_sidecar(self.meta_path)
        meta.update({k: v for k, v in self._overrides.items() if v is not None})
        for key in ("width", "height"):
            if meta.get(key) is None:
                raise ValueError(
                    f"Frame {key} of {self.path} not given and not found in "
                    f"{self.meta_path}"
                )
        check_dimensions(meta["width"], meta["height"])
        self.meta = meta

        file_size = os.fstat(self.fd.fileno()).st_size
        self._frame_count, remainder = divmod(file_size, self.frame_size)
        log.info(
            "%s: %dx%d, %d frames of %d bytes",
            self.path, self.width, self.height, self._frame_count, self.frame_size,
        )
        if remainder:
            log.warning(
                "%s: ignoring %d trailing bytes (incomplete frame)", self.path,
                remainder,
            )

    @property
    def width(self):
        return self.meta["width"]

    @property
    def height(self):
        return self.meta["height"]

    @property
    def bit_depth(self):
        return BITS_PER_SAMPLE

    @property
    def frame_rate(self):
        return self.meta.get("frame_rate")

    @property
    def frame_count(self):
        return self._frame_count

    @property
    def frame_size(self):
        """Packed size of one frame, in bytes"""
        return packet_size(self.width, self.height)

    @property
    def frame_shape(self):
        return (len(PLANE_ORDER), self.height, self.width)

    def read_frame(self, idx, out=None):
        """Read and decode a single frame by index.

        Parameters
        ----------
        idx : int
            Index of the frame to read.
        out : ndarray, optional
            C-contiguous uint16 array of shape (3, height, width) to decode into.

        Returns
        -------
        img : np.ndarray, shape (3, height, width)
        """
        self._validate_index(idx)

        if out is None:
            out = numpy.empty(self.frame_shape, dtype=self.dtype)
        elif out.shape != self.frame_shape:
            raise ValueError(f"Expected shape {self.frame_shape}, got {out.shape}")

        seekpos = idx * self.frame_size
        if self.fd.tell() != seekpos:
            self.fd.seek(seekpos)
        buf = self.fd.read(self.frame_size)

        g, b, r = out
        decode_frame(buf, self.width, self.height, g, b, r, backend=self.backend)
        return out


def load_sidecar(path):
    """Load a JSON sidecar file describing a raw stream

    Parameters
    ----------
    path : path-like
        Path to the sidecar. A missing file yields an empty dict.

    Returns
    -------
    data : dict
        Key-value pairs in the sidecar.

    Raises
    ------
    ValueError : the file is not a JSON object
    """
    if not os.path.exists(path):
        return {}
    with open(path, "r") as fp:
        try:
            data = json.load(fp)
        except json.JSONDecodeError as e:
            log.error("While loading %s: %s", path, e)
            raise ValueError(f"Malformed sidecar {path}") from e
    if not isinstance(data, dict):
        log.error("While loading %s: expected an object", path)
        raise ValueError(f"Malformed sidecar {path}")
    return data
