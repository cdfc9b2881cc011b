"""R12B block layout: constants, pixel format and the bit extraction table.

A packed block holds 8 pixels of one scanline in 36 bytes, addressed as 9 words of
4 bytes each. Every 12-bit sample is assembled from one full byte and one nibble::

    sample = low_field | high_field << shift

where the low field provides bits 0-7 (or 0-3) and the high field the remaining
upper bits. The byte order is set by the capture hardware (Blackmagic DeckLink
12-bit RGB, FourCC ``R12B``) and follows no formula, hence the explicit
:data:`EXTRACTION_TABLE`.
"""

from collections import namedtuple

WORDS_PER_BLOCK = 9
BYTES_PER_WORD = 4
BYTES_PER_BLOCK = WORDS_PER_BLOCK * BYTES_PER_WORD
PIXELS_PER_BLOCK = 8
BITS_PER_SAMPLE = 12
SAMPLE_MAX = 2**BITS_PER_SAMPLE - 1

# largest accepted width or height, keeps the packet size computation sane
MAX_DIMENSION = 32768

PLANE_ORDER = ("g", "b", "r")

FULL = "full"
LOW = "low"
HIGH = "high"


PixelFormat = namedtuple(
    "PixelFormat",
    ["name", "planar", "plane_order", "bits_per_raw_sample", "bytes_per_sample",
     "byteorder", "dtype"],
)

PIXEL_FORMAT = PixelFormat(
    name="gbrp12le",
    planar=True,
    plane_order=PLANE_ORDER,
    bits_per_raw_sample=BITS_PER_SAMPLE,
    bytes_per_sample=2,
    byteorder="little",
    dtype="<u2",
)


class Field(namedtuple("Field", ["word", "byte", "part", "shift"])):
    """One byte or nibble of a block, placed at bit `shift` of a sample.

    Attributes
    ----------
    word : int
        Word index within the block, 0-8.
    byte : int
        Byte index within the word, 0-3.
    part : str
        ``FULL`` for the whole byte, ``LOW`` for bits 0-3, ``HIGH`` for bits 4-7.
    shift : int
        Left shift applied to the extracted value.
    """

    __slots__ = ()

    @property
    def index(self):
        """Byte offset of the field within its block"""
        return self.word * BYTES_PER_WORD + self.byte

    @property
    def width(self):
        """Number of bits the field contributes"""
        return 8 if self.part == FULL else 4

    def extract(self, src, offset=0):
        """Extract the field from the block starting at `offset` of `src`."""
        value = src[offset + self.index]
        if self.part == LOW:
            value &= 0x0F
        elif self.part == HIGH:
            value >>= 4
        return value << self.shift

    def select(self, blocks):
        """Vectorized :meth:`extract` over an integer array of shape (..., 36)."""
        value = blocks[..., self.index]
        if self.part == LOW:
            value = value & 0x0F
        elif self.part == HIGH:
            value = value >> 4
        return value << self.shift


class Sample(namedtuple("Sample", ["low", "high"])):
    """A 12-bit sample built from two fields covering bits 0-11 exactly once."""

    __slots__ = ()

    def extract(self, src, offset=0):
        return self.low.extract(src, offset) | self.high.extract(src, offset)

    def select(self, blocks):
        return self.low.select(blocks) | self.high.select(blocks)


def _full(word, byte, shift=0):
    return Field(word, byte, FULL, shift)


def _low(word, byte, shift=0):
    return Field(word, byte, LOW, shift)


def _high(word, byte, shift=0):
    return Field(word, byte, HIGH, shift)


_S = Sample

# fmt: off
# per channel, per pixel 0..7
_BLUE = (
    _S(_full(0, 0), _low(1, 3, 8)),
    _S(_high(1, 0), _full(2, 3, 4)),
    _S(_full(3, 3), _low(3, 2, 8)),
    _S(_high(4, 3), _full(4, 2, 4)),
    _S(_full(5, 2), _low(5, 1, 8)),
    _S(_high(6, 2), _full(6, 1, 4)),
    _S(_full(7, 1), _low(7, 0, 8)),
    _S(_high(8, 1), _full(8, 0, 4)),
)

_GREEN = (
    _S(_high(0, 2), _full(0, 1, 4)),
    _S(_full(1, 1), _low(1, 0, 8)),
    _S(_high(2, 1), _full(2, 0, 4)),
    _S(_full(3, 0), _low(4, 3, 8)),
    _S(_high(4, 0), _full(5, 3, 4)),
    _S(_full(6, 3), _low(6, 2, 8)),
    _S(_high(7, 3), _full(7, 2, 4)),
    _S(_full(8, 2), _low(8, 1, 8)),
)

_RED = (
    _S(_full(0, 3), _low(0, 2, 8)),
    _S(_high(1, 3), _full(1, 2, 4)),
    _S(_full(2, 2), _low(2, 1, 8)),
    _S(_high(3, 2), _full(3, 1, 4)),
    _S(_full(4, 1), _low(4, 0, 8)),
    _S(_high(5, 1), _full(5, 0, 4)),
    _S(_full(6, 0), _low(7, 3, 8)),
    _S(_high(7, 0), _full(8, 3, 4)),
)
# fmt: on

#: Extraction descriptors in plane order (G, B, R), 8 samples each.
EXTRACTION_TABLE = (_GREEN, _BLUE, _RED)


def block_row_bytes(width):
    """Number of packed bytes in one scanline of `width` pixels"""
    return (width // PIXELS_PER_BLOCK) * BYTES_PER_BLOCK


def packet_size(width, height):
    """Number of packed bytes needed for a `width` x `height` frame"""
    return height * block_row_bytes(width)
