"""Decode errors

Every failure is raised before any sample is written, so a caught error never
leaves a partially decoded frame behind.
"""


class DecodeError(Exception):
    """Base class for R12B decode failures"""

    code = "decode_error"


class InvalidGeometry(DecodeError, ValueError):
    """Frame width is not a positive multiple of 8, or a dimension is out of range"""

    code = "invalid_geometry"


class InsufficientData(DecodeError, ValueError):
    """Input buffer is shorter than the declared geometry requires"""

    code = "insufficient_data"

    def __init__(self, size, required):
        super().__init__(f"Packet too small: got {size} bytes, need {required}")
        self.size = size
        self.required = required


class AllocationFailure(DecodeError, MemoryError):
    """Output buffer acquisition failed before decoding started"""

    code = "allocation_failure"
