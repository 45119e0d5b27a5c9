"""RIFF primitives: FourCC tags, little-endian fields and exact reads.

RIFF/WAVE mixes byte orders. The four-character chunk identifiers are
compared as big-endian 32-bit integers, while every numeric field is stored
little-endian. The helpers below keep that asymmetry in one place.
"""

import struct
from typing import BinaryIO

# FourCC identifiers
RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

# The same identifiers read as big-endian integers
RIFF_TAG = int.from_bytes(RIFF_ID, "big")  # 0x52494646
WAVE_TAG = int.from_bytes(WAVE_ID, "big")  # 0x57415645
FMT_TAG = int.from_bytes(FMT_ID, "big")  # 0x666D7420
DATA_TAG = int.from_bytes(DATA_ID, "big")  # 0x64617461

# Audio format code
WAVE_FORMAT_PCM = 1

# Fixed prefix sizes of the chunks read in order
HEADER_SIZE = 12
FMT_HEADER_SIZE = 24
DATA_HEADER_SIZE = 8

# Body size of the canonical PCM fmt chunk
PCM_FMT_CHUNK_SIZE = 16


class RiffError(Exception):
    """Error reading or writing RIFF files."""


class ShortReadError(RiffError):
    """The stream ended before a fixed-size region was complete."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Unexpected end of stream reading {what}: expected {expected} bytes, got {actual}"
        )


class InvalidTagError(RiffError):
    """A chunk's FourCC did not match the expected identifier."""

    def __init__(self, chunk: str, expected: int, actual: int) -> None:
        self.chunk = chunk
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid {chunk} tag: expected {fourcc(expected)!r}, got {fourcc(actual)!r}"
        )


class UnsupportedBitDepthError(RiffError):
    """The fmt chunk declares a sample width this codec cannot handle."""

    def __init__(self, bits_per_sample: int) -> None:
        self.bits_per_sample = bits_per_sample
        super().__init__(f"Unsupported bits per sample: {bits_per_sample}")


class SampleReadError(RiffError):
    """Sample bytes could not be read from the stream."""

    def __init__(self, message: str, expected: int = 0, actual: int = 0) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message)


def read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    """Read exactly ``size`` bytes from a stream.

    ``read`` on raw and non-blocking streams may return fewer bytes than
    requested, so this keeps reading until the region is complete or the
    stream reports end of file.

    Args:
        stream: Readable binary stream.
        size: Number of bytes required.
        what: Name of the region, used in the error message.

    Returns:
        Exactly ``size`` bytes.

    Raises:
        ShortReadError: If the stream ends first.
    """
    buf = bytearray()
    while len(buf) < size:
        chunk = stream.read(size - len(buf))
        if not chunk:
            raise ShortReadError(what, size, len(buf))
        buf.extend(chunk)
    return bytes(buf)


def unpack_tag(buf: bytes, offset: int = 0) -> int:
    """Read a FourCC as a big-endian unsigned 32-bit integer."""
    return struct.unpack_from(">I", buf, offset)[0]


def unpack_u16(buf: bytes, offset: int = 0) -> int:
    """Read a little-endian unsigned 16-bit field."""
    return struct.unpack_from("<H", buf, offset)[0]


def unpack_u32(buf: bytes, offset: int = 0) -> int:
    """Read a little-endian unsigned 32-bit field."""
    return struct.unpack_from("<I", buf, offset)[0]


def pack_tag(tag: int) -> bytes:
    return struct.pack(">I", tag)


def pack_u16(value: int) -> bytes:
    return struct.pack("<H", value)


def pack_u32(value: int) -> bytes:
    return struct.pack("<I", value)


def fourcc(tag: int) -> str:
    """Render a tag as its four characters, e.g. ``0x52494646`` -> ``"RIFF"``."""
    return pack_tag(tag & 0xFFFFFFFF).decode("latin-1")
