"""Fixed-layout chunk records and their decoders/encoders.

A canonical PCM WAVE file starts with three fixed-size regions, always in
this order:

    +----------------------------------------+
    | RIFF header     12 bytes               |
    |   "RIFF" | size | "WAVE"               |
    +----------------------------------------+
    | fmt  chunk      24 bytes               |
    |   "fmt " | chunk size | PCM body (16)  |
    +----------------------------------------+
    | data chunk      8 bytes + samples      |
    |   "data" | byte size | frames...       |
    +----------------------------------------+

Files with other chunks (``LIST``, ``fact``...) or a different order are not
supported; they fail with ``InvalidTagError`` on the first unexpected tag.
"""

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

from riffwave.format.riff import (
    DATA_HEADER_SIZE,
    DATA_TAG,
    FMT_HEADER_SIZE,
    FMT_TAG,
    HEADER_SIZE,
    RIFF_TAG,
    WAVE_TAG,
    InvalidTagError,
    pack_tag,
    pack_u16,
    pack_u32,
    read_exact,
    unpack_tag,
    unpack_u16,
    unpack_u32,
)

logger = logging.getLogger(__name__)

SUPPORTED_BIT_DEPTHS = (8, 16, 32)


@dataclass(frozen=True)
class Header:
    """The RIFF descriptor at the start of the file."""

    tag: int
    size: int
    """Declared file size minus the 8 bytes of tag and size."""

    format: int


@dataclass(frozen=True)
class FormatDescriptor:
    """The ``fmt `` chunk describing the sample layout."""

    tag: int
    chunk_size: int
    audio_format: int
    channel_count: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int

    @property
    def sample_width(self) -> int:
        """Bytes per sample of a single channel."""
        return self.bits_per_sample // 8

    @property
    def is_supported(self) -> bool:
        return self.bits_per_sample in SUPPORTED_BIT_DEPTHS


@dataclass(frozen=True)
class DataChunkHeader:
    """The ``data`` chunk header preceding the sample frames."""

    tag: int
    size: int


def _read_tag(stream: BinaryIO, chunk: str, expected: int) -> bytes:
    raw = read_exact(stream, 4, f"{chunk} tag")
    actual = unpack_tag(raw)
    if actual != expected:
        raise InvalidTagError(chunk, expected, actual)
    return raw


def decode_header(stream: BinaryIO) -> Header:
    """Decode the 12-byte RIFF header.

    The ``RIFF`` tag is checked before the rest of the header is read.

    Raises:
        ShortReadError: If fewer than 12 bytes are available.
        InvalidTagError: If the tag is not ``RIFF`` or the format is not ``WAVE``.
    """
    buf = _read_tag(stream, "RIFF header", RIFF_TAG)
    buf += read_exact(stream, HEADER_SIZE - 4, "RIFF header")

    # The declared size is not checked against the stream length
    header = Header(
        tag=unpack_tag(buf, 0),
        size=unpack_u32(buf, 4),
        format=unpack_tag(buf, 8),
    )
    if header.format != WAVE_TAG:
        raise InvalidTagError("RIFF format", WAVE_TAG, header.format)

    logger.debug("Decoded RIFF header: size=%d", header.size)
    return header


def decode_format(stream: BinaryIO) -> FormatDescriptor:
    """Decode the 24-byte ``fmt `` chunk (tag, size and the PCM body).

    Raises:
        ShortReadError: If fewer than 24 bytes are available.
        InvalidTagError: If the tag is not ``fmt ``.
    """
    buf = _read_tag(stream, "fmt chunk", FMT_TAG)
    buf += read_exact(stream, FMT_HEADER_SIZE - 4, "fmt chunk")

    fmt = FormatDescriptor(
        tag=unpack_tag(buf, 0),
        chunk_size=unpack_u32(buf, 4),
        audio_format=unpack_u16(buf, 8),
        channel_count=unpack_u16(buf, 10),
        sample_rate=unpack_u32(buf, 12),
        byte_rate=unpack_u32(buf, 16),
        block_align=unpack_u16(buf, 20),
        bits_per_sample=unpack_u16(buf, 22),
    )
    logger.debug(
        "Decoded fmt chunk: format=%d channels=%d rate=%d bits=%d",
        fmt.audio_format,
        fmt.channel_count,
        fmt.sample_rate,
        fmt.bits_per_sample,
    )
    return fmt


def decode_data_header(stream: BinaryIO) -> DataChunkHeader:
    """Decode the 8-byte ``data`` chunk header.

    Raises:
        ShortReadError: If fewer than 8 bytes are available.
        InvalidTagError: If the tag is not ``data``.
    """
    buf = _read_tag(stream, "data chunk", DATA_TAG)
    buf += read_exact(stream, DATA_HEADER_SIZE - 4, "data chunk header")

    data_header = DataChunkHeader(tag=unpack_tag(buf, 0), size=unpack_u32(buf, 4))
    logger.debug("Decoded data chunk header: size=%d", data_header.size)
    return data_header


def encode_header(header: Header) -> bytes:
    """Encode a RIFF header into its 12-byte form."""
    try:
        return pack_tag(header.tag) + pack_u32(header.size) + pack_tag(header.format)
    except struct.error as e:
        raise ValueError(f"RIFF header field out of range: {e}") from e


def encode_format(fmt: FormatDescriptor) -> bytes:
    """Encode a fmt chunk into its 24-byte form."""
    try:
        return b"".join(
            [
                pack_tag(fmt.tag),
                pack_u32(fmt.chunk_size),
                pack_u16(fmt.audio_format),
                pack_u16(fmt.channel_count),
                pack_u32(fmt.sample_rate),
                pack_u32(fmt.byte_rate),
                pack_u16(fmt.block_align),
                pack_u16(fmt.bits_per_sample),
            ]
        )
    except struct.error as e:
        raise ValueError(f"fmt chunk field out of range: {e}") from e


def encode_data_header(data_header: DataChunkHeader) -> bytes:
    """Encode a data chunk header into its 8-byte form."""
    try:
        return pack_tag(data_header.tag) + pack_u32(data_header.size)
    except struct.error as e:
        raise ValueError(f"data chunk header field out of range: {e}") from e
