"""WAVE file value and the whole-file decode/encode entry points.

``decode`` runs the chunk decoders in file order (RIFF header, fmt chunk,
data chunk header) and then the sample plane codec. The first failure aborts
the decode; no partially populated ``WaveFile`` is ever returned.

``encode`` is the reverse. The size fields are recomputed from the sample
planes, so the emitted header always matches the emitted byte count.
"""

import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import BinaryIO

import numpy as np
from numpy.typing import ArrayLike

from riffwave.format.chunks import (
    DataChunkHeader,
    FormatDescriptor,
    Header,
    decode_data_header,
    decode_format,
    decode_header,
    encode_data_header,
    encode_format,
    encode_header,
)
from riffwave.format.riff import (
    DATA_HEADER_SIZE,
    DATA_TAG,
    FMT_TAG,
    PCM_FMT_CHUNK_SIZE,
    RIFF_TAG,
    WAVE_FORMAT_PCM,
    WAVE_TAG,
)
from riffwave.format.samples import (
    DISK_DTYPES,
    SamplePlane,
    as_sample_plane,
    decode_samples,
    encode_samples,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SampleData:
    """The data chunk with its samples split into channels."""

    tag: int
    declared_byte_size: int
    channels: tuple[SamplePlane, ...]
    """One read-only int64 array per channel, all the same length."""

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def sample_count(self) -> int:
        """Number of samples in each channel."""
        return len(self.channels[0]) if self.channels else 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleData):
            return NotImplemented
        return (
            self.tag == other.tag
            and self.declared_byte_size == other.declared_byte_size
            and len(self.channels) == len(other.channels)
            and all(np.array_equal(a, b) for a, b in zip(self.channels, other.channels))
        )


@dataclass(frozen=True)
class WaveFile:
    """A complete PCM WAVE file: header, format and sample data."""

    header: Header
    fmt: FormatDescriptor
    data: SampleData

    # Unhashable, like the numpy sample planes it holds
    __hash__ = None  # type: ignore[assignment]

    @property
    def channels(self) -> tuple[SamplePlane, ...]:
        return self.data.channels

    @property
    def sample_count(self) -> int:
        return self.data.sample_count

    @property
    def duration_seconds(self) -> float:
        if self.fmt.sample_rate == 0:
            return 0.0
        return self.sample_count / self.fmt.sample_rate

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[ArrayLike],
        sample_rate: int,
        bits_per_sample: int = 16,
        audio_format: int = WAVE_FORMAT_PCM,
    ) -> "WaveFile":
        """Build a consistent file value from per-channel integer samples.

        Args:
            channels: One sequence of integer samples per channel.
            sample_rate: Sample rate in Hz.
            bits_per_sample: 8, 16 or 32.
            audio_format: Format code written to the fmt chunk.

        Returns:
            A WaveFile whose size, byte rate and block align fields are derived
            from the arguments.

        Raises:
            ValueError: If the depth is unsupported, there are no channels, a
                channel holds non-integer or out-of-range samples or the
                channels differ in length.
        """
        if bits_per_sample not in DISK_DTYPES:
            raise ValueError(f"Unsupported bits per sample: {bits_per_sample}")
        if len(channels) == 0:
            raise ValueError("At least one channel is required")

        planes = [
            as_sample_plane(channel, bits_per_sample, i) for i, channel in enumerate(channels)
        ]

        lengths = [len(plane) for plane in planes]
        if len(set(lengths)) > 1:
            raise ValueError(f"Channels must have equal lengths, got {lengths}")

        sample_width = bits_per_sample // 8
        block_align = len(planes) * sample_width
        data_size = lengths[0] * block_align

        return cls(
            header=Header(tag=RIFF_TAG, size=riff_size(data_size), format=WAVE_TAG),
            fmt=FormatDescriptor(
                tag=FMT_TAG,
                chunk_size=PCM_FMT_CHUNK_SIZE,
                audio_format=audio_format,
                channel_count=len(planes),
                sample_rate=sample_rate,
                byte_rate=sample_rate * block_align,
                block_align=block_align,
                bits_per_sample=bits_per_sample,
            ),
            data=SampleData(tag=DATA_TAG, declared_byte_size=data_size, channels=tuple(planes)),
        )


def riff_size(data_size: int) -> int:
    """The RIFF header size field of a canonical file with ``data_size`` sample bytes.

    "WAVE" + fmt chunk (8 + 16) + data chunk (8 + data_size).

    >>> riff_size(0)
    36
    """
    return 4 + (8 + PCM_FMT_CHUNK_SIZE) + (DATA_HEADER_SIZE + data_size)


def decode(stream: BinaryIO) -> WaveFile:
    """Decode a complete WAVE file from a binary stream.

    Args:
        stream: Readable binary stream positioned at the ``RIFF`` tag.

    Returns:
        The decoded WaveFile.

    Raises:
        ShortReadError: If a chunk header is truncated.
        InvalidTagError: If a chunk tag is not the expected one.
        UnsupportedBitDepthError: If the samples are not 8, 16 or 32 bit.
        SampleReadError: If the sample frames cannot be read.
        RiffError: If the fmt chunk declares zero channels.
    """
    header = decode_header(stream)
    fmt = decode_format(stream)
    data_header = decode_data_header(stream)
    channels = decode_samples(stream, fmt, data_header)

    return WaveFile(
        header=header,
        fmt=fmt,
        data=SampleData(
            tag=data_header.tag,
            declared_byte_size=data_header.size,
            channels=channels,
        ),
    )


def decode_bytes(data: bytes) -> WaveFile:
    """Decode a complete WAVE file held in memory."""
    return decode(io.BytesIO(data))


def encode(wave_file: WaveFile) -> bytes:
    """Encode a WaveFile into its canonical byte form.

    The fmt chunk size is written as 16 (the PCM body), the data size as the
    number of sample bytes emitted and the RIFF size as the resulting file
    size minus 8. Every other field is written as recorded.

    Raises:
        ValueError: If the channel planes do not match the fmt chunk or a
            sample does not fit ``bits_per_sample``.
    """
    fmt = wave_file.fmt
    channels = wave_file.data.channels

    if len(channels) != fmt.channel_count:
        raise ValueError(
            f"fmt chunk declares {fmt.channel_count} channels, got {len(channels)} sample planes"
        )

    samples = encode_samples(channels, fmt.bits_per_sample)

    header = replace(wave_file.header, size=riff_size(len(samples)))
    fmt = replace(fmt, chunk_size=PCM_FMT_CHUNK_SIZE)
    data_header = DataChunkHeader(tag=wave_file.data.tag, size=len(samples))

    buf = b"".join(
        [
            encode_header(header),
            encode_format(fmt),
            encode_data_header(data_header),
            samples,
        ]
    )
    logger.debug("Encoded %d bytes (%d sample bytes)", len(buf), len(samples))
    return buf


def encode_to(wave_file: WaveFile, sink: BinaryIO) -> int:
    """Encode a WaveFile and write it to a sink in one call.

    Returns:
        The number of bytes written.
    """
    buf = encode(wave_file)
    sink.write(buf)
    return len(buf)
