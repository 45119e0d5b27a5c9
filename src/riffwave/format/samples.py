"""Sample plane codec.

On disk, PCM samples are interleaved frame by frame: every frame holds one
sample per channel, so a stereo stream reads L0 R0 L1 R1 ... In memory each
channel is its own one-dimensional array. Decoding de-interleaves into
per-channel planes, encoding re-interleaves them.

All supported depths (8, 16, 32 bits, signed, little-endian) decode into a
single wide dtype so callers never deal with width-specific overflow;
narrowing back to the on-disk width only happens in ``encode_samples`` after
a range check.
"""

import logging
from collections.abc import Sequence
from typing import BinaryIO

import numpy as np
from numpy.typing import ArrayLike, NDArray

from riffwave.format.chunks import DataChunkHeader, FormatDescriptor
from riffwave.format.riff import (
    RiffError,
    SampleReadError,
    ShortReadError,
    UnsupportedBitDepthError,
    read_exact,
)

logger = logging.getLogger(__name__)

SAMPLE_DTYPE = np.int64
"""In-memory sample type for every supported bit depth."""

# On-disk sample layout per bit depth
DISK_DTYPES = {
    8: np.dtype("i1"),
    16: np.dtype("<i2"),
    32: np.dtype("<i4"),
}

SamplePlane = NDArray[np.int64]


def sample_range(bits_per_sample: int) -> tuple[int, int]:
    """Return the (min, max) signed value of a sample of this depth.

    >>> sample_range(8)
    (-128, 127)
    >>> sample_range(16)
    (-32768, 32767)
    """
    half = 1 << (bits_per_sample - 1)
    return -half, half - 1


def sample_count(fmt: FormatDescriptor, data_header: DataChunkHeader) -> int:
    """Number of samples per channel declared by the data chunk.

    Trailing bytes that do not fill a whole sample are ignored.
    """
    return data_header.size // fmt.channel_count // fmt.sample_width


def _check_format(fmt: FormatDescriptor) -> None:
    if fmt.bits_per_sample not in DISK_DTYPES:
        raise UnsupportedBitDepthError(fmt.bits_per_sample)
    if fmt.channel_count == 0:
        raise RiffError("fmt chunk declares zero channels")


def empty_planes(channel_count: int) -> tuple[SamplePlane, ...]:
    """Build ``channel_count`` read-only empty planes."""
    planes = np.zeros((channel_count, 0), dtype=SAMPLE_DTYPE)
    planes.setflags(write=False)
    return tuple(planes)


def as_sample_plane(channel: ArrayLike, bits_per_sample: int, index: int = 0) -> SamplePlane:
    """Copy one channel into a read-only int64 plane that fits ``bits_per_sample``.

    The dtype and range are checked on the input as given, before the cast,
    so floats are never truncated and oversized integers never wrap.

    Raises:
        ValueError: If the channel is not 1D, does not hold integers or a
            sample does not fit the depth.
    """
    plane = np.asarray(channel)
    if plane.ndim != 1:
        raise ValueError(f"channels[{index}] should be 1D, got shape {plane.shape}")
    if plane.size == 0:
        return empty_planes(1)[0]
    if not np.issubdtype(plane.dtype, np.integer):
        raise ValueError(f"channels[{index}] must hold integers, got dtype {plane.dtype}")

    low, high = sample_range(bits_per_sample)
    if plane.min() < low or plane.max() > high:
        raise ValueError(
            f"Samples out of range for {bits_per_sample}-bit PCM: channels[{index}] spans "
            f"[{int(plane.min())}, {int(plane.max())}], not within [{low}, {high}]"
        )

    plane = plane.astype(SAMPLE_DTYPE)
    plane.setflags(write=False)
    return plane


def deinterleave(raw: bytes, bits_per_sample: int, channel_count: int) -> tuple[SamplePlane, ...]:
    """Split interleaved little-endian frames into per-channel planes.

    Args:
        raw: Whole frames, ``channel_count * bits_per_sample / 8`` bytes each.
        bits_per_sample: 8, 16 or 32.
        channel_count: Number of interleaved channels.

    Returns:
        One read-only ``int64`` array per channel.
    """
    if bits_per_sample not in DISK_DTYPES:
        raise UnsupportedBitDepthError(bits_per_sample)

    frames = np.frombuffer(raw, dtype=DISK_DTYPES[bits_per_sample]).reshape(-1, channel_count)

    # Channel-major copy so each plane is contiguous
    planes = np.ascontiguousarray(frames.T, dtype=SAMPLE_DTYPE)
    planes.setflags(write=False)
    return tuple(planes)


def decode_samples(
    stream: BinaryIO,
    fmt: FormatDescriptor,
    data_header: DataChunkHeader,
) -> tuple[SamplePlane, ...]:
    """Read and de-interleave the sample frames that follow the data header.

    Args:
        stream: Stream positioned right after the data chunk header.
        fmt: The decoded fmt chunk.
        data_header: The decoded data chunk header.

    Returns:
        One array per channel, each with ``sample_count(fmt, data_header)``
        samples.

    Raises:
        UnsupportedBitDepthError: If ``bits_per_sample`` is not 8, 16 or 32.
            Checked before anything is read, even when there are no samples.
        RiffError: If the fmt chunk declares zero channels.
        SampleReadError: If the stream ends early or fails while reading.
    """
    _check_format(fmt)

    count = sample_count(fmt, data_header)
    if count == 0:
        return empty_planes(fmt.channel_count)

    num_bytes = count * fmt.channel_count * fmt.sample_width
    try:
        raw = read_exact(stream, num_bytes, "sample data")
    except ShortReadError as e:
        raise SampleReadError(
            f"Sample data ended after {e.actual} of {num_bytes} bytes",
            expected=num_bytes,
            actual=e.actual,
        ) from e
    except OSError as e:
        raise SampleReadError(f"Failed to read sample data: {e}", expected=num_bytes) from e

    planes = deinterleave(raw, fmt.bits_per_sample, fmt.channel_count)
    logger.debug("Decoded %d samples x %d channels", count, fmt.channel_count)
    return planes


def encode_samples(channels: Sequence[ArrayLike], bits_per_sample: int) -> bytes:
    """Interleave per-channel samples into little-endian frames.

    The output width follows ``bits_per_sample`` for every supported depth.

    Args:
        channels: One sequence of integer samples per channel, equal lengths.
        bits_per_sample: 8, 16 or 32.

    Returns:
        The frame bytes, ``len(channels) * count * bits_per_sample / 8`` long.

    Raises:
        ValueError: If the depth is unsupported, there are no channels, the
            channels differ in length or a sample does not fit the depth.
    """
    if bits_per_sample not in DISK_DTYPES:
        raise ValueError(f"Unsupported bits per sample: {bits_per_sample}")
    if len(channels) == 0:
        raise ValueError("At least one channel is required")

    planes = [np.asarray(channel) for channel in channels]
    for i, plane in enumerate(planes):
        if plane.ndim != 1:
            raise ValueError(f"channels[{i}] should be 1D, got shape {plane.shape}")

    lengths = [len(plane) for plane in planes]
    if len(set(lengths)) > 1:
        raise ValueError(f"Channels must have equal lengths, got {lengths}")
    if lengths[0] == 0:
        return b""

    # Frame-major: row i holds sample i of every channel
    checked = [as_sample_plane(plane, bits_per_sample, i) for i, plane in enumerate(planes)]
    frames = np.stack(checked, axis=1)
    return frames.astype(DISK_DTYPES[bits_per_sample]).tobytes()
