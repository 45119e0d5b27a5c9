"""Unit tests for the sample plane codec."""

import io

import numpy as np
import pytest

from riffwave.format.chunks import DataChunkHeader, FormatDescriptor
from riffwave.format.riff import (
    DATA_TAG,
    FMT_TAG,
    RiffError,
    SampleReadError,
    UnsupportedBitDepthError,
)
from riffwave.format.samples import (
    SAMPLE_DTYPE,
    decode_samples,
    deinterleave,
    encode_samples,
    sample_count,
    sample_range,
)


def make_fmt(channels: int = 1, bits_per_sample: int = 16) -> FormatDescriptor:
    width = bits_per_sample // 8
    return FormatDescriptor(
        tag=FMT_TAG,
        chunk_size=16,
        audio_format=1,
        channel_count=channels,
        sample_rate=8000,
        byte_rate=8000 * channels * width,
        block_align=channels * width,
        bits_per_sample=bits_per_sample,
    )


class UnreadableStream(io.RawIOBase):
    """Stream whose reads always fail."""

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        raise OSError("device not ready")


class TestSampleCount:
    """Tests for sample count derivation."""

    def test_stereo_16bit(self) -> None:
        """Test 8 bytes / 2 channels / 2 bytes = 2 samples per channel."""
        assert sample_count(make_fmt(2, 16), DataChunkHeader(DATA_TAG, 8)) == 2

    def test_trailing_bytes_ignored(self) -> None:
        assert sample_count(make_fmt(2, 16), DataChunkHeader(DATA_TAG, 11)) == 2

    def test_mono_8bit(self) -> None:
        assert sample_count(make_fmt(1, 8), DataChunkHeader(DATA_TAG, 5)) == 5


class TestSampleRange:
    """Tests for sample_range."""

    @pytest.mark.parametrize(
        "bits, expected",
        [
            (8, (-128, 127)),
            (16, (-32768, 32767)),
            (32, (-2147483648, 2147483647)),
        ],
    )
    def test_ranges(self, bits: int, expected: tuple[int, int]) -> None:
        assert sample_range(bits) == expected


class TestDecodeSamples:
    """Tests for decode_samples."""

    def test_interleave_order(self) -> None:
        """Test that frames are split frame-major, channel-minor."""
        stream = io.BytesIO(bytes([0x01, 0x00, 0x02, 0x00, 0x03, 0x00, 0x04, 0x00]))

        channels = decode_samples(stream, make_fmt(2, 16), DataChunkHeader(DATA_TAG, 8))

        assert len(channels) == 2
        np.testing.assert_array_equal(channels[0], [1, 3])
        np.testing.assert_array_equal(channels[1], [2, 4])

    def test_negative_8bit(self) -> None:
        """Test that 0xFF is -1 at 8 bits."""
        channels = decode_samples(
            io.BytesIO(b"\xff\x80\x7f"), make_fmt(1, 8), DataChunkHeader(DATA_TAG, 3)
        )
        np.testing.assert_array_equal(channels[0], [-1, -128, 127])

    def test_negative_16bit(self) -> None:
        """Test that 0xFFFF little-endian is -1 at 16 bits."""
        channels = decode_samples(
            io.BytesIO(b"\xff\xff\x00\x80"), make_fmt(1, 16), DataChunkHeader(DATA_TAG, 4)
        )
        np.testing.assert_array_equal(channels[0], [-1, -32768])

    def test_32bit(self) -> None:
        raw = (1).to_bytes(4, "little") + (-2).to_bytes(4, "little", signed=True)
        channels = decode_samples(io.BytesIO(raw), make_fmt(1, 32), DataChunkHeader(DATA_TAG, 8))
        np.testing.assert_array_equal(channels[0], [1, -2])

    def test_wide_dtype_and_read_only(self) -> None:
        """Test that every depth decodes into read-only int64 planes."""
        channels = decode_samples(
            io.BytesIO(b"\x01\x02"), make_fmt(2, 8), DataChunkHeader(DATA_TAG, 2)
        )
        for channel in channels:
            assert channel.dtype == SAMPLE_DTYPE
            assert not channel.flags.writeable

    def test_zero_samples(self) -> None:
        """Test that an empty data chunk gives empty channels without reading."""
        stream = UnreadableStream()

        channels = decode_samples(stream, make_fmt(3, 16), DataChunkHeader(DATA_TAG, 0))

        assert len(channels) == 3
        assert all(len(channel) == 0 for channel in channels)

    def test_only_whole_samples_consumed(self) -> None:
        stream = io.BytesIO(b"\x01\x00\x02\x00\x03")

        channels = decode_samples(stream, make_fmt(1, 16), DataChunkHeader(DATA_TAG, 5))

        np.testing.assert_array_equal(channels[0], [1, 2])
        assert stream.tell() == 4

    @pytest.mark.parametrize("bits", [4, 12, 24, 64])
    def test_unsupported_depth(self, bits: int) -> None:
        with pytest.raises(UnsupportedBitDepthError) as excinfo:
            decode_samples(io.BytesIO(b"\x00" * 16), make_fmt(1, bits), DataChunkHeader(DATA_TAG, 6))
        assert excinfo.value.bits_per_sample == bits

    def test_unsupported_depth_checked_before_empty_data(self) -> None:
        with pytest.raises(UnsupportedBitDepthError):
            decode_samples(io.BytesIO(b""), make_fmt(2, 24), DataChunkHeader(DATA_TAG, 0))

    def test_zero_channels(self) -> None:
        with pytest.raises(RiffError, match="zero channels"):
            decode_samples(io.BytesIO(b""), make_fmt(0, 16), DataChunkHeader(DATA_TAG, 4))

    def test_truncated_sample_data(self) -> None:
        with pytest.raises(SampleReadError) as excinfo:
            decode_samples(
                io.BytesIO(b"\x01\x00\x02\x00"), make_fmt(2, 16), DataChunkHeader(DATA_TAG, 8)
            )
        assert excinfo.value.expected == 8
        assert excinfo.value.actual == 4

    def test_stream_error(self) -> None:
        with pytest.raises(SampleReadError, match="device not ready"):
            decode_samples(UnreadableStream(), make_fmt(1, 16), DataChunkHeader(DATA_TAG, 2))


class TestDeinterleave:
    """Tests for deinterleave."""

    def test_three_channels(self) -> None:
        planes = deinterleave(bytes([1, 2, 3, 4, 5, 6]), 8, 3)
        np.testing.assert_array_equal(planes[0], [1, 4])
        np.testing.assert_array_equal(planes[1], [2, 5])
        np.testing.assert_array_equal(planes[2], [3, 6])

    def test_unsupported_depth(self) -> None:
        with pytest.raises(UnsupportedBitDepthError):
            deinterleave(b"\x00\x00\x00", 24, 1)


class TestEncodeSamples:
    """Tests for encode_samples."""

    def test_interleave_order(self) -> None:
        raw = encode_samples([[1, 3], [2, 4]], 16)
        assert raw == bytes([0x01, 0x00, 0x02, 0x00, 0x03, 0x00, 0x04, 0x00])

    @pytest.mark.parametrize(
        "bits, expected",
        [
            (8, b"\xff\x7f"),
            (16, b"\xff\xff\x7f\x00"),
            (32, b"\xff\xff\xff\xff\x7f\x00\x00\x00"),
        ],
    )
    def test_width_follows_depth(self, bits: int, expected: bytes) -> None:
        """Test that each depth is written at its own width."""
        assert encode_samples([[-1, 127]], bits) == expected

    def test_accepts_numpy_planes(self) -> None:
        planes = [np.array([-32768, 32767], dtype=np.int64)]
        assert encode_samples(planes, 16) == b"\x00\x80\xff\x7f"

    def test_empty_channels(self) -> None:
        assert encode_samples([[], []], 16) == b""

    def test_unequal_lengths(self) -> None:
        with pytest.raises(ValueError, match="equal lengths"):
            encode_samples([[1, 2], [3]], 16)

    def test_out_of_range(self) -> None:
        """Test that values are not silently wrapped to the disk width."""
        with pytest.raises(ValueError, match="out of range"):
            encode_samples([[128]], 8)
        with pytest.raises(ValueError, match="out of range"):
            encode_samples([[-32769]], 16)

    def test_unsupported_depth(self) -> None:
        with pytest.raises(ValueError, match="Unsupported"):
            encode_samples([[0]], 24)

    def test_no_channels(self) -> None:
        with pytest.raises(ValueError, match="At least one channel"):
            encode_samples([], 16)

    def test_non_integer_samples(self) -> None:
        with pytest.raises(ValueError, match="integers"):
            encode_samples([[0.5, 1.5]], 16)

    def test_unsigned_samples_checked_before_narrowing(self) -> None:
        """Test that large unsigned values are refused instead of wrapping."""
        with pytest.raises(ValueError, match="out of range"):
            encode_samples([np.array([2**63], dtype=np.uint64)], 32)

    def test_two_dimensional_channel(self) -> None:
        with pytest.raises(ValueError, match="1D"):
            encode_samples([[[1, 2]]], 16)
