"""Shared fixtures: WAVE bytes assembled by hand, independent of the encoder."""

import struct
from collections.abc import Callable

import pytest

WavBuilder = Callable[..., bytes]


def build_wav(
    frames: bytes = b"",
    *,
    channels: int = 1,
    sample_rate: int = 8000,
    bits_per_sample: int = 16,
    audio_format: int = 1,
    data_size: int | None = None,
    riff_size: int | None = None,
    fmt_chunk_size: int = 16,
    riff_id: bytes = b"RIFF",
    wave_id: bytes = b"WAVE",
    fmt_id: bytes = b"fmt ",
    data_id: bytes = b"data",
) -> bytes:
    """Assemble a canonical 44-byte header followed by ``frames``."""
    width = bits_per_sample // 8
    block_align = channels * width
    if data_size is None:
        data_size = len(frames)
    if riff_size is None:
        riff_size = 36 + data_size

    return b"".join(
        [
            riff_id,
            struct.pack("<I", riff_size),
            wave_id,
            fmt_id,
            struct.pack(
                "<IHHIIHH",
                fmt_chunk_size,
                audio_format,
                channels,
                sample_rate,
                sample_rate * block_align,
                block_align,
                bits_per_sample,
            ),
            data_id,
            struct.pack("<I", data_size),
            frames,
        ]
    )


@pytest.fixture
def wav_bytes() -> WavBuilder:
    """Factory for hand-built WAVE files."""
    return build_wav
