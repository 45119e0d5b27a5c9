"""RIFF/WAVE format module.

This module provides functionality for decoding and encoding canonical PCM
WAVE files.

Format Overview
---------------
A supported file holds exactly three chunks, in this order:

    +----------------------------------------+
    | RIFF Header ("WAVE")                   |
    +----------------------------------------+
    | fmt  chunk (audio format)              |
    |   - 8, 16 or 32-bit signed PCM         |
    +----------------------------------------+
    | data chunk (sample frames)             |
    |   - little-endian samples              |
    |   - frame-major, channel-minor order   |
    +----------------------------------------+

Example Usage
-------------
>>> from riffwave.format import WaveFile, load_wave, save_wave
>>> wave = WaveFile.from_channels([[0, 1000, -1000], [0, -1000, 1000]], sample_rate=44100)
>>> save_wave("stereo.wav", wave)  # doctest: +SKIP
>>> load_wave("stereo.wav").channels[1]  # doctest: +SKIP
array([    0, -1000,  1000])
"""

from riffwave.format.chunks import DataChunkHeader, FormatDescriptor, Header
from riffwave.format.reader import load_wave
from riffwave.format.riff import (
    InvalidTagError,
    RiffError,
    SampleReadError,
    ShortReadError,
    UnsupportedBitDepthError,
)
from riffwave.format.validation import (
    ValidationError,
    ValidationResult,
    validate_wave_file,
)
from riffwave.format.wave import (
    SampleData,
    WaveFile,
    decode,
    decode_bytes,
    encode,
    encode_to,
)
from riffwave.format.writer import save_wave

__all__ = [
    # Types
    "WaveFile",
    "Header",
    "FormatDescriptor",
    "DataChunkHeader",
    "SampleData",
    # Codec
    "decode",
    "decode_bytes",
    "encode",
    "encode_to",
    # Files
    "load_wave",
    "save_wave",
    # Errors
    "RiffError",
    "ShortReadError",
    "InvalidTagError",
    "UnsupportedBitDepthError",
    "SampleReadError",
    # Validation
    "validate_wave_file",
    "ValidationResult",
    "ValidationError",
]
