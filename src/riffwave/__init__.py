"""riffwave - RIFF/WAVE codec.

This package decodes canonical PCM WAVE files into per-channel sample arrays
and encodes them back, byte for byte.

Example Usage
-------------
>>> from riffwave import decode_bytes, encode, WaveFile
>>>
>>> wave = WaveFile.from_channels([[1, 3], [2, 4]], sample_rate=8000, bits_per_sample=16)
>>> data = encode(wave)
>>> decode_bytes(data) == wave
True
"""

# Re-export format module for convenience
from riffwave.format import (
    DataChunkHeader,
    FormatDescriptor,
    Header,
    InvalidTagError,
    RiffError,
    SampleData,
    SampleReadError,
    ShortReadError,
    UnsupportedBitDepthError,
    ValidationError,
    ValidationResult,
    WaveFile,
    decode,
    decode_bytes,
    encode,
    encode_to,
    load_wave,
    save_wave,
    validate_wave_file,
)

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
