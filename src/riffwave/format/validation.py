"""Consistency checks for decoded WAVE files.

Decoding only enforces what it needs to read the file: the chunk tags and a
supported bit depth. The derived fields of the fmt chunk and the declared
sizes are recorded as-is. This module checks them against each other.
"""

from dataclasses import dataclass

from riffwave.format.riff import PCM_FMT_CHUNK_SIZE, WAVE_FORMAT_PCM
from riffwave.format.wave import WaveFile, riff_size


class ValidationError(Exception):
    """Error during WAVE file validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


@dataclass
class ValidationResult:
    """Result of validation with optional warnings."""

    valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a failed validation result."""
        return cls(valid=False, errors=errors, warnings=warnings or [])


def validate_wave_file(wave_file: WaveFile) -> ValidationResult:
    """Validate the fmt and size fields of a WAVE file.

    Errors (the file cannot be encoded faithfully):
    - channel_count > 0
    - bits_per_sample is 8, 16 or 32
    - block_align == channel_count * bytes per sample
    - one sample plane per declared channel, all of equal length

    Warnings (the file decodes, but a field disagrees with the others):
    - audio_format is PCM
    - byte_rate == sample_rate * block_align
    - fmt chunk size is 16
    - data size is a whole number of frames
    - RIFF size matches the chunks

    Args:
        wave_file: The file to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    fmt = wave_file.fmt
    data = wave_file.data

    if fmt.channel_count == 0:
        errors.append("channel_count must be > 0")

    if not fmt.is_supported:
        errors.append(f"bits_per_sample must be one of 8, 16, 32, got {fmt.bits_per_sample}")

    expected_align = fmt.channel_count * fmt.sample_width
    if fmt.block_align != expected_align:
        errors.append(
            f"block_align is {fmt.block_align}, expected {expected_align} "
            f"({fmt.channel_count} channels * {fmt.sample_width} bytes)"
        )

    if data.channel_count != fmt.channel_count:
        errors.append(
            f"fmt chunk declares {fmt.channel_count} channels, "
            f"data holds {data.channel_count} sample planes"
        )

    lengths = [len(channel) for channel in data.channels]
    if len(set(lengths)) > 1:
        errors.append(f"Sample planes have unequal lengths: {lengths}")

    if fmt.audio_format != WAVE_FORMAT_PCM:
        warnings.append(f"audio_format is {fmt.audio_format}, expected PCM ({WAVE_FORMAT_PCM})")

    expected_rate = fmt.sample_rate * fmt.block_align
    if fmt.byte_rate != expected_rate:
        warnings.append(
            f"byte_rate is {fmt.byte_rate}, expected {expected_rate} "
            f"(sample_rate {fmt.sample_rate} * block_align {fmt.block_align})"
        )

    if fmt.chunk_size != PCM_FMT_CHUNK_SIZE:
        warnings.append(f"fmt chunk size is {fmt.chunk_size}, expected {PCM_FMT_CHUNK_SIZE}")

    if fmt.block_align and data.declared_byte_size % fmt.block_align:
        warnings.append(
            f"data size {data.declared_byte_size} is not a multiple of block_align "
            f"{fmt.block_align}; trailing bytes are ignored"
        )

    expected_size = riff_size(data.declared_byte_size)
    if wave_file.header.size != expected_size:
        warnings.append(f"RIFF size is {wave_file.header.size}, chunks imply {expected_size}")

    if errors:
        return ValidationResult.failure(errors, warnings)
    return ValidationResult.success(warnings)
