"""WAVE file reader.

This module loads WAVE files from disk into ``WaveFile`` values.
"""

import logging
from pathlib import Path

from riffwave.format.riff import RiffError
from riffwave.format.validation import ValidationError, validate_wave_file
from riffwave.format.wave import WaveFile, decode

logger = logging.getLogger(__name__)

# Files are decoded fully into memory, so refuse anything larger than this
MAX_FILE_SIZE_BYTES = 100 * 1024 * 1024


def load_wave(
    path: Path | str,
    *,
    validate: bool = False,
    max_size: int | None = MAX_FILE_SIZE_BYTES,
) -> WaveFile:
    """Load a WAVE file.

    Args:
        path: Path to the WAV file.
        validate: Whether to validate the decoded fields.
        max_size: Largest file size accepted in bytes, or None for no limit.

    Returns:
        The decoded WaveFile.

    Raises:
        RiffError: If the file is missing or is not a supported WAVE file.
        ValidationError: If the file exceeds ``max_size``, or if validation
            fails and validate=True.
    """
    path = Path(path)

    try:
        file_size = path.stat().st_size
    except FileNotFoundError as e:
        raise RiffError(f"File not found: {path}") from e

    if max_size is not None and file_size > max_size:
        raise ValidationError(
            f"File size ({file_size / (1024 * 1024):.1f} MB) exceeds maximum "
            f"allowed size of {max_size / (1024 * 1024):.1f} MB"
        )

    with open(path, "rb") as f:
        wave_file = decode(f)

    logger.debug(
        "Loaded %s: %d channels x %d samples", path, wave_file.fmt.channel_count, wave_file.sample_count
    )

    if validate:
        result = validate_wave_file(wave_file)
        if not result.valid:
            raise ValidationError(f"WAVE validation failed: {result.errors}")

    return wave_file
