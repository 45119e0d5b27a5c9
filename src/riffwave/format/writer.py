"""WAVE file writer."""

import logging
from pathlib import Path

from riffwave.format.wave import WaveFile, encode

logger = logging.getLogger(__name__)


def save_wave(path: Path | str, wave_file: WaveFile) -> int:
    """Encode a WaveFile and write it to ``path``.

    Parent directories are created as needed.

    Returns:
        The number of bytes written.

    Raises:
        ValueError: If the sample planes do not match the fmt chunk.
    """
    path = Path(path)
    buf = encode(wave_file)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(buf)

    logger.debug("Wrote %d bytes to %s", len(buf), path)
    return len(buf)
