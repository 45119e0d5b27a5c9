import json
import logging
import sys
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from riffwave.cli.validators import (
    validate_log_level,
    validate_non_negative_integer,
    validate_positive_integer,
)
from riffwave.format import (
    RiffError,
    ValidationError,
    WaveFile,
    load_wave,
    save_wave,
    validate_wave_file,
)
from riffwave.format.riff import fourcc

app = App(name="riffwave", help="A utility for inspecting and rewriting RIFF/WAVE files")
console = Console()

LogLevel = Annotated[str, Parameter(validator=validate_log_level)]


def configure_logging(level: str) -> None:
    """Route library log records through rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(escape(message), style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(escape(message), style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(escape(message), style="bold yellow")


def print_json(data: object) -> None:
    console.print(
        json.dumps(data, indent=2),
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )


def describe(wave_file: WaveFile) -> dict[str, dict[str, object]]:
    """Summarize the chunks of a WAVE file as plain values."""
    header = wave_file.header
    fmt = wave_file.fmt
    data = wave_file.data
    return {
        "header": {
            "tag": fourcc(header.tag),
            "size": header.size,
            "format": fourcc(header.format),
        },
        "fmt": {
            "tag": fourcc(fmt.tag),
            "chunk_size": fmt.chunk_size,
            "audio_format": fmt.audio_format,
            "channel_count": fmt.channel_count,
            "sample_rate": fmt.sample_rate,
            "byte_rate": fmt.byte_rate,
            "block_align": fmt.block_align,
            "bits_per_sample": fmt.bits_per_sample,
        },
        "data": {
            "tag": fourcc(data.tag),
            "declared_byte_size": data.declared_byte_size,
            "sample_count": data.sample_count,
            "duration_seconds": wave_file.duration_seconds,
        },
    }


def _load(file: Path) -> WaveFile | None:
    if not file.exists():
        print_error(f"Error: File not found: {file}")
        return None

    try:
        return load_wave(file)
    except (RiffError, ValidationError) as e:
        print_error(f"Error: {e}")
    except OSError as e:
        print_error(f"Error reading file: {e}")
    return None


@app.command
def info(
    file: Path,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
    log_level: LogLevel = "WARNING",
) -> int:
    """
    Show the header, fmt and data chunks of a WAVE file.

    Parameters
    ----------
    file: Path
        The path to the .wav file to inspect
    output_json: bool
        Output results as JSON (default: False)
    log_level: str
        Logging level for codec diagnostics (default: WARNING)
    """
    configure_logging(log_level)

    wave_file = _load(file)
    if wave_file is None:
        return 1

    summary = describe(wave_file)
    if output_json:
        print_json(summary)
        return 0

    console.print(f"[bold]File: {escape(str(file))}[/bold]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Chunk", justify="left")
    table.add_column("Field", justify="left")
    table.add_column("Value", justify="right")

    for chunk, fields in summary.items():
        for name, value in fields.items():
            text = f"{value:.3f}" if isinstance(value, float) else str(value)
            table.add_row(chunk, name, repr(text) if name == "tag" else text)

    console.print(table)
    return 0


@app.command
def samples(
    file: Path,
    channel: Annotated[int | None, Parameter(validator=validate_non_negative_integer)] = None,
    start: Annotated[int, Parameter(validator=validate_non_negative_integer)] = 0,
    count: Annotated[int, Parameter(validator=validate_positive_integer)] = 16,
    log_level: LogLevel = "WARNING",
) -> int:
    """
    Print decoded sample values frame by frame.

    Parameters
    ----------
    file: Path
        The path to the .wav file to read
    channel: int | None
        Only print this channel (default: all channels)
    start: int
        Index of the first frame to print (default: 0)
    count: int
        Number of frames to print (default: 16)
    log_level: str
        Logging level for codec diagnostics (default: WARNING)
    """
    configure_logging(log_level)

    wave_file = _load(file)
    if wave_file is None:
        return 1

    channel_count = wave_file.data.channel_count
    if channel is not None and channel >= channel_count:
        print_error(f"Error: Channel {channel} out of range, file has {channel_count} channels")
        return 1

    selected = [channel] if channel is not None else list(range(channel_count))
    stop = min(start + count, wave_file.sample_count)

    if stop <= start:
        print_warning(f"No frames in range, file has {wave_file.sample_count} samples per channel")
        return 0

    table = Table(show_header=True, header_style="bold")
    table.add_column("Frame", justify="right")
    for ch in selected:
        table.add_column(f"ch{ch}", justify="right")

    for frame in range(start, stop):
        table.add_row(str(frame), *(str(int(wave_file.channels[ch][frame])) for ch in selected))

    console.print(table)
    console.print(f"Frames {start}-{stop - 1} of {wave_file.sample_count}")
    return 0


@app.command
def copy(
    source: Path,
    dest: Path,
    log_level: LogLevel = "WARNING",
) -> int:
    """
    Decode a WAVE file and write it back out.

    The size fields of the copy are recomputed from the decoded samples.

    Parameters
    ----------
    source: Path
        The .wav file to read
    dest: Path
        Output path for the copy
    log_level: str
        Logging level for codec diagnostics (default: WARNING)
    """
    configure_logging(log_level)

    wave_file = _load(source)
    if wave_file is None:
        return 1

    try:
        written = save_wave(dest, wave_file)
    except (ValueError, OSError) as e:
        print_error(f"Error writing output: {e}")
        return 1

    print_success(f"Copied {source} -> {dest} ({written} bytes)")
    return 0


@app.command
def validate(
    file: Path,
    strict: bool = False,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
    log_level: LogLevel = "WARNING",
) -> int:
    """
    Validate a WAVE file.

    Checks the chunk structure, then the consistency of the fmt fields and
    declared sizes.

    Parameters
    ----------
    file: Path
        The path to the .wav file to validate
    strict: bool
        Treat warnings as errors (default: False)
    output_json: bool
        Output results as JSON (default: False)
    log_level: str
        Logging level for codec diagnostics (default: WARNING)
    """
    configure_logging(log_level)

    results: dict[str, object] = {
        "file": str(file),
        "valid": True,
        "errors": [],
        "warnings": [],
    }

    def fail(message: str) -> int:
        results["valid"] = False
        results["errors"] = [message]
        if output_json:
            print_json(results)
        else:
            print_error(f"[FAIL] {message}")
        return 1

    if not file.exists():
        return fail(f"File not found: {file}")

    try:
        wave_file = load_wave(file)
    except (RiffError, ValidationError) as e:
        return fail(f"RIFF error: {e}")
    except OSError as e:
        return fail(f"Read error: {e}")

    result = validate_wave_file(wave_file)
    errors = list(result.errors)
    warnings = list(result.warnings)

    # In strict mode, warnings become errors
    if strict and warnings:
        errors.extend(f"Strict mode: {w}" for w in warnings)

    results["valid"] = not errors
    results["errors"] = errors
    results["warnings"] = warnings

    if output_json:
        print_json(results)
        return 0 if results["valid"] else 1

    if results["valid"]:
        print_success(f"[PASS] {file}")
        console.print(f"  Channels: {wave_file.fmt.channel_count}")
        console.print(f"  Sample rate: {wave_file.fmt.sample_rate} Hz")
        console.print(f"  Bit depth: {wave_file.fmt.bits_per_sample}-bit")
        console.print(f"  Samples: {wave_file.sample_count}")

        if warnings:
            console.print("")
            for warning in warnings:
                print_warning(f"  [WARN] {warning}")
    else:
        print_error(f"[FAIL] {file}")
        for error in errors:
            console.print(f"  {escape(error)}")

    return 0 if results["valid"] else 1


def main() -> None:
    sys.exit(app())


if __name__ == "__main__":
    main()
