"""
readpe CLI
==========

Click-based command-line interface.  Takes exactly one argument, the
path of the image to decode, and prints its headers to standard output.

Usage::

    readpe /path/to/image.exe
    python -m readpe /path/to/image.exe

Exit status is 0 on success and 1 when the argument is missing, the
file cannot be read, a header is truncated, or a header fails
validation.

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys

import click

from shared.config import ReadpeConfig
from shared.console import ReadpeConsole
from shared.logger import ReadpeLogger

from readpe.core.engine import ImageReader
from readpe.core.errors import HeaderValidationError, ReadpeError
from readpe.output.console import HeaderConsoleOutput

USAGE = "Usage:  readpe PEfile"

EXIT_INVALID = 1
EXIT_INTERRUPTED = 130


@click.command("readpe")
@click.argument("path", required=False)
def readpe_cli(path: str | None) -> None:
    """Print the DOS, COFF and section headers of a PE image.

    PATH is the Portable Executable file to decode.
    """
    console = ReadpeConsole()

    if path is None:
        console.line(USAGE)
        sys.exit(EXIT_INVALID)

    try:
        config = ReadpeConfig.load()
    except (OSError, ValueError) as exc:
        console.warning(f"Ignoring unreadable configuration: {exc}")
        config = ReadpeConfig()

    logger = ReadpeLogger.from_config("engine", config.global_settings)
    output = HeaderConsoleOutput(console=console, settings=config.readpe)

    try:
        reader = ImageReader.load(path, config=config, logger=logger)
        reader.run(output)
    except HeaderValidationError:
        # The diagnostic line has already been printed.
        sys.exit(EXIT_INVALID)
    except ReadpeError as exc:
        console.error(str(exc))
        sys.exit(EXIT_INVALID)
    except KeyboardInterrupt:
        console.warning("Interrupted by user.")
        sys.exit(EXIT_INTERRUPTED)


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``readpe`` console script."""
    readpe_cli()


if __name__ == "__main__":
    main()
