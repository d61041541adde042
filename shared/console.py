"""
readpe Console Interface
========================

Rich-powered console abstraction.  Header dumps are written as raw bytes
to standard output so that column alignment survives unchanged; status
messages (errors, warnings, notices) are styled and go to standard error.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

_READPE_THEME = Theme(
    {
        "readpe.warning": "bold yellow",
        "readpe.error": "bold red",
    }
)


class ReadpeConsole:
    """Console used by every readpe component.

    Usage::

        con = ReadpeConsole()
        con.line("DOS Header")
        con.error("Failed to open the file: missing.exe")
    """

    def __init__(self, *, quiet: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
        """
        self._console = Console(
            theme=_READPE_THEME,
            quiet=quiet,
            highlight=False,
        )
        self._status = Console(
            theme=_READPE_THEME,
            quiet=quiet,
            stderr=True,
            highlight=False,
        )

    # ------------------------------------------------------------------ #
    #  Raw output (stdout)
    # ------------------------------------------------------------------ #

    def line(self, text: str = "") -> None:
        """Write *text* verbatim followed by a newline.

        The text bypasses Rich rendering, which would strip control codes.
        Each character is written as one Latin-1 byte when the stream
        exposes a binary buffer, so raw header bytes reach stdout as-is.
        """
        if self._console.quiet:
            return
        stream = self._console.file
        data = f"{text}\n"
        raw = getattr(stream, "buffer", None)
        if raw is None:
            stream.write(data)
            return
        stream.flush()
        raw.write(data.encode("latin-1", errors="replace"))
        raw.flush()

    def lines(self, texts: Iterable[str]) -> None:
        for text in texts:
            self.line(text)

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self.line()

    # ------------------------------------------------------------------ #
    #  Status messages (stderr)
    # ------------------------------------------------------------------ #

    def warning(self, message: str) -> None:
        self._status.print(
            f"[readpe.warning]WARNING:[/readpe.warning] {escape(message)}",
            soft_wrap=True,
        )

    def error(self, message: str) -> None:
        self._status.print(
            f"[readpe.error]ERROR:[/readpe.error] {escape(message)}",
            soft_wrap=True,
        )


