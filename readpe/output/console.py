"""
readpe Console Output
=====================

Writes decoded header blocks and validation diagnostics to standard
output through :class:`shared.console.ReadpeConsole`.
"""

from __future__ import annotations

from shared.config import ReadpeSettings
from shared.console import ReadpeConsole

from readpe.core.field_map import FieldMap


class HeaderConsoleOutput:
    """Plain-text renderer for header blocks.

    Usage::

        output = HeaderConsoleOutput()
        output.display_header(dos_header)
    """

    def __init__(
        self,
        console: ReadpeConsole | None = None,
        settings: ReadpeSettings | None = None,
    ) -> None:
        self._console: ReadpeConsole = console or ReadpeConsole()
        self._settings: ReadpeSettings = settings or ReadpeSettings()

    @property
    def console(self) -> ReadpeConsole:
        return self._console

    def display_header(self, header: FieldMap) -> None:
        header.print(
            self._console,
            label_width=self._settings.label_width,
            flag_indent=self._settings.flag_indent,
        )

    def display_sections_title(self) -> None:
        self._console.line("Sections")

    def display_section(self, section: FieldMap) -> None:
        self.display_header(section)
        self._console.blank()

    def diagnostic(self, message: str) -> None:
        """Validation failures are part of the stdout contract."""
        self._console.line(message)
