"""
readpe Image Reader
===================

Drives the decode pipeline for one PE image held in memory:

    1. DOS header at offset 0; must carry the ``MZ`` magic.
    2. COFF header at ``e_lfanew``; must carry the ``PE\\0\\0`` signature.
    3. Section table right after the optional header, one entry per
       ``NumberOfSections``, each 40 bytes apart.

Every stage takes its base offset from the stage before it, so the
stages run strictly in order and the first failure ends the run.

References:
    - Microsoft. (2024). PE Format. Microsoft Learn.
    - Pietrek, M. (1994). Peering Inside the PE: A Tour of the Win32
      Portable Executable File Format. Microsoft Systems Journal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from shared.config import ReadpeConfig
from shared.logger import ReadpeLogger

from readpe.core.errors import (
    HeaderValidationError,
    ImageNotFoundError,
    ImageReadError,
)
from readpe.core.field_map import FieldMap
from readpe.core.headers import COFFHeader, DOSHeader, SectionHeader
from readpe.core.models import ImageReport
from readpe.output.console import HeaderConsoleOutput


class ImageReader:
    """One decode session over an immutable image buffer.

    Usage::

        reader = ImageReader.load("notepad.exe")
        reader.run()                 # print every header
        report = reader.decode()     # or collect them as models
    """

    def __init__(
        self,
        file_path: str,
        buffer: bytes,
        config: ReadpeConfig | None = None,
        logger: ReadpeLogger | None = None,
    ) -> None:
        self._file_path: str = file_path
        self._buffer: bytes = bytes(buffer)
        self._config: ReadpeConfig = config or ReadpeConfig()
        self._logger: ReadpeLogger = logger or ReadpeLogger.from_config(
            "engine", self._config.global_settings
        )

        self.dos_header: Optional[DOSHeader] = None
        self.coff_header: Optional[COFFHeader] = None
        self.sections: list[SectionHeader] = []

    @classmethod
    def load(
        cls,
        path: str | Path,
        config: ReadpeConfig | None = None,
        logger: ReadpeLogger | None = None,
    ) -> ImageReader:
        """Read the whole file at *path* into memory.

        Raises:
            ImageNotFoundError: If *path* does not exist.
            ImageReadError: If the file exists but cannot be read.
        """
        file_path = Path(path)
        try:
            data = file_path.read_bytes()
        except FileNotFoundError as exc:
            raise ImageNotFoundError(str(path)) from exc
        except OSError as exc:
            raise ImageReadError(
                str(path), f"Failed to read the file ({exc.strerror or exc})"
            ) from exc
        return cls(str(path), data, config=config, logger=logger)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def buffer(self) -> bytes:
        return self._buffer

    @property
    def file_size(self) -> int:
        return len(self._buffer)

    # ------------------------------------------------------------------ #
    #  Pipeline stages
    # ------------------------------------------------------------------ #

    def _check(self, header: FieldMap) -> bool:
        return header.validate(
            parallel=self._config.readpe.parallel_validation,
            max_workers=self._config.global_settings.max_workers,
        )

    def _read_dos_header(self) -> DOSHeader:
        with self._logger.operation("dos_header"):
            header = DOSHeader()
            valid = header.check_magic(self._buffer)
            if valid:
                header.parse(self._buffer)
                valid = self._check(header)
            if not valid:
                self._logger.warning(
                    "Bad DOS magic 0x%04x in %s", header.magic(), self._file_path
                )
                raise HeaderValidationError("DOS")
            self._logger.debug(
                "DOS header ok, e_lfanew=0x%x", header.pe_header_offset()
            )
        self.dos_header = header
        return header

    def _read_coff_header(self, dos_header: DOSHeader) -> COFFHeader:
        with self._logger.operation("coff_header"):
            header = COFFHeader(dos_header.pe_header_offset())
            header.parse(self._buffer)
            if not self._check(header):
                self._logger.warning(
                    "Bad PE signature 0x%08x at offset 0x%x",
                    header.signature(),
                    header.base_offset,
                )
                raise HeaderValidationError("COFF")
            self._logger.debug(
                "COFF header ok, %d section(s), table at 0x%x",
                header.number_of_sections(),
                header.section_table_offset(),
            )
        self.coff_header = header
        return header

    def _read_sections(self, coff_header: COFFHeader) -> list[SectionHeader]:
        table_offset = coff_header.section_table_offset()
        sections: list[SectionHeader] = []

        with self._logger.operation("section_table"):
            for index in range(coff_header.number_of_sections()):
                section = SectionHeader(index, table_offset)
                section.parse(self._buffer)
                if not self._check(section):
                    self._logger.warning("Section %d failed validation", index)
                    raise HeaderValidationError(
                        "section", "A section header is invalid"
                    )
                sections.append(section)
            self._logger.debug("Parsed %d section header(s)", len(sections))

        self.sections = sections
        return sections

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def decode(self) -> ImageReport:
        """Decode every header without printing.

        Raises:
            HeaderValidationError: If any header fails validation.
            BufferTooShortError: If a header lies past the end of the file.
        """
        with self._logger.timed(f"decode {self._file_path}"):
            dos_header = self._read_dos_header()
            coff_header = self._read_coff_header(dos_header)
            sections = self._read_sections(coff_header)

        return ImageReport(
            file_path=self._file_path,
            file_size=self.file_size,
            dos_header=dos_header.to_record(),
            coff_header=coff_header.to_record(),
            sections=[section.to_record() for section in sections],
        )

    def run(self, output: HeaderConsoleOutput | None = None) -> None:
        """Decode and print every header.

        Each header is printed once it has validated.  On a failed gate
        the matching diagnostic is printed and the error re-raised; a
        decode error propagates without a diagnostic line.
        """
        output = output or HeaderConsoleOutput(settings=self._config.readpe)

        with self._logger.timed(f"run {self._file_path}"):
            try:
                dos_header = self._read_dos_header()
                output.display_header(dos_header)

                coff_header = self._read_coff_header(dos_header)
                output.display_header(coff_header)

                output.display_sections_title()
                sections = self._read_sections(coff_header)
            except HeaderValidationError as exc:
                output.diagnostic(str(exc))
                raise

            for section in sections:
                output.display_section(section)
