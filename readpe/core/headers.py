"""
PE Header Layouts
=================

Concrete :class:`FieldMap` types for the three structures readpe
decodes: the MS-DOS stub header, the COFF file header (with its ``PE``
signature) and the section table entries.

Offsets and widths follow the published PE/COFF specification.

References:
    - Microsoft. (2024). PE Format. Microsoft Learn.
      https://learn.microsoft.com/en-us/windows/win32/debug/pe-format
    - DOS header reference: http://www.sunshine2k.de/reversing/tuts/tut_pe.htm
"""

from __future__ import annotations

from typing import Optional

from readpe.core.field_map import FieldMap
from readpe.core.fields import Rules
from readpe.core.flags import FlagKind
from readpe.core.models import FieldLayout

# ---------------------------------------------------------------------------
# PE Constants
# ---------------------------------------------------------------------------

MZ_MAGIC: int = 0x5A4D            # "MZ"
PE_SIGNATURE: int = 0x00004550    # "PE\0\0"

COFF_HEADER_SIZE: int = 0x18      # signature + IMAGE_FILE_HEADER
SECTION_HEADER_SIZE: int = 0x28


def _row(
    key: str,
    offset: int,
    width: int,
    description: str,
    rules: Rules = Rules.NONE,
    flag_kind: Optional[FlagKind] = None,
) -> FieldLayout:
    return FieldLayout(
        key=key,
        offset=offset,
        width=width,
        description=description,
        rules=int(rules),
        flag_kind=flag_kind,
    )


# ---------------------------------------------------------------------------
# DOS header
# ---------------------------------------------------------------------------

class DOSHeader(FieldMap):
    """The 64-byte MS-DOS header at the start of every image."""

    LAYOUT = (
        _row("e_magic",    0x00, 2, "Magic number",                 Rules.AS_HEX | Rules.AS_CHAR),
        _row("e_cblp",     0x02, 2, "Bytes in last page",           Rules.AS_DEC),
        _row("e_cp",       0x04, 2, "Pages in file",                Rules.AS_DEC),
        _row("e_crlc",     0x06, 2, "Relocations",                  Rules.AS_DEC),
        _row("e_cparhdr",  0x08, 2, "Size of header in paragraphs", Rules.AS_DEC),
        _row("e_minalloc", 0x0A, 2, "Minimum extra paragraphs",     Rules.AS_DEC),
        _row("e_maxalloc", 0x0C, 2, "Maximum extra paragraphs",     Rules.AS_DEC),
        _row("e_ss",       0x0E, 2, "Initial (relative) SS value",  Rules.AS_DEC),
        _row("e_sp",       0x10, 2, "Initial SP value",             Rules.AS_HEX),
        _row("e_ip",       0x14, 2, "Initial IP value",             Rules.AS_HEX),
        _row("e_cs",       0x16, 2, "Initial (relative) CS value",  Rules.AS_HEX),
        _row("e_lfarlc",   0x18, 2, "Address of relocation table",  Rules.AS_HEX),
        _row("e_ovno",     0x1A, 2, "Overlay number",               Rules.AS_DEC),
        _row("e_oemid",    0x24, 2, "OEM identifier",               Rules.AS_DEC),
        _row("e_oeminfo",  0x26, 2, "OEM information",              Rules.AS_DEC),
        _row("e_lfanew",   0x3C, 4, "PE header offset",             Rules.AS_HEX),
    )

    name = "DOS"
    title = "DOS Header"

    def __init__(self) -> None:
        super().__init__(0)

    def magic(self) -> int:
        return self.value_of("e_magic")

    def check_magic(self, buffer: bytes) -> bool:
        """Read only ``e_magic`` and compare it with ``MZ``.

        Lets a short non-PE file fail the magic check instead of the
        64-byte length check.

        Raises:
            BufferTooShortError: If *buffer* holds fewer than two bytes.
        """
        self["e_magic"].set_value(buffer, self.base_offset)
        return self.magic() == MZ_MAGIC

    def pe_header_offset(self) -> int:
        """Buffer offset of the COFF header (``e_lfanew``)."""
        return self.value_of("e_lfanew")

    def _validate_structure(self) -> bool:
        return self.magic() == MZ_MAGIC


# ---------------------------------------------------------------------------
# COFF file header
# ---------------------------------------------------------------------------

class COFFHeader(FieldMap):
    """The ``PE\\0\\0`` signature followed by the COFF file header."""

    LAYOUT = (
        # No rules: read for validation, never printed.
        _row("signature",            0x00, 4, "Signature"),
        _row("machine",              0x04, 2, "Machine",                 Rules.AS_HEX | Rules.WITH_FLAG,  FlagKind.COFF_MACHINE),
        _row("number_of_sections",   0x06, 2, "Number of Sections",      Rules.AS_DEC),
        _row("time_date_stamp",      0x08, 4, "Date/time stamp",         Rules.AS_DEC | Rules.WITH_TIME),
        _row("pointer_to_symbols",   0x0C, 4, "Symbol Table offset",     Rules.AS_DEC),
        _row("number_of_symbols",    0x10, 4, "Number of symbols",       Rules.AS_DEC),
        _row("size_of_optional_hdr", 0x14, 2, "Size of optional header", Rules.AS_HEX),
        _row("characteristics",      0x16, 2, "Characteristics",         Rules.AS_HEX | Rules.WITH_FLAGS, FlagKind.COFF_CHARACTERISTICS),
    )

    name = "COFF"
    title = "COFF/File header"

    def __init__(self, base_offset: int) -> None:
        super().__init__(base_offset)

    def signature(self) -> int:
        return self.value_of("signature")

    def machine(self) -> int:
        return self.value_of("machine")

    def number_of_sections(self) -> int:
        return self.value_of("number_of_sections")

    def size_of_optional_header(self) -> int:
        return self.value_of("size_of_optional_hdr")

    def characteristics(self) -> int:
        return self.value_of("characteristics")

    def section_table_offset(self) -> int:
        """The section table starts right after the optional header."""
        return self.base_offset + COFF_HEADER_SIZE + self.size_of_optional_header()

    def _validate_structure(self) -> bool:
        return self.signature() == PE_SIGNATURE


# ---------------------------------------------------------------------------
# Section table entry
# ---------------------------------------------------------------------------

class SectionHeader(FieldMap):
    """One 40-byte entry of the section table."""

    LAYOUT = (
        _row("name",                  0x00, 8, "Name",                  Rules.AS_CHAR),
        _row("virtual_size",          0x08, 4, "Virtual Size",          Rules.AS_DEC | Rules.AS_HEX),
        _row("virtual_address",       0x0C, 4, "Virtual Address",       Rules.AS_HEX),
        _row("size_of_raw_data",      0x10, 4, "Size Of Raw Data",      Rules.AS_DEC | Rules.AS_HEX),
        _row("pointer_to_raw_data",   0x14, 4, "Pointer To Raw Data",   Rules.AS_HEX),
        _row("number_of_relocations", 0x20, 2, "Number Of Relocations", Rules.AS_HEX),
        _row("characteristics",       0x24, 4, "Characteristics",       Rules.AS_HEX | Rules.WITH_FLAGS, FlagKind.SECTION_CHARACTERISTICS),
    )

    name = "section"
    title = "    Section"
    label_prefix = "    "

    def __init__(self, index: int, table_offset: int) -> None:
        super().__init__(table_offset + index * SECTION_HEADER_SIZE)
        self._section_index = index

    @property
    def index(self) -> int:
        return self._section_index

    def section_name(self) -> str:
        """The 8-byte name with trailing NUL padding removed."""
        return self["name"].char_text().rstrip("\x00")

    def characteristics(self) -> int:
        return self.value_of("characteristics")
