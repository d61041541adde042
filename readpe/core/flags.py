"""
PE/COFF Flag Table
==================

Read-only registry mapping ``(FlagKind, value)`` pairs to the symbolic
constant names published in the PE/COFF specification.

Keys are typed by :class:`FlagKind` rather than free-form label strings,
so a field can only reference a table that exists.  Lookup misses are
not errors: callers render an ``UNKNOWN FLAG MAPPING`` placeholder.

References:
    - Microsoft. (2024). PE Format. Microsoft Learn.
      https://learn.microsoft.com/en-us/windows/win32/debug/pe-format
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Mapping, Optional


class FlagKind(str, enum.Enum):
    """Which header field a flag value belongs to."""
    COFF_MACHINE = "coff_machine"
    COFF_CHARACTERISTICS = "coff_characteristics"
    SECTION_CHARACTERISTICS = "section_characteristics"

    @property
    def label(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Machine types (COFF header, exact value)
# ---------------------------------------------------------------------------

_MACHINE_TYPES: dict[int, str] = {
    0x0000: "IMAGE_FILE_MACHINE_UNKNOWN",
    0x0184: "IMAGE_FILE_MACHINE_ALPHA",
    0x0284: "IMAGE_FILE_MACHINE_ALPHA64",
    0x01D3: "IMAGE_FILE_MACHINE_AM33",
    0x8664: "IMAGE_FILE_MACHINE_AMD64",
    0x01C0: "IMAGE_FILE_MACHINE_ARM",
    0xAA64: "IMAGE_FILE_MACHINE_ARM64",
    0x01C4: "IMAGE_FILE_MACHINE_ARMNT",
    0x0EBC: "IMAGE_FILE_MACHINE_EBC",
    0x014C: "IMAGE_FILE_MACHINE_I386",
    0x0200: "IMAGE_FILE_MACHINE_IA64",
    0x6232: "IMAGE_FILE_MACHINE_LOONGARCH32",
    0x6264: "IMAGE_FILE_MACHINE_LOONGARCH64",
    0x9041: "IMAGE_FILE_MACHINE_M32R",
    0x0266: "IMAGE_FILE_MACHINE_MIPS16",
    0x0366: "IMAGE_FILE_MACHINE_MIPSFPU",
    0x0466: "IMAGE_FILE_MACHINE_MIPSFPU16",
    0x01F0: "IMAGE_FILE_MACHINE_POWERPC",
    0x01F1: "IMAGE_FILE_MACHINE_POWERPCFP",
    0x0166: "IMAGE_FILE_MACHINE_R4000",
    0x5032: "IMAGE_FILE_MACHINE_RISCV32",
    0x5064: "IMAGE_FILE_MACHINE_RISCV64",
    0x5128: "IMAGE_FILE_MACHINE_RISCV128",
    0x01A2: "IMAGE_FILE_MACHINE_SH3",
    0x01A3: "IMAGE_FILE_MACHINE_SH3DSP",
    0x01A6: "IMAGE_FILE_MACHINE_SH4",
    0x01A8: "IMAGE_FILE_MACHINE_SH5",
    0x01C2: "IMAGE_FILE_MACHINE_THUMB",
    0x0169: "IMAGE_FILE_MACHINE_WCEMIPSV2",
}

# ---------------------------------------------------------------------------
# COFF characteristics (single bits)
# ---------------------------------------------------------------------------

_COFF_CHARACTERISTICS: dict[int, str] = {
    0x0001: "IMAGE_FILE_RELOCS_STRIPPED",
    0x0002: "IMAGE_FILE_EXECUTABLE_IMAGE",
    0x0004: "IMAGE_FILE_LINE_NUMS_STRIPPED",
    0x0008: "IMAGE_FILE_LOCAL_SYMS_STRIPPED",
    0x0010: "IMAGE_FILE_AGGRESSIVE_WS_TRIM",
    0x0020: "IMAGE_FILE_LARGE_ADDRESS_AWARE",
    0x0080: "IMAGE_FILE_BYTES_REVERSED_LO",
    0x0100: "IMAGE_FILE_32BIT_MACHINE",
    0x0200: "IMAGE_FILE_DEBUG_STRIPPED",
    0x0400: "IMAGE_FILE_REMOVABLE_RUN_FROM_SWAP",
    0x0800: "IMAGE_FILE_NET_RUN_FROM_SWAP",
    0x1000: "IMAGE_FILE_SYSTEM",
    0x2000: "IMAGE_FILE_DLL",
    0x4000: "IMAGE_FILE_UP_SYSTEM_ONLY",
    0x8000: "IMAGE_FILE_BYTES_REVERSED_HI",
}

# ---------------------------------------------------------------------------
# Section characteristics (single bits)
#
# IMAGE_SCN_ALIGN_* occupy bits 20-23 as a 4-bit number, not as flags,
# so they have no entry here.
# ---------------------------------------------------------------------------

_SECTION_CHARACTERISTICS: dict[int, str] = {
    0x00000008: "IMAGE_SCN_TYPE_NO_PAD",
    0x00000020: "IMAGE_SCN_CNT_CODE",
    0x00000040: "IMAGE_SCN_CNT_INITIALIZED_DATA",
    0x00000080: "IMAGE_SCN_CNT_UNINITIALIZED_DATA",
    0x00000100: "IMAGE_SCN_LNK_OTHER",
    0x00000200: "IMAGE_SCN_LNK_INFO",
    0x00000800: "IMAGE_SCN_LNK_REMOVE",
    0x00001000: "IMAGE_SCN_LNK_COMDAT",
    0x00008000: "IMAGE_SCN_GPREL",
    0x00020000: "IMAGE_SCN_MEM_PURGEABLE",
    0x00040000: "IMAGE_SCN_MEM_LOCKED",
    0x00080000: "IMAGE_SCN_MEM_PRELOAD",
    0x01000000: "IMAGE_SCN_LNK_NRELOC_OVFL",
    0x02000000: "IMAGE_SCN_MEM_DISCARDABLE",
    0x04000000: "IMAGE_SCN_MEM_NOT_CACHED",
    0x08000000: "IMAGE_SCN_MEM_NOT_PAGED",
    0x10000000: "IMAGE_SCN_MEM_SHARED",
    0x20000000: "IMAGE_SCN_MEM_EXECUTE",
    0x40000000: "IMAGE_SCN_MEM_READ",
    0x80000000: "IMAGE_SCN_MEM_WRITE",
}


def _seed() -> Mapping[tuple[FlagKind, int], str]:
    table: dict[tuple[FlagKind, int], str] = {}
    for kind, entries in (
        (FlagKind.COFF_MACHINE, _MACHINE_TYPES),
        (FlagKind.COFF_CHARACTERISTICS, _COFF_CHARACTERISTICS),
        (FlagKind.SECTION_CHARACTERISTICS, _SECTION_CHARACTERISTICS),
    ):
        for value, name in entries.items():
            table[(kind, value)] = name
    return MappingProxyType(table)


FLAG_TABLE: Mapping[tuple[FlagKind, int], str] = _seed()

UNKNOWN_FLAG = "UNKNOWN FLAG MAPPING"


def lookup_flag(kind: FlagKind, value: int) -> Optional[str]:
    """Return the symbolic name for *value* in *kind*'s table, or ``None``."""
    return FLAG_TABLE.get((kind, value))
