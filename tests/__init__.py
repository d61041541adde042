"""
Test helpers: synthetic PE image construction.
"""

from __future__ import annotations

import struct
from typing import NamedTuple, Optional, Sequence

DOS_STUB_SIZE = 0x40


class SectionEntry(NamedTuple):
    name: bytes = b".text"
    virtual_size: int = 0x1000
    virtual_address: int = 0x1000
    size_of_raw_data: int = 0x200
    pointer_to_raw_data: int = 0x400
    number_of_relocations: int = 0
    characteristics: int = 0x60000020


def build_image(
    sections: Sequence[SectionEntry] = (),
    *,
    magic: bytes = b"MZ",
    e_lfanew: int = DOS_STUB_SIZE,
    signature: bytes = b"PE\x00\x00",
    machine: int = 0x8664,
    number_of_sections: Optional[int] = None,
    time_date_stamp: int = 0,
    size_of_optional_header: int = 0,
    characteristics: int = 0x0022,
) -> bytes:
    """Return a minimal PE image: DOS stub, COFF header, section table.

    The optional header area, when non-empty, is zero filled.
    """
    if number_of_sections is None:
        number_of_sections = len(sections)

    table_offset = e_lfanew + 0x18 + size_of_optional_header
    data = bytearray(table_offset + 0x28 * len(sections))

    data[0:2] = magic
    struct.pack_into("<HHHH", data, 0x02, 0x90, 3, 0, 4)
    struct.pack_into("<HH", data, 0x0A, 0, 0xFFFF)
    struct.pack_into("<H", data, 0x10, 0xB8)
    struct.pack_into("<H", data, 0x18, 0x40)
    struct.pack_into("<I", data, 0x3C, e_lfanew)

    data[e_lfanew:e_lfanew + 4] = signature
    struct.pack_into(
        "<HHIIIHH",
        data,
        e_lfanew + 4,
        machine,
        number_of_sections,
        time_date_stamp,
        0,
        0,
        size_of_optional_header,
        characteristics,
    )

    for index, entry in enumerate(sections):
        offset = table_offset + index * 0x28
        struct.pack_into(
            "<8sIIII",
            data,
            offset,
            entry.name,
            entry.virtual_size,
            entry.virtual_address,
            entry.size_of_raw_data,
            entry.pointer_to_raw_data,
        )
        struct.pack_into("<H", data, offset + 0x20, entry.number_of_relocations)
        struct.pack_into("<I", data, offset + 0x24, entry.characteristics)

    return bytes(data)


def row(label: str, value: str, prefix: str = "") -> str:
    """One printed field line."""
    return "    " + f"{prefix}{label}:".ljust(34) + value
