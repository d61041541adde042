"""
Tests for readpe.core.flags.
"""

from __future__ import annotations

import pytest

from readpe.core.flags import FLAG_TABLE, UNKNOWN_FLAG, FlagKind, lookup_flag


def test_machine_lookup() -> None:
    assert lookup_flag(FlagKind.COFF_MACHINE, 0x8664) == "IMAGE_FILE_MACHINE_AMD64"
    assert lookup_flag(FlagKind.COFF_MACHINE, 0x014C) == "IMAGE_FILE_MACHINE_I386"
    assert lookup_flag(FlagKind.COFF_MACHINE, 0xAA64) == "IMAGE_FILE_MACHINE_ARM64"


def test_miss_returns_none() -> None:
    assert lookup_flag(FlagKind.COFF_MACHINE, 0xFFFF) is None
    assert lookup_flag(FlagKind.SECTION_CHARACTERISTICS, 0x02) is None


def test_same_mask_differs_by_kind() -> None:
    assert lookup_flag(FlagKind.COFF_CHARACTERISTICS, 0x20) == "IMAGE_FILE_LARGE_ADDRESS_AWARE"
    assert lookup_flag(FlagKind.SECTION_CHARACTERISTICS, 0x20) == "IMAGE_SCN_CNT_CODE"


def test_dll_bit() -> None:
    assert lookup_flag(FlagKind.COFF_CHARACTERISTICS, 0x2000) == "IMAGE_FILE_DLL"


def test_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        FLAG_TABLE[(FlagKind.COFF_MACHINE, 0x1)] = "NOPE"  # type: ignore[index]


@pytest.mark.parametrize(
    "kind", [FlagKind.COFF_CHARACTERISTICS, FlagKind.SECTION_CHARACTERISTICS]
)
def test_characteristics_entries_are_single_bits(kind: FlagKind) -> None:
    masks = [value for (entry_kind, value) in FLAG_TABLE if entry_kind is kind]
    assert masks
    for mask in masks:
        assert mask and mask & (mask - 1) == 0


def test_labels() -> None:
    assert FlagKind.COFF_MACHINE.label == "coff_machine"
    assert FlagKind.COFF_CHARACTERISTICS.label == "coff_characteristics"
    assert FlagKind.SECTION_CHARACTERISTICS.label == "section_characteristics"
    assert UNKNOWN_FLAG == "UNKNOWN FLAG MAPPING"
