from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from shared.logger import ReadpeLogger

from tests import SectionEntry, build_image


@pytest.fixture
def quiet_logger() -> ReadpeLogger:
    return ReadpeLogger("test", log_level="CRITICAL", console_output=False)


@pytest.fixture
def image_file(tmp_path: Path) -> Callable[..., Path]:
    """Write a synthetic image to disk and return its path."""

    def _write(data: bytes | None = None, name: str = "image.exe") -> Path:
        path = tmp_path / name
        path.write_bytes(build_image() if data is None else data)
        return path

    return _write


@pytest.fixture
def two_section_image() -> bytes:
    return build_image(
        [
            SectionEntry(),
            SectionEntry(
                name=b".data",
                virtual_size=0x300,
                virtual_address=0x2000,
                size_of_raw_data=0x400,
                pointer_to_raw_data=0x600,
                characteristics=0xC0000040,
            ),
        ],
        size_of_optional_header=0xF0,
        time_date_stamp=1_700_000_000,
    )
