"""
Tests for readpe.core.engine.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from shared.config import ReadpeConfig
from shared.console import ReadpeConsole

from readpe.core.engine import ImageReader
from readpe.core.errors import (
    BufferTooShortError,
    HeaderValidationError,
    ImageIOError,
    ImageNotFoundError,
    ImageReadError,
)
from readpe.core.headers import SECTION_HEADER_SIZE
from readpe.output.console import HeaderConsoleOutput

from tests import SectionEntry, build_image, row


def _reader(data: bytes, logger, config: ReadpeConfig | None = None) -> ImageReader:
    return ImageReader("image.exe", data, config=config, logger=logger)


def _output() -> HeaderConsoleOutput:
    return HeaderConsoleOutput(console=ReadpeConsole())


# ---load tests----------------------------------------------------------------


class TestLoad:

    def test_reads_whole_file(self, image_file, quiet_logger) -> None:
        data = build_image([SectionEntry()])
        path = image_file(data)
        reader = ImageReader.load(path, logger=quiet_logger)
        assert reader.buffer == data
        assert reader.file_size == len(data)
        assert reader.file_path == str(path)

    def test_missing_file(self, tmp_path: Path, quiet_logger) -> None:
        with pytest.raises(ImageNotFoundError) as excinfo:
            ImageReader.load(tmp_path / "missing.exe", logger=quiet_logger)
        assert isinstance(excinfo.value, ImageIOError)
        assert "missing.exe" in str(excinfo.value)

    def test_directory_is_read_failure(self, tmp_path: Path, quiet_logger) -> None:
        with pytest.raises(ImageReadError):
            ImageReader.load(tmp_path, logger=quiet_logger)


# ---decode tests--------------------------------------------------------------


class TestDecode:

    def test_report(self, two_section_image: bytes, quiet_logger) -> None:
        reader = _reader(two_section_image, quiet_logger)
        report = reader.decode()
        assert report.file_size == len(two_section_image)
        assert report.dos_header.value_of("e_lfanew") == 0x40
        assert report.coff_header.base_offset == 0x40
        assert report.coff_header.value_of("number_of_sections") == 2
        assert len(report.sections) == 2
        characteristics = report.coff_header.fields[-1]
        assert characteristics.flag_kind == "coff_characteristics"
        assert report.dos_header.fields[0].flag_kind is None

    def test_section_offsets(self, two_section_image: bytes, quiet_logger) -> None:
        reader = _reader(two_section_image, quiet_logger)
        report = reader.decode()
        table = 0x40 + 0x18 + 0xF0
        assert [s.base_offset for s in report.sections] == [
            table + i * SECTION_HEADER_SIZE for i in range(2)
        ]
        assert [s.base_offset for s in reader.sections] == [
            table + i * SECTION_HEADER_SIZE for i in range(2)
        ]

    @pytest.mark.parametrize("count", [0, 1, 3, 6])
    def test_section_count(self, count: int, quiet_logger) -> None:
        data = build_image([SectionEntry()] * count)
        assert len(_reader(data, quiet_logger).decode().sections) == count

    def test_decode_is_deterministic(self, two_section_image: bytes, quiet_logger) -> None:
        first = _reader(two_section_image, quiet_logger).decode()
        second = _reader(two_section_image, quiet_logger).decode()
        assert first == second

    def test_parallel_validation(self, two_section_image: bytes, quiet_logger) -> None:
        config = ReadpeConfig()
        config.readpe.parallel_validation = True
        report = _reader(two_section_image, quiet_logger, config).decode()
        assert len(report.sections) == 2

    def test_bad_dos_magic(self, quiet_logger) -> None:
        reader = _reader(build_image(magic=b"ZM"), quiet_logger)
        with pytest.raises(HeaderValidationError) as excinfo:
            reader.decode()
        assert excinfo.value.header == "DOS"
        assert reader.coff_header is None

    def test_bad_pe_signature(self, quiet_logger) -> None:
        with pytest.raises(HeaderValidationError) as excinfo:
            _reader(build_image(signature=b"PX\x00\x00"), quiet_logger).decode()
        assert excinfo.value.header == "COFF"

    def test_truncated_section_table(self, quiet_logger) -> None:
        data = build_image([SectionEntry(), SectionEntry()])
        with pytest.raises(BufferTooShortError):
            _reader(data[:-10], quiet_logger).decode()

    def test_section_count_past_end(self, quiet_logger) -> None:
        data = build_image([SectionEntry()], number_of_sections=40)
        with pytest.raises(BufferTooShortError):
            _reader(data, quiet_logger).decode()


# ---run tests (end to end output)---------------------------------------------


class TestRun:

    def test_no_sections(self, quiet_logger, capsys: pytest.CaptureFixture[str]) -> None:
        data = build_image()
        assert len(data) == 64 + 24
        _reader(data, quiet_logger).run(_output())
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "DOS Header"
        assert lines[17] == "COFF/File header"
        assert lines[-1] == "Sections"
        assert "    Section" not in lines

    def test_sections_printed_in_order(
        self, two_section_image: bytes, quiet_logger, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _reader(two_section_image, quiet_logger).run(_output())
        out = capsys.readouterr().out
        lines = out.splitlines()
        assert lines.count("    Section") == 2
        assert out.index(".text") < out.index(".data")
        assert lines[-1] == ""
        assert "Tue Nov 14 22:13:20 2023 UTC" in out

    def test_bad_dos_header(self, quiet_logger, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(HeaderValidationError):
            _reader(build_image(magic=b"XX"), quiet_logger).run(_output())
        assert capsys.readouterr().out == "The DOS header is invalid\n"

    def test_short_non_pe_file(self, quiet_logger, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(HeaderValidationError) as excinfo:
            _reader(b"hello world\n", quiet_logger).run(_output())
        assert excinfo.value.header == "DOS"
        assert capsys.readouterr().out == "The DOS header is invalid\n"

    def test_one_byte_file(self, quiet_logger, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(BufferTooShortError):
            _reader(b"M", quiet_logger).run(_output())
        assert capsys.readouterr().out == ""

    def test_section_name_bytes_written_raw(
        self, quiet_logger, capsysbinary: pytest.CaptureFixture[bytes]
    ) -> None:
        data = build_image([SectionEntry(name=b"a\x07b\rc\x1bd"), SectionEntry(name=b".d\xe9v")])
        _reader(data, quiet_logger).run(_output())
        out = capsysbinary.readouterr().out
        assert row("Name", "a\x07b\rc\x1bd\x00", prefix="    ").encode("latin-1") + b"\n" in out
        assert row("Name", ".d\xe9v\x00\x00\x00\x00", prefix="    ").encode("latin-1") + b"\n" in out
        assert b"\xc3\xa9" not in out

    def test_bad_coff_header(self, quiet_logger, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(HeaderValidationError):
            _reader(build_image(signature=b"PE\x00\x07"), quiet_logger).run(_output())
        out = capsys.readouterr().out
        assert out.startswith("DOS Header\n")
        assert out.endswith("The COFF header is invalid\n")
        assert "COFF/File header" not in out
        assert "Sections" not in out

    def test_truncated_section_table(
        self, quiet_logger, capsys: pytest.CaptureFixture[str]
    ) -> None:
        data = build_image([SectionEntry(), SectionEntry()])
        with pytest.raises(BufferTooShortError):
            _reader(data[:-1], quiet_logger).run(_output())
        out = capsys.readouterr().out
        assert "COFF/File header" in out
        assert "    Section" not in out
        assert ".text" not in out

    def test_run_twice_same_output(
        self, two_section_image: bytes, quiet_logger, capsys: pytest.CaptureFixture[str]
    ) -> None:
        reader = _reader(two_section_image, quiet_logger)
        reader.run(_output())
        first = capsys.readouterr().out
        reader.run(_output())
        assert capsys.readouterr().out == first
