"""
readpe Data Models
==================

Pydantic models for the static field layout tables and for the decoded
report produced by :meth:`readpe.core.engine.ImageReader.decode`.

References:
    - Microsoft. (2024). PE Format. Microsoft Learn.
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from readpe.core.flags import FlagKind


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

class FieldLayout(BaseModel):
    """One row of a header's declarative layout table.

    Attributes:
        key: Stable identifier of the field within its header.
        offset: Byte offset relative to the header's base offset.
        width: Width of the unsigned little-endian value in bytes.
        description: Display label; surrounding whitespace is stripped.
            An empty label is accepted here and reported by validation.
        rules: Bitwise OR of :class:`readpe.core.fields.Rules` members.
        flag_kind: Flag table consulted by ``WITH_FLAG`` / ``WITH_FLAGS``.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    key: str = Field(..., min_length=1)
    offset: int = Field(..., ge=0)
    width: Literal[2, 4, 8]
    description: str = ""
    rules: int = Field(default=0, ge=0)
    flag_kind: Optional[FlagKind] = None


# ---------------------------------------------------------------------------
# Decoded report
# ---------------------------------------------------------------------------

class FieldRecord(BaseModel):
    """A decoded field value together with its rendering."""
    model_config = ConfigDict(frozen=True)

    key: str
    description: str
    offset: int
    absolute_offset: int
    width: int
    raw_value: int
    rendered: str = ""
    flag_kind: Optional[str] = None
    flags: list[str] = Field(default_factory=list)


class HeaderRecord(BaseModel):
    """All fields of one decoded header, in display order."""
    model_config = ConfigDict(frozen=True)

    name: str
    base_offset: int
    fields: list[FieldRecord] = Field(default_factory=list)

    def value_of(self, key: str) -> int:
        """Return the raw value of the field named *key*."""
        for record in self.fields:
            if record.key == key:
                return record.raw_value
        raise KeyError(key)


class ImageReport(BaseModel):
    """Every header decoded from one PE image."""

    file_path: str = ""
    file_size: int = 0
    dos_header: HeaderRecord
    coff_header: HeaderRecord
    sections: list[HeaderRecord] = Field(default_factory=list)
