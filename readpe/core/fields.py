"""
Typed Header Fields
===================

A :class:`Field` is one unsigned little-endian scalar at a fixed offset
inside a header.  The set of widths is closed: :class:`UInt16Field`,
:class:`UInt32Field` and :class:`UInt64Field` are the only concrete
types, selected by :meth:`Field.from_layout`.

Each field carries a :class:`Rules` bitset that controls how its value
is rendered for display.
"""

from __future__ import annotations

import enum
import struct
from datetime import datetime, timezone
from typing import ClassVar, Optional

from readpe.core.errors import BufferTooShortError
from readpe.core.flags import UNKNOWN_FLAG, FlagKind, lookup_flag
from readpe.core.models import FieldLayout, FieldRecord


class Rules(enum.IntFlag):
    """Rendering rules for a field value.

    Attributes:
        AS_DEC:     Decimal rendering.
        AS_HEX:     ``0x``-prefixed hexadecimal (zero renders as ``0``).
        AS_CHAR:    The raw bytes as characters, little-endian order.
        WITH_TIME:  Append the value as a UTC calendar time.
        WITH_FLAG:  Append the flag-table name matching the exact value.
        WITH_FLAGS: List the flag-table name of every set bit.
    """
    NONE = 0x00
    AS_DEC = 0x01
    AS_HEX = 0x02
    AS_CHAR = 0x04
    WITH_TIME = 0x08
    WITH_FLAG = 0x10
    WITH_FLAGS = 0x20


_TIME_FORMAT = "%c %Z"


class Field:
    """Base class for the fixed-width field types.

    Subclasses only set :attr:`width` and :attr:`struct_format`.
    """

    __slots__ = ("key", "offset", "description", "rules", "flag_kind", "raw_value")

    width: ClassVar[int] = 0
    struct_format: ClassVar[str] = ""

    def __init__(
        self,
        offset: int,
        description: str,
        rules: Rules | int = Rules.NONE,
        flag_kind: Optional[FlagKind] = None,
        *,
        key: str = "",
    ) -> None:
        self.key: str = key
        self.offset: int = offset
        self.description: str = description.strip()
        self.rules: Rules = Rules(rules)
        self.flag_kind: Optional[FlagKind] = flag_kind
        self.raw_value: int = 0

    @staticmethod
    def from_layout(layout: FieldLayout) -> Field:
        """Instantiate the field type matching ``layout.width``."""
        field_type = _FIELD_TYPES[layout.width]
        return field_type(
            layout.offset,
            layout.description,
            layout.rules,
            layout.flag_kind,
            key=layout.key,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(key={self.key!r}, offset=0x{self.offset:x}, "
            f"raw_value=0x{self.raw_value:x})"
        )

    # ------------------------------------------------------------------ #
    #  Parsing
    # ------------------------------------------------------------------ #

    def set_value(self, buffer: bytes, base_offset: int) -> None:
        """Read this field out of *buffer* at ``base_offset + offset``.

        Raises:
            BufferTooShortError: If the read extends past the buffer end.
        """
        start = base_offset + self.offset
        if start + self.width > len(buffer):
            raise BufferTooShortError(self.key, start, self.width, len(buffer))
        (self.raw_value,) = struct.unpack_from(self.struct_format, buffer, start)

    @property
    def raw_bytes(self) -> bytes:
        return self.raw_value.to_bytes(self.width, "little")

    # ------------------------------------------------------------------ #
    #  Rendering
    # ------------------------------------------------------------------ #

    def hex_text(self) -> str:
        if self.raw_value == 0:
            return "0"
        return f"0x{self.raw_value:x}"

    def char_text(self) -> str:
        # Latin-1 maps every byte to exactly one character.
        return self.raw_bytes.decode("latin-1")

    def time_text(self) -> str:
        """The value as a UTC timestamp, or ``""`` if it is out of range."""
        try:
            stamp = datetime.fromtimestamp(self.raw_value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return ""
        return stamp.strftime(_TIME_FORMAT)

    def flag_text(self) -> str:
        name = None
        if self.flag_kind is not None:
            name = lookup_flag(self.flag_kind, self.raw_value)
        return name or UNKNOWN_FLAG

    def render(self) -> str:
        """Format the value according to :attr:`rules`.

        Only the first matching value form is used, in this order:
        hex+char, dec+hex, dec, hex, char.
        """
        rules = self.rules
        parts: list[str] = []

        if Rules.AS_HEX in rules and Rules.AS_CHAR in rules:
            parts.append(f"{self.hex_text()} ({self.char_text()})")
        elif Rules.AS_DEC in rules and Rules.AS_HEX in rules:
            parts.append(f"{self.hex_text()} ({self.raw_value} bytes)")
        elif Rules.AS_DEC in rules:
            parts.append(str(self.raw_value))
        elif Rules.AS_HEX in rules:
            parts.append(self.hex_text())
        elif Rules.AS_CHAR in rules:
            parts.append(self.char_text())

        if Rules.WITH_TIME in rules:
            when = self.time_text()
            if when:
                parts.append(f"({when})")

        if Rules.WITH_FLAG in rules:
            parts.append(self.flag_text())

        return " ".join(parts)

    def characteristics(self) -> list[tuple[int, Optional[str]]]:
        """``(mask, name)`` for every set bit, lowest bit first.

        ``name`` is ``None`` when the flag table has no entry for the bit.
        """
        found: list[tuple[int, Optional[str]]] = []
        for bit in range(self.width * 8):
            mask = 1 << bit
            if self.raw_value & mask:
                name = None
                if self.flag_kind is not None:
                    name = lookup_flag(self.flag_kind, mask)
                found.append((mask, name))
        return found

    def characteristic_names(self) -> list[str]:
        return [
            name if name is not None else f"{UNKNOWN_FLAG}: 0x{mask:x}"
            for mask, name in self.characteristics()
        ]

    # ------------------------------------------------------------------ #
    #  Validation / export
    # ------------------------------------------------------------------ #

    def validate(self) -> bool:
        return bool(self.description)

    def to_record(self, base_offset: int) -> FieldRecord:
        flags = []
        if Rules.WITH_FLAGS in self.rules:
            flags = self.characteristic_names()
        return FieldRecord(
            key=self.key,
            description=self.description,
            offset=self.offset,
            absolute_offset=base_offset + self.offset,
            width=self.width,
            raw_value=self.raw_value,
            rendered=self.render(),
            flag_kind=self.flag_kind.label if self.flag_kind is not None else None,
            flags=flags,
        )


class UInt16Field(Field):
    __slots__ = ()
    width = 2
    struct_format = "<H"


class UInt32Field(Field):
    __slots__ = ()
    width = 4
    struct_format = "<I"


class UInt64Field(Field):
    __slots__ = ()
    width = 8
    struct_format = "<Q"


_FIELD_TYPES: dict[int, type[Field]] = {
    UInt16Field.width: UInt16Field,
    UInt32Field.width: UInt32Field,
    UInt64Field.width: UInt64Field,
}
