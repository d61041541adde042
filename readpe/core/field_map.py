"""
Field Maps
==========

A :class:`FieldMap` is an ordered, fixed-shape group of :class:`Field`
objects that share one base offset into the image buffer.  It parses,
validates and renders its fields as a unit.

Display order is the declaration order of the layout table; keys are
only identifiers and carry no ordering meaning.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, ClassVar, Iterable, Iterator, Optional

from shared.console import ReadpeConsole

from readpe.core.fields import Field, Rules
from readpe.core.models import FieldLayout, HeaderRecord

LABEL_WIDTH = 34
FLAG_INDENT = 42
_FIELD_INDENT = "    "


class FieldMap:
    """An ordered collection of named fields at a common base offset.

    Subclasses describe a concrete header by overriding :attr:`LAYOUT`,
    :attr:`name` and :attr:`title`, and may add structure checks in
    :meth:`_validate_structure`.

    Usage::

        fields = FieldMap(0x40, layout=[
            FieldLayout(key="magic", offset=0, width=4, description="Magic",
                        rules=Rules.AS_HEX),
        ])
        fields.parse(buffer)
        if fields.validate():
            print("\\n".join(fields.render_lines()))
    """

    LAYOUT: ClassVar[tuple[FieldLayout, ...]] = ()

    name: ClassVar[str] = "field map"
    title: ClassVar[str] = ""
    label_prefix: ClassVar[str] = ""

    def __init__(
        self,
        base_offset: int = 0,
        layout: Optional[Iterable[FieldLayout]] = None,
    ) -> None:
        rows = self.LAYOUT if layout is None else tuple(layout)
        self._base_offset: int = base_offset
        self._fields: tuple[tuple[str, Field], ...] = tuple(
            (row.key, Field.from_layout(row)) for row in rows
        )
        self._index: dict[str, Field] = dict(self._fields)
        if len(self._index) != len(self._fields):
            raise ValueError(f"Duplicate field key in {self.name} layout")

    # ------------------------------------------------------------------ #
    #  Container protocol
    # ------------------------------------------------------------------ #

    @property
    def base_offset(self) -> int:
        return self._base_offset

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[tuple[str, Field]]:
        return iter(self._fields)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __getitem__(self, key: str) -> Field:
        return self._index[key]

    def keys(self) -> list[str]:
        return [key for key, _ in self._fields]

    def fields(self) -> list[Field]:
        return [field for _, field in self._fields]

    def value_of(self, key: str) -> int:
        """Raw value of the field named *key*."""
        return self._index[key].raw_value

    # ------------------------------------------------------------------ #
    #  Parse / validate
    # ------------------------------------------------------------------ #

    def parse(self, buffer: bytes) -> None:
        """Populate every field from *buffer*, in display order.

        Raises:
            BufferTooShortError: On the first field that does not fit.
        """
        for _, field in self._fields:
            field.set_value(buffer, self._base_offset)

    def validate(self, *, parallel: bool = False, max_workers: int = 4) -> bool:
        """Check every field, then the header-specific structure.

        Field checks are independent of each other; with *parallel* they
        are fanned out to a thread pool and reduced with ``all``.
        """
        if parallel and len(self._fields) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                fields_ok = all(pool.map(Field.validate, self.fields()))
        else:
            fields_ok = all(field.validate() for field in self.fields())

        if not fields_ok:
            return False
        return self._validate_structure()

    def _validate_structure(self) -> bool:
        return True

    # ------------------------------------------------------------------ #
    #  Output
    # ------------------------------------------------------------------ #

    def render_lines(
        self,
        label_width: int = LABEL_WIDTH,
        flag_indent: int = FLAG_INDENT,
    ) -> list[str]:
        """Return the text block printed for this header.

        Fields whose rendering is empty are hidden.  A ``WITH_FLAGS``
        field is followed by one line per set bit.
        """
        lines: list[str] = []
        if self.title:
            lines.append(self.title)

        for _, field in self._fields:
            value = field.render()
            if not value:
                continue

            label = f"{self.label_prefix}{field.description}:"
            lines.append(f"{_FIELD_INDENT}{label:<{label_width}}{value}")

            if Rules.WITH_FLAGS in field.rules:
                lines.append(f"{_FIELD_INDENT}Characteristics names")
                for flag_name in field.characteristic_names():
                    lines.append(" " * flag_indent + flag_name)

        return lines

    def print(self, console: ReadpeConsole, **kwargs: Any) -> None:
        """Write :meth:`render_lines` through a :class:`ReadpeConsole`."""
        console.lines(self.render_lines(**kwargs))

    def to_record(self) -> HeaderRecord:
        return HeaderRecord(
            name=self.name,
            base_offset=self._base_offset,
            fields=[field.to_record(self._base_offset) for field in self.fields()],
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(base_offset=0x{self._base_offset:x}, "
            f"fields={len(self._fields)})"
        )
