"""
readpe core: the field framework, header layouts and decode pipeline.
"""

from readpe.core.engine import ImageReader
from readpe.core.errors import (
    BufferTooShortError,
    DecodeError,
    HeaderValidationError,
    ImageIOError,
    ImageNotFoundError,
    ImageReadError,
    ReadpeError,
)
from readpe.core.field_map import FieldMap
from readpe.core.fields import Field, Rules, UInt16Field, UInt32Field, UInt64Field
from readpe.core.flags import FLAG_TABLE, FlagKind, lookup_flag
from readpe.core.headers import COFFHeader, DOSHeader, SectionHeader

__all__ = [
    "BufferTooShortError",
    "COFFHeader",
    "DOSHeader",
    "DecodeError",
    "FLAG_TABLE",
    "Field",
    "FieldMap",
    "FlagKind",
    "HeaderValidationError",
    "ImageIOError",
    "ImageNotFoundError",
    "ImageReadError",
    "ImageReader",
    "ReadpeError",
    "Rules",
    "SectionHeader",
    "UInt16Field",
    "UInt32Field",
    "UInt64Field",
    "lookup_flag",
]
