"""
readpe Exceptions
=================

Every failure the decoder reports derives from :class:`ReadpeError` so
the CLI can map the whole family to one exit status.  Unknown flag
mappings are deliberately absent: they are rendered as placeholder text
and never interrupt decoding.
"""

from __future__ import annotations


class ReadpeError(Exception):
    """Base class for all readpe failures."""


# ========================== I/O ============================================


class ImageIOError(ReadpeError):
    """The image file could not be loaded into memory."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class ImageNotFoundError(ImageIOError):
    """The image path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "Failed to open the file")


class ImageReadError(ImageIOError):
    """The image exists but could not be read in full."""


# ========================== Decoding =======================================


class DecodeError(ReadpeError):
    """Raw bytes could not be decoded into a field value."""


class BufferTooShortError(DecodeError):
    """A field's byte range extends past the end of the buffer.

    Attributes:
        key:          Key of the field being read.
        offset:       Absolute buffer offset of the read.
        width:        Number of bytes requested.
        buffer_size:  Length of the buffer.
    """

    def __init__(self, key: str, offset: int, width: int, buffer_size: int) -> None:
        super().__init__(
            f"Field '{key}' needs {width} bytes at offset 0x{offset:x}, "
            f"but the buffer is only {buffer_size} bytes long"
        )
        self.key = key
        self.offset = offset
        self.width = width
        self.buffer_size = buffer_size


# ========================== Validation =====================================


class HeaderValidationError(ReadpeError):
    """A header failed its structural checks (magic number, descriptions)."""

    def __init__(self, header: str, message: str | None = None) -> None:
        super().__init__(message or f"The {header} header is invalid")
        self.header = header
