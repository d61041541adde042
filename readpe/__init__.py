"""
readpe -- PE Header Viewer
==========================

readpe decodes and prints the header structures of a Windows Portable
Executable image: the MS-DOS stub header, the COFF file header, and
every entry of the section table.

Fields are declared once per header as (offset, width, description,
rules) rows and are parsed, validated and rendered by one generic
framework.  Rendering rules cover decimal, hexadecimal, fixed-width
character, UTC timestamp, and single/multi flag decoding.

References:
    - Microsoft. (2024). PE Format. Microsoft Learn.
    - Pietrek, M. (1994). Peering Inside the PE.
"""

from readpe.core.engine import ImageReader
from readpe.output.console import HeaderConsoleOutput

__version__ = "1.0.0"
__all__ = [
    "ImageReader",
    "HeaderConsoleOutput",
]
