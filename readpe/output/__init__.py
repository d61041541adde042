"""readpe output renderers."""

from readpe.output.console import HeaderConsoleOutput

__all__ = ["HeaderConsoleOutput"]
