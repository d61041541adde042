"""
readpe Configuration Management
================================

Centralized configuration for the readpe toolkit using Python dataclasses
and optional TOML-based persistence.

The tool runs with pure defaults when no configuration file exists; the
file only tunes logging and presentation details.

References:
    - PEP 681 -- Data Class Transforms (2022).
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "readpe.toml"


# ========================== Tool-Specific Config ===========================


@dataclass(frozen=False, slots=True)
class ReadpeSettings:
    """Presentation and evaluation settings for the header printer.

    ``label_width`` and ``flag_indent`` define the observable column
    layout of the text output; changing them breaks output comparison
    against reference dumps.
    """

    label_width: int = 34
    flag_indent: int = 42
    parallel_validation: bool = False


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity, log destination, worker count."""

    log_level: str = "WARNING"
    log_file: str | None = None
    log_json: bool = False
    max_workers: int = 4
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ReadpeConfig:
    """Master configuration aggregating global and tool settings.

    Usage:
        >>> config = ReadpeConfig.load()                  # from default path
        >>> config = ReadpeConfig.load("custom.toml")     # from custom path
        >>> print(config.readpe.label_width)
        34
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    readpe: ReadpeSettings = field(default_factory=ReadpeSettings)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ReadpeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``readpe.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`ReadpeConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            readpe=cls._build_section(ReadpeSettings, raw.get("readpe", {})),
        )

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)
