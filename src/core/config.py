"""Runtime configuration model for Etymolog.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DATABASE_FILE_NAME,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_DATA_ROOT,
    DEFAULT_DISPLAY_NAME,
    SETTINGS_FILE_NAME,
)
from core.errors import EtymologConfigError


@dataclass(frozen=True)
class EtymologConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the database and settings files.
        compression_level: gzip level used by image exports.
        default_display_name: Name stamped on exports when settings carry none.
    """

    data_root: Path
    compression_level: int
    default_display_name: str

    @property
    def database_path(self) -> Path:
        """Return the SQLite database file path."""
        return self.data_root / DATABASE_FILE_NAME

    @property
    def settings_path(self) -> Path:
        """Return the settings JSON file path."""
        return self.data_root / SETTINGS_FILE_NAME

    @classmethod
    def from_env(cls) -> "EtymologConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            EtymologConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("ETYMOLOG_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        level_value = os.getenv("ETYMOLOG_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL))
        display_name = os.getenv("ETYMOLOG_DISPLAY_NAME", DEFAULT_DISPLAY_NAME)
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            compression_level=_parse_compression_level(level_value),
            default_display_name=display_name,
        )


def _parse_compression_level(raw_value: str) -> int:
    """Parse the compression level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed gzip level in [0, 9].

    Raises:
        EtymologConfigError: If value is not an integer in range.
    """
    try:
        level = int(raw_value)
    except ValueError as error:
        raise EtymologConfigError(
            "Invalid ETYMOLOG_COMPRESSION_LEVEL value: "
            f"expected integer, got '{raw_value}'. "
            "Set ETYMOLOG_COMPRESSION_LEVEL to a number between 0 and 9."
        ) from error
    if not 0 <= level <= 9:
        raise EtymologConfigError(
            f"Invalid ETYMOLOG_COMPRESSION_LEVEL value: {level} is outside 0..9."
        )
    return level
