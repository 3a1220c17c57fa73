from __future__ import annotations

"""
Diagnostics Configuration Models.

Settings for the package's own internal logging: where twinlog reports
rotations, dropped options and write failures. This is separate from the
Logger output pipeline and uses the standard logging module.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# colorlog palette per severity
DEFAULT_LOG_COLORS: Dict[str, str] = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


@dataclass(frozen=True)
class DiagnosticsConfig:
    """
    Immutable settings of the diagnostics logger.

    Attributes:
        level: Minimum severity level to capture.
        console: Flag to enable colored stderr output.
        log_file: Optional path for persistent diagnostics.
        max_bytes: Maximum size per diagnostics segment before rotation.
        backup_count: Number of historical segments to preserve.
        console_fmt: colorlog format for terminal output.
        file_fmt: Format for file entries.
        datefmt: Timestamp format.
    """
    level: str = "WARNING"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024  # Default: 1MB
    backup_count: int = 2

    console_fmt: str = "%(log_color)s%(levelname)s%(reset)s | %(name)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
