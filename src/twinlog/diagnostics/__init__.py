from __future__ import annotations

from .config import DiagnosticsConfig
from .core import (
    DIAGNOSTICS_LOGGER_NAME,
    configure_diagnostics,
    get_logger,
    reset_diagnostics,
)

__all__ = [
    "DIAGNOSTICS_LOGGER_NAME",
    "DiagnosticsConfig",
    "configure_diagnostics",
    "get_logger",
    "reset_diagnostics",
]
