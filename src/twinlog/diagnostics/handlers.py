from __future__ import annotations

"""
Diagnostics Handlers and Low-Level Utilities.

Handler factories plus the tagging mechanism that lets the package tell
its own handlers apart from handlers attached by the host application.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Dict, Optional

import colorlog

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_twinlog_handler"


# ==============================================================================
# INTERNAL LOGGING UTILITIES
# ==============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    """Mark a handler as managed by the diagnostics module."""
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_console_handler(
        level_int: int,
        fmt: str,
        log_colors: Dict[str, str],
) -> logging.Handler:
    """
    Build a colored stderr handler.

    Args:
        level_int: Numeric logging level.
        fmt: colorlog format string (may use %(log_color)s and %(reset)s).
        log_colors: Severity name to colorlog color mapping.

    Returns:
        logging.Handler: The tagged handler.
    """
    sh = colorlog.StreamHandler(sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(colorlog.ColoredFormatter(fmt, log_colors=log_colors))
    _tag_handler(sh)
    return sh


def _create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Initialize a RotatingFileHandler, degrading to None on I/O failure.

    Args:
        log_file: Target path for the diagnostics file.
        level_int: Numeric logging level.
        formatter: Pre-configured logging formatter.
        max_bytes: Rollover threshold in bytes.
        backup_count: Number of archived files to keep.

    Returns:
        Optional[RotatingFileHandler]: Configured handler or None if I/O fails.
    """
    try:
        _ensure_parent_dir(log_file)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: twinlog diagnostics cannot write to '{log_file}': {e}\n")
        return None

    fh.setLevel(level_int)
    fh.setFormatter(formatter)
    _tag_handler(fh)
    return fh


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)
