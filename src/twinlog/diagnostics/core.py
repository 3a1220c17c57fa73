from __future__ import annotations

"""
Diagnostics Core.

Idempotent setup of the `twinlog` package logger. Handlers sit behind a
QueueHandler/QueueListener pair so that reporting a failure from a write
worker never blocks on terminal or disk I/O.

Nothing here is configured implicitly: a library must not touch the host
application's logging unless asked, so the package logger only carries a
NullHandler until `configure_diagnostics` is called.
"""

import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from twinlog.diagnostics.config import _LEVEL_MAP, DEFAULT_LOG_COLORS, DiagnosticsConfig
from twinlog.diagnostics.handlers import (
    _create_console_handler,
    _create_rotating_file_handler,
    _is_our_handler,
    _tag_handler,
)

DIAGNOSTICS_LOGGER_NAME: str = "twinlog"

# Internal state flags for idempotency and lifecycle tracking
_CONFIGURED_FLAG_ATTR: str = "_twinlog_configured"
_QUEUE_LISTENER_ATTR: str = "_twinlog_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_diagnostics(cfg: DiagnosticsConfig, *, force: bool = False) -> logging.Logger:
    """
    Attach handlers to the package logger.

    Repeated calls are no-ops unless `force` is set, in which case the
    previously attached handlers and listener are replaced.

    Args:
        cfg: Structural configuration for the diagnostics logger.
        force: Re-initialize handlers even if already configured.

    Returns:
        logging.Logger: The `twinlog` logger.
    """
    pkg_logger = logging.getLogger(DIAGNOSTICS_LOGGER_NAME)

    already_configured = bool(getattr(pkg_logger, _CONFIGURED_FLAG_ATTR, False))
    if already_configured and not force:
        return pkg_logger

    level_int = _parse_level(cfg.level)
    pkg_logger.setLevel(level_int)

    _remove_our_handlers(pkg_logger)
    _stop_existing_listener(pkg_logger)

    handlers_list: List[logging.Handler] = []

    if cfg.console:
        handlers_list.append(_create_console_handler(level_int, cfg.console_fmt, DEFAULT_LOG_COLORS))

    if cfg.log_file:
        fh = _create_rotating_file_handler(
            cfg.log_file,
            level_int,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
        )
        if fh:
            handlers_list.append(fh)

    if not handlers_list:
        return pkg_logger

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = QueueHandler(log_queue)
    _tag_handler(queue_handler)

    listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
    listener.start()

    pkg_logger.addHandler(queue_handler)
    pkg_logger.propagate = False

    setattr(pkg_logger, _QUEUE_LISTENER_ATTR, listener)
    setattr(pkg_logger, _CONFIGURED_FLAG_ATTR, True)

    atexit.register(_safe_stop_listener, listener)

    return pkg_logger


def reset_diagnostics() -> None:
    """Detach every handler added by `configure_diagnostics`."""
    pkg_logger = logging.getLogger(DIAGNOSTICS_LOGGER_NAME)
    _stop_existing_listener(pkg_logger)
    _remove_our_handlers(pkg_logger)
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)
    setattr(pkg_logger, _CONFIGURED_FLAG_ATTR, False)


def get_logger(name: str) -> logging.Logger:
    """Acquire a logger below the package namespace."""
    if name == DIAGNOSTICS_LOGGER_NAME or name.startswith(f"{DIAGNOSTICS_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{DIAGNOSTICS_LOGGER_NAME}.{name}")


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Convert a string-based logging level to its numeric constant."""
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.WARNING)


def _remove_our_handlers(pkg_logger: logging.Logger) -> None:
    for h in list(pkg_logger.handlers):
        if _is_our_handler(h):
            pkg_logger.removeHandler(h)
            h.close()


def _stop_existing_listener(pkg_logger: logging.Logger) -> None:
    listener = getattr(pkg_logger, _QUEUE_LISTENER_ATTR, None)
    if listener:
        _safe_stop_listener(listener)
        for h in listener.handlers:
            h.close()
        setattr(pkg_logger, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a QueueListener, tolerating listeners that were already stopped."""
    if not listener:
        return
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
