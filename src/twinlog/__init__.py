from __future__ import annotations

"""
twinlog: leveled console and rotating file logging.

Quick start:
    from twinlog import Logger

    log = Logger({"enable_log_file": True, "log_directory": "./logs"})
    log.info("Server listening", 8080)
    log.time("boot")
    log.time_end("boot")
"""

import logging

from twinlog.config import LoggerConfig, build_config, load_config
from twinlog.console import ConsoleSink, MemoryConsoleSink, StreamConsoleSink
from twinlog.errors import (
    FileSystemAccessError,
    InvalidConfigurationError,
    MissingTimerIdError,
    TimerError,
    TimerNotFoundError,
    TwinlogError,
)
from twinlog.logger import Logger
from twinlog.models import (
    ConsoleChannel,
    Destination,
    FileWriteEvent,
    FileWriteMode,
    FormatCategory,
    Level,
    Multiline,
)
from twinlog.stringify import UNDEFINED, plain_string, pretty_string
from twinlog.style import AnsiStyleBackend, PlainStyleBackend, StyleBackend, StyleFormatter
from twinlog.timers import SPONTANEOUS_TIMER_ID, TimerRegistry

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AnsiStyleBackend",
    "ConsoleChannel",
    "ConsoleSink",
    "Destination",
    "FileSystemAccessError",
    "FileWriteEvent",
    "FileWriteMode",
    "FormatCategory",
    "InvalidConfigurationError",
    "Level",
    "Logger",
    "LoggerConfig",
    "MemoryConsoleSink",
    "MissingTimerIdError",
    "Multiline",
    "PlainStyleBackend",
    "SPONTANEOUS_TIMER_ID",
    "StreamConsoleSink",
    "StyleBackend",
    "StyleFormatter",
    "TimerError",
    "TimerNotFoundError",
    "TimerRegistry",
    "TwinlogError",
    "UNDEFINED",
    "build_config",
    "load_config",
    "plain_string",
    "pretty_string",
]
