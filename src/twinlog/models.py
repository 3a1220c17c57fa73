from __future__ import annotations

"""
Logging Domain Models.

Enumerations and immutable records shared by the formatting pipeline, the
file subsystem and the orchestrator. The per-level lookup table replaces
any string-assembled attribute access.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class Destination(str, Enum):
    CONSOLE = "console"
    FILE = "file"


class Level(str, Enum):
    INFO = "info"
    ERROR = "error"
    DEBUG = "debug"
    TIMER = "timer"


class FileWriteMode(str, Enum):
    """
    Strategy used to append to log files.

    ASYNC opens, appends and closes on every write. STREAM keeps one handle
    open per file for the lifetime of the Logger.
    """
    ASYNC = "async"
    STREAM = "stream"


class Multiline(str, Enum):
    ALWAYS = "always"
    AS_NEEDED = "as-needed"
    NEVER = "never"


class FormatCategory(str, Enum):
    """Style list identifiers, one per decorated fragment kind."""
    LABEL = "label"
    PID = "pid"
    PORT = "port"
    DATE = "date"
    TIME = "time"
    TIMER = "timer"
    INFO = "info"
    INFO_SECONDARY = "info_secondary"
    ERROR = "error"
    ERROR_SECONDARY = "error_secondary"
    DEBUG = "debug"
    DEBUG_SECONDARY = "debug_secondary"


class ConsoleChannel(str, Enum):
    """Named output streams understood by console sinks."""
    LOG = "log"
    INFO = "info"
    ERROR = "error"
    TRACE = "trace"


# -----------------------------------------------------------------------------
# RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LevelProfile:
    """
    Routing and styling rules of one log level.

    Attributes:
        level: The level being described.
        primary: Style category of the first message argument.
        secondary: Style category of the remaining arguments.
        channel: Console stream the composed line is written to.
        file_level: Level whose file target receives the line.
    """
    level: Level
    primary: FormatCategory
    secondary: FormatCategory
    channel: ConsoleChannel
    file_level: Level


LEVEL_PROFILES: Dict[Level, LevelProfile] = {
    Level.INFO: LevelProfile(
        Level.INFO, FormatCategory.INFO, FormatCategory.INFO_SECONDARY,
        ConsoleChannel.INFO, Level.INFO,
    ),
    Level.ERROR: LevelProfile(
        Level.ERROR, FormatCategory.ERROR, FormatCategory.ERROR_SECONDARY,
        ConsoleChannel.ERROR, Level.ERROR,
    ),
    Level.DEBUG: LevelProfile(
        Level.DEBUG, FormatCategory.DEBUG, FormatCategory.DEBUG_SECONDARY,
        ConsoleChannel.TRACE, Level.DEBUG,
    ),
    # Timer results share the debug log file
    Level.TIMER: LevelProfile(
        Level.TIMER, FormatCategory.TIMER, FormatCategory.TIMER,
        ConsoleChannel.LOG, Level.DEBUG,
    ),
}


@dataclass(frozen=True)
class FileWriteEvent:
    """
    Payload handed to the file write lifecycle hooks.

    Attributes:
        current_path: Log file being appended to.
        level: Level of the message being written.
        write_id: High-resolution timestamp correlating start/finish calls.
    """
    current_path: str
    level: Level
    write_id: int


@dataclass(frozen=True)
class FileTarget:
    """Where and under which rotation threshold one level writes."""
    level: Level
    directory: str
    filename: str
    extension: str
    size_limit: int

    @property
    def path(self) -> str:
        return f"{self.directory}/{self.filename}.{self.extension}"
