from __future__ import annotations

"""
Error Taxonomy.

Exceptions raised synchronously to the caller. Per-message I/O failures are
never raised; the Logger reports them through its own error channel instead.
"""

from datetime import datetime


class TwinlogError(Exception):
    """
    Base class for every error raised by the package.

    Attributes:
        date: Moment the error was created.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.date = datetime.now()


# -----------------------------------------------------------------------------
# CONSTRUCTION / INITIALIZATION
# -----------------------------------------------------------------------------

class InvalidConfigurationError(TwinlogError, ValueError):
    """Options have an unusable shape (e.g. a list) or an invalid field value."""


class FileSystemAccessError(TwinlogError, OSError):
    """The log directory is inaccessible and cannot be created."""


# -----------------------------------------------------------------------------
# TIMERS
# -----------------------------------------------------------------------------

class TimerError(TwinlogError, LookupError):
    """Base class for timer lookup failures."""


class TimerNotFoundError(TimerError):
    """No running timer matches the requested id."""

    def __init__(self, timer_id: str) -> None:
        super().__init__(
            f"No timer exists for ID {timer_id}. "
            f"Make sure you included a .time('{timer_id}') before calling .time_end('{timer_id}')"
        )
        self.timer_id = timer_id


class MissingTimerIdError(TimerError):
    """A timer was ended without naming which one."""

    def __init__(self) -> None:
        super().__init__("You need to pass a valid ID to end a timer and retrieve the results")
