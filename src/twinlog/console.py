from __future__ import annotations

"""
Console Sinks.

A console sink writes a finished line to a named channel. The default sink
maps the log and info channels to stdout and the error and trace channels
to stderr.
"""

import sys
import threading
from typing import Callable, List, Optional, Protocol, TextIO, Tuple

from twinlog.models import ConsoleChannel


class ConsoleSink(Protocol):
    def write(self, channel: ConsoleChannel, text: str) -> None:
        ...


class StreamConsoleSink:
    """Write lines to the interpreter's standard streams."""

    def __init__(
            self,
            stdout: Optional[Callable[[], TextIO]] = None,
            stderr: Optional[Callable[[], TextIO]] = None,
    ) -> None:
        # Resolved lazily so pytest's capsys replacement is honoured
        self._stdout = stdout or (lambda: sys.stdout)
        self._stderr = stderr or (lambda: sys.stderr)
        self._lock = threading.Lock()

    def write(self, channel: ConsoleChannel, text: str) -> None:
        if channel in (ConsoleChannel.ERROR, ConsoleChannel.TRACE):
            stream = self._stderr()
        else:
            stream = self._stdout()
        with self._lock:
            stream.write(f"{text}\n")
            stream.flush()


class MemoryConsoleSink:
    """Collect lines in memory; useful in tests and for embedding."""

    def __init__(self) -> None:
        self.records: List[Tuple[ConsoleChannel, str]] = []
        self._lock = threading.Lock()

    def write(self, channel: ConsoleChannel, text: str) -> None:
        with self._lock:
            self.records.append((channel, text))

    def lines(self, channel: Optional[ConsoleChannel] = None) -> List[str]:
        return [text for ch, text in self.records if channel is None or ch is channel]

    def clear(self) -> None:
        with self._lock:
            self.records.clear()
