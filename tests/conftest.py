from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures building loggers wired to an in-memory console sink.
"""

import os
import sys
from typing import Any, Callable, Dict, Iterator, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from twinlog import Logger, MemoryConsoleSink, PlainStyleBackend  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def quiet_options() -> Dict[str, Any]:
    """
    Options producing deterministic console lines.

    Date/time, pid and port prefixes are hidden so only the level label
    precedes the message.
    """
    return {
        "dev": True,
        "enable_console": True,
        "enable_log_file": False,
        "prefix_with_datetime": False,
        "pid_prefix": "",
        "port_prefix": "",
        "console_max_width": 120,
    }


@pytest.fixture
def memory_sink() -> MemoryConsoleSink:
    return MemoryConsoleSink()


@pytest.fixture
def make_logger(memory_sink: MemoryConsoleSink) -> Iterator[Callable[..., Logger]]:
    """Factory for loggers writing to `memory_sink`, closed after the test."""
    created: List[Logger] = []

    def _factory(options: Any = None, *, plain: bool = True) -> Logger:
        backend = PlainStyleBackend() if plain else None
        log = Logger(options, console=memory_sink, style_backend=backend)
        created.append(log)
        return log

    yield _factory

    for log in created:
        log.close()
