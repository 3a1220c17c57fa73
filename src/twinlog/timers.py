from __future__ import annotations

"""
Timer Registry.

Keeps nanosecond start stamps keyed by timer id and renders elapsed
durations. Durations are formatted from the integer nanosecond count with
divmod, never through float division, so very long intervals keep every
digit.
"""

import threading
import time
from typing import Dict, Optional

from twinlog.errors import MissingTimerIdError, TimerNotFoundError

SPONTANEOUS_TIMER_ID = "__SPONTANEOUS__"

NANOSEC_PER_MS = 1_000_000
NANOSEC_PER_SEC = 1_000_000_000


def now_ns() -> int:
    """Monotonic high-resolution timestamp in nanoseconds."""
    return time.perf_counter_ns()


class TimerRegistry:
    """Per-Logger mapping of running timers."""

    def __init__(self) -> None:
        self._timers: Dict[str, int] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, timer_id: object) -> bool:
        return timer_id in self._timers

    def start(self, timer_id: str = SPONTANEOUS_TIMER_ID) -> int:
        """Record the current time for an id, replacing any running timer."""
        started = now_ns()
        with self._lock:
            self._timers[timer_id] = started
        return started

    def peek(self, timer_id: str) -> Optional[int]:
        return self._timers.get(timer_id)

    def remove(self, timer_id: str) -> bool:
        with self._lock:
            return self._timers.pop(timer_id, None) is not None

    def stop(self, timer_id: str = SPONTANEOUS_TIMER_ID, end_time: Optional[int] = None) -> str:
        """
        End a timer and describe how long it ran.

        Args:
            timer_id: Id given to `start`.
            end_time: Explicit end stamp in nanoseconds; defaults to now.

        Returns:
            str: "<id>: <ns>ns (<ms>ms, <s>s)".

        Raises:
            MissingTimerIdError: The default id (or an empty id) has no timer.
            TimerNotFoundError: A named id has no timer.
        """
        end = now_ns() if end_time is None else end_time
        with self._lock:
            started = self._timers.pop(timer_id, None) if timer_id else None

        if started is None:
            if not timer_id or timer_id == SPONTANEOUS_TIMER_ID:
                raise MissingTimerIdError()
            raise TimerNotFoundError(timer_id)

        return format_elapsed(timer_id, max(end - started, 0))


def format_elapsed(timer_id: str, elapsed_ns: int) -> str:
    """Render an elapsed nanosecond count raw, in milliseconds and in seconds."""
    ms_whole, ms_frac = divmod(elapsed_ns, NANOSEC_PER_MS)
    sec_whole, sec_frac = divmod(elapsed_ns, NANOSEC_PER_SEC)
    return f"{timer_id}: {elapsed_ns}ns ({ms_whole}.{ms_frac:06d}ms, {sec_whole}.{sec_frac:09d}s)"
