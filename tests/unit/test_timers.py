from __future__ import annotations

"""
Unit tests for the timer registry.

Verifies the elapsed-time format, integer exactness for long intervals and
the two lookup failures.
"""

import threading

import pytest

from twinlog.errors import MissingTimerIdError, TimerNotFoundError
from twinlog.timers import SPONTANEOUS_TIMER_ID, TimerRegistry, format_elapsed


def test_format_elapsed_pads_fractions() -> None:
    """TC-01: Six millisecond decimals and nine second decimals."""
    assert format_elapsed("t", 1_500_000) == "t: 1500000ns (1.500000ms, 0.001500000s)"
    assert format_elapsed("t", 0) == "t: 0ns (0.000000ms, 0.000000000s)"


def test_format_elapsed_is_exact_for_huge_values() -> None:
    """TC-02: No float rounding, even past 2**53 nanoseconds."""
    elapsed = 12_345_678_901_234_567_891
    assert format_elapsed("big", elapsed) == (
        "big: 12345678901234567891ns (12345678901234.567891ms, 12345678901.234567891s)"
    )


def test_stop_uses_explicit_end_time() -> None:
    registry = TimerRegistry()
    started = registry.start("load")

    message = registry.stop("load", end_time=started + 2_000_000_123)

    assert message == "load: 2000000123ns (2000.000123ms, 2.000000123s)"
    assert registry.peek("load") is None
    assert "load" not in registry


def test_negative_elapsed_is_clamped() -> None:
    registry = TimerRegistry()
    started = registry.start("t")
    assert registry.stop("t", end_time=started - 10) == "t: 0ns (0.000000ms, 0.000000000s)"


def test_default_id_timer() -> None:
    """TC-03: start()/stop() without an id use the spontaneous timer."""
    registry = TimerRegistry()
    registry.start()

    message = registry.stop()

    assert message.startswith(f"{SPONTANEOUS_TIMER_ID}: ")


def test_unknown_named_timer_raises_not_found() -> None:
    """TC-04: A named id without a timer raises TimerNotFoundError."""
    registry = TimerRegistry()

    with pytest.raises(TimerNotFoundError) as excinfo:
        registry.stop("nope")

    assert excinfo.value.timer_id == "nope"
    assert "nope" in str(excinfo.value)


@pytest.mark.parametrize("timer_id", [SPONTANEOUS_TIMER_ID, ""])
def test_missing_default_timer_raises_missing_id(timer_id) -> None:
    """TC-05: Ending the default (or an empty) id without a timer."""
    with pytest.raises(MissingTimerIdError):
        TimerRegistry().stop(timer_id)


def test_start_overwrites_running_timer() -> None:
    registry = TimerRegistry()
    first = registry.start("t")
    second = registry.start("t")

    assert second >= first
    assert registry.peek("t") == second
    assert len(registry) == 1


def test_remove_reports_whether_a_timer_existed() -> None:
    registry = TimerRegistry()
    registry.start("t")

    assert registry.remove("t") is True
    assert registry.remove("t") is False
    with pytest.raises(TimerNotFoundError):
        registry.stop("t")


def test_concurrent_stop_succeeds_once() -> None:
    """TC-06: Only one of several racing stops gets the result."""
    registry = TimerRegistry()
    registry.start("race")
    results = []
    errors = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        try:
            results.append(registry.stop("race"))
        except TimerNotFoundError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1
    assert len(errors) == 7
