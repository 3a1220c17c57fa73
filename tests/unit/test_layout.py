from __future__ import annotations

"""
Unit tests for prefix building and line composition.

Verifies fragment order and omission, per-fragment console styling,
fixed-width wrapping and the multi-line policy per destination.
"""

from datetime import datetime

import pytest

from twinlog.config import build_config
from twinlog.layout import LineComposer, PrefixBuilder
from twinlog.models import Destination, Level, Multiline
from twinlog.style import PlainStyleBackend, StyleFormatter

_NOW = datetime(2024, 1, 2, 3, 4, 5)


class _TagBackend:
    def apply_named(self, style_id: str, text: str) -> str:
        return f"<{style_id}>{text}</{style_id}>"


def _config(**overrides):
    options = {
        "pid_prefix": "42",
        "port_prefix": "8080",
        "date_format": "%Y-%m-%d",
        "time_format": "%H:%M:%S",
        "console_max_width": 10,
    }
    options.update(overrides)
    return build_config(options)


# -----------------------------------------------------------------------------
# PrefixBuilder
# -----------------------------------------------------------------------------

def test_file_prefix_is_plain_and_ordered() -> None:
    """TC-01: pid, port, [date time], LABEL: joined by single spaces."""
    builder = PrefixBuilder(_config(), StyleFormatter(_TagBackend()))

    prefix = builder.build_prefix(Destination.FILE, Level.INFO, _NOW)

    assert prefix == "42 8080 [2024-01-02 03:04:05] INFO:"


def test_console_prefix_styles_each_fragment() -> None:
    """TC-02: Console fragments are styled individually before joining."""
    builder = PrefixBuilder(_config(), StyleFormatter(_TagBackend()))

    prefix = builder.build_prefix(Destination.CONSOLE, Level.ERROR, _NOW)

    assert prefix == (
        "<white>42</white> <bold>8080</bold> "
        "[<grey>2024-01-02</grey> <yellow>03:04:05</yellow>] <bold>ERROR:</bold>"
    )


def test_empty_fragments_are_omitted() -> None:
    """TC-03: Empty pid/port and disabled toggles leave no gaps."""
    cfg = _config(pid_prefix="", port_prefix="", prefix_with_datetime=False)
    builder = PrefixBuilder(cfg, StyleFormatter(_TagBackend()))

    assert builder.build_prefix(Destination.CONSOLE, Level.TIMER, _NOW) == "<bold>TIMER:</bold>"
    assert builder.build_prefix(Destination.FILE, Level.DEBUG, _NOW) == "DEBUG:"


def test_prefix_can_be_empty() -> None:
    cfg = _config(pid_prefix="", port_prefix="", prefix_with_datetime=False, prefix_with_level=False)
    builder = PrefixBuilder(cfg, StyleFormatter(PlainStyleBackend()))

    assert builder.build_prefix(Destination.FILE, Level.INFO, _NOW) == ""


# -----------------------------------------------------------------------------
# LineComposer
# -----------------------------------------------------------------------------

def test_console_messages_are_wrapped_at_fixed_width() -> None:
    """TC-04: A break follows every run of exactly max-width characters."""
    composer = LineComposer(_config())

    assert composer.wrap("a" * 25) == "a" * 10 + "\n" + "a" * 10 + "\n" + "aaaaa"
    assert composer.wrap("short") == "short"


def test_file_messages_are_not_wrapped() -> None:
    composer = LineComposer(_config(console_multiline="always"))

    line = composer.compose_line(Destination.FILE, "INFO:", ["a" * 25])

    assert line == "INFO: " + "a" * 25


def test_always_policy_puts_prefix_on_its_own_line() -> None:
    """TC-05: ALWAYS splits prefix and body on the console."""
    composer = LineComposer(_config(console_multiline="always"))

    line = composer.compose_line(Destination.CONSOLE, "INFO:", ["hello", "world"])

    assert line == "INFO:\nhello\nworld"


@pytest.mark.parametrize("prefix, expected_sep", [
    ("INFO:", " "),            # 5 chars, not more than 10 / 2
    ("42 INFO:", "\n"),        # 8 chars, more than half the width
])
def test_as_needed_policy_depends_on_prefix_length(prefix, expected_sep) -> None:
    """TC-06: AS_NEEDED splits only when the prefix exceeds half the width."""
    composer = LineComposer(_config(console_multiline="as-needed"))

    assert composer.compose_line(Destination.CONSOLE, prefix, ["hi"]) == f"{prefix}{expected_sep}hi"


def test_never_policy_keeps_single_line() -> None:
    composer = LineComposer(_config(console_multiline=Multiline.NEVER))

    assert composer.compose_line(Destination.CONSOLE, "42 8080 INFO:", ["hi"]) == "42 8080 INFO: hi"


def test_file_line_never_splits_prefix_from_body() -> None:
    """TC-07: File output ignores the multi-line policy."""
    for policy in Multiline:
        composer = LineComposer(_config(console_multiline=policy))
        line = composer.compose_line(Destination.FILE, "42 8080 [x y] INFO:", ["one", "two"])
        assert line == "42 8080 [x y] INFO: one\ntwo"


def test_empty_prefix_yields_body_only() -> None:
    composer = LineComposer(_config())
    assert composer.compose_line(Destination.CONSOLE, "", ["hi"]) == "hi"


def test_wrap_counts_escape_sequences() -> None:
    """TC-08: Styled text is wrapped by raw character count."""
    composer = LineComposer(_config())
    styled = "\033[1mabcdef\033[0m"

    assert composer.wrap(styled) == "\033[1mabcdef\n\033[0m"
