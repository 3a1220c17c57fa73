from __future__ import annotations

"""
Unit tests for console styling.

Verifies left-to-right composition of style lists, tolerance of unknown and
falsy style names, and the colorlog-backed escape code table.
"""

from colorlog.escape_codes import escape_codes

from twinlog.style import AnsiStyleBackend, PlainStyleBackend, StyleFormatter


class _TagBackend:
    """Wraps text in pseudo-tags so composition order is visible."""

    def apply_named(self, style_id: str, text: str) -> str:
        return f"<{style_id}>{text}</{style_id}>"


def test_styles_compose_left_to_right() -> None:
    """TC-01: ["bold", "red"] applies bold first, then red around it."""
    formatter = StyleFormatter(_TagBackend())
    assert formatter.apply(["bold", "red"], "x") == "<red><bold>x</bold></red>"


def test_falsy_style_names_are_skipped() -> None:
    formatter = StyleFormatter(_TagBackend())
    assert formatter.apply(["", None, "dim"], "x") == "<dim>x</dim>"
    assert formatter.apply([], "x") == "x"


def test_ansi_backend_uses_colorlog_codes() -> None:
    """TC-02: Chalk-style names map onto colorlog escape sequences."""
    backend = AnsiStyleBackend()
    reset = escape_codes["reset"]

    assert backend.apply_named("bold", "x") == f"{escape_codes['bold']}x{reset}"
    assert backend.apply_named("redBright", "x") == f"{escape_codes['light_red']}x{reset}"
    assert backend.apply_named("magenta", "x") == f"{escape_codes['purple']}x{reset}"
    assert backend.apply_named("grey", "x") == f"{escape_codes['light_black']}x{reset}"
    assert backend.apply_named("bgCyan", "x") == f"{escape_codes['bg_cyan']}x{reset}"
    assert backend.apply_named("inverse", "x") == f"\033[7mx{reset}"


def test_unknown_style_is_a_no_op() -> None:
    """TC-03: Unknown names never raise."""
    backend = AnsiStyleBackend()

    assert backend.apply_named("sparkly", "x") == "x"
    assert not backend.knows("sparkly")
    assert StyleFormatter(backend).apply(["sparkly", "bold"], "x") == backend.apply_named("bold", "x")


def test_default_style_lists_are_all_known() -> None:
    """TC-04: Every built-in default style name resolves to a code."""
    from twinlog.config import DEFAULT_STYLES

    backend = AnsiStyleBackend()
    for styles in DEFAULT_STYLES.values():
        for style_id in styles:
            assert backend.knows(style_id), style_id


def test_plain_backend_leaves_text_alone() -> None:
    assert StyleFormatter(PlainStyleBackend()).apply(["bold", "red"], "x") == "x"
