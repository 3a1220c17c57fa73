from __future__ import annotations

"""
Console Styling.

`StyleFormatter` folds an ordered list of style names over a string.
The actual escape sequences come from a `StyleBackend`; the default one
adapts colorlog's escape code table and understands chalk-style names
such as "bold", "redBright" or "bgCyan".
"""

import logging
from typing import Dict, Iterable, Optional, Protocol

from colorlog.escape_codes import escape_codes

logger = logging.getLogger(__name__)

_RESET: str = escape_codes["reset"]

# Text attributes colorlog does not name
_SGR_MODIFIERS: Dict[str, str] = {
    "italic": "\033[3m",
    "underline": "\033[4m",
    "inverse": "\033[7m",
    "hidden": "\033[8m",
    "strikethrough": "\033[9m",
}

_COLOR_NAMES: Dict[str, str] = {
    "black": "black",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "magenta": "purple",
    "cyan": "cyan",
    "white": "white",
}


class StyleBackend(Protocol):
    """Capability to wrap a string in one named terminal style."""

    def apply_named(self, style_id: str, text: str) -> str:
        ...


# ==============================================================================
# COLORLOG ADAPTER
# ==============================================================================

class AnsiStyleBackend:
    """
    Style backend emitting ANSI escape sequences.

    Unknown style names leave the text untouched.
    """

    def __init__(self) -> None:
        self._codes: Dict[str, str] = _build_style_table()

    def apply_named(self, style_id: str, text: str) -> str:
        code = self._codes.get(style_id)
        if code is None:
            logger.debug(f"Ignoring unknown console style '{style_id}'")
            return text
        return f"{code}{text}{_RESET}"

    def knows(self, style_id: str) -> bool:
        return style_id in self._codes


class PlainStyleBackend:
    """Backend for terminals without color support: every style is a no-op."""

    def apply_named(self, style_id: str, text: str) -> str:
        return text


# ==============================================================================
# FORMATTER
# ==============================================================================

class StyleFormatter:
    """Apply ordered style lists to console text."""

    def __init__(self, backend: Optional[StyleBackend] = None) -> None:
        self.backend: StyleBackend = backend or AnsiStyleBackend()

    def apply(self, styles: Iterable[str], text: str) -> str:
        """
        Compose the styles left to right around the text.

        Args:
            styles: Ordered style names; falsy entries are skipped.
            text: The string to decorate.

        Returns:
            str: The decorated string.
        """
        result = text
        for style_id in styles:
            if not style_id:
                continue
            result = self.backend.apply_named(style_id, result)
        return result


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _build_style_table() -> Dict[str, str]:
    """Map chalk-style names onto colorlog escape codes."""
    table: Dict[str, str] = {
        "bold": escape_codes["bold"],
        "dim": escape_codes["thin"],
        "reset": _RESET,
    }
    table.update(_SGR_MODIFIERS)

    for name, colorlog_name in _COLOR_NAMES.items():
        bright = f"light_{colorlog_name}"
        table[name] = escape_codes[colorlog_name]
        table[f"{name}Bright"] = escape_codes[bright]

        bg_name = f"bg{name[0].upper()}{name[1:]}"
        table[bg_name] = escape_codes[f"bg_{colorlog_name}"]
        table[f"{bg_name}Bright"] = escape_codes[f"bg_{bright}"]

    for alias in ("grey", "gray"):
        table[alias] = escape_codes["light_black"]
        table[f"bg{alias.capitalize()}"] = escape_codes["bg_light_black"]

    return table
