from __future__ import annotations

"""
Line Layout.

Builds the leading decoration of a log line (pid, port, date/time, level
label) and joins it with the message body. Console output is styled and
width-wrapped; file output stays plain and always fits on one line.
"""

import re
from datetime import datetime
from typing import List, Optional, Sequence

from twinlog.config import LoggerConfig
from twinlog.models import Destination, FormatCategory, Level, Multiline
from twinlog.style import StyleFormatter


# ==============================================================================
# PREFIX
# ==============================================================================

class PrefixBuilder:
    """Assemble the prefix fragments of a line for one destination."""

    def __init__(self, config: LoggerConfig, formatter: StyleFormatter) -> None:
        self.config = config
        self.formatter = formatter

    def build_prefix(
            self,
            destination: Destination,
            level: Level,
            now: Optional[datetime] = None,
    ) -> str:
        """
        Collect pid, port, date/time and label fragments in that order.

        Empty fragments are dropped. On the console each fragment is styled
        with its own style list before the fragments are joined with spaces.

        Args:
            destination: Console or file.
            level: Level whose label is rendered.
            now: Moment to print; defaults to the current local time.

        Returns:
            str: The joined prefix, possibly empty.
        """
        cfg = self.config
        moment = now or datetime.now()

        pid = cfg.pid_prefix
        port = cfg.port_prefix
        date = moment.strftime(cfg.date_format)
        time = moment.strftime(cfg.time_format)
        label = f"{level.value.upper()}:"

        if destination is Destination.CONSOLE:
            pid = self._styled(FormatCategory.PID, pid)
            port = self._styled(FormatCategory.PORT, port)
            date = self._styled(FormatCategory.DATE, date)
            time = self._styled(FormatCategory.TIME, time)
            label = self._styled(FormatCategory.LABEL, label)

        fragments: List[str] = []
        if pid:
            fragments.append(pid)
        if port:
            fragments.append(port)
        if cfg.prefix_with_datetime:
            fragments.append(f"[{date} {time}]")
        if cfg.prefix_with_level:
            fragments.append(label)

        return " ".join(fragments)

    def _styled(self, category: FormatCategory, text: str) -> str:
        # An empty fragment must stay falsy so it is still omitted
        if not text:
            return text
        return self.formatter.apply(self.config.styles_for(category), text)


# ==============================================================================
# LINE
# ==============================================================================

class LineComposer:
    """
    Join a prefix and message strings into the final line text.

    Wrapping counts characters of the already styled text, so ANSI escape
    bytes count toward `console_max_width` and a break may split a sequence.
    """

    def __init__(self, config: LoggerConfig) -> None:
        self.config = config
        self._wrap_rx = re.compile(f"(.{{{config.console_max_width}}})")

    def wrap(self, text: str) -> str:
        """Insert a line break after every run of `console_max_width` characters."""
        return self._wrap_rx.sub("\\1\n", text)

    def needs_multiline(self, destination: Destination, prefix: str) -> bool:
        if destination is Destination.FILE:
            return False
        policy = self.config.console_multiline
        if policy is Multiline.ALWAYS:
            return True
        if policy is Multiline.AS_NEEDED:
            return len(prefix) > self.config.console_max_width / 2
        return False

    def compose_line(self, destination: Destination, prefix: str, messages: Sequence[str]) -> str:
        """
        Produce the text written for one log call.

        Args:
            destination: Console or file.
            prefix: Output of PrefixBuilder for the same destination.
            messages: Already stringified (and styled, on console) arguments.

        Returns:
            str: Prefix and body on one line, or on separate lines when the
            console multi-line policy asks for it.
        """
        if destination is Destination.CONSOLE:
            rows = [self.wrap(message) for message in messages]
        else:
            rows = list(messages)

        body = "\n".join(rows)
        if not prefix:
            return body

        separator = "\n" if self.needs_multiline(destination, prefix) else " "
        return f"{prefix}{separator}{body}"
