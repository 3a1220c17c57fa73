from __future__ import annotations

"""
Logger Orchestrator.

Runs every log call through the formatting pipeline once per enabled
destination and dispatches the results. Console writes and file writes run
on two single-worker executors: the destinations proceed concurrently while
each one keeps the order of the calls. Every log method returns a Future
that completes once all destinations are done, so callers may wait on it
but never have to.

Failures while writing (I/O errors, hook exceptions) are reported on the
console error channel and to the `twinlog` diagnostics logger. They are
never raised to the caller and never stop the other destination.
"""

import logging
import threading
import weakref
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from twinlog.config import LoggerConfig, build_config
from twinlog.console import ConsoleSink, StreamConsoleSink
from twinlog.errors import InvalidConfigurationError
from twinlog.files import FileRotationManager, ensure_directory
from twinlog.layout import LineComposer, PrefixBuilder
from twinlog.models import (
    LEVEL_PROFILES,
    ConsoleChannel,
    Destination,
    FileTarget,
    FileWriteEvent,
    FormatCategory,
    Level,
    LevelProfile,
)
from twinlog.stringify import plain_string, pretty_string
from twinlog.style import StyleBackend, StyleFormatter
from twinlog.timers import SPONTANEOUS_TIMER_ID, TimerRegistry, now_ns

logger = logging.getLogger(__name__)


class Logger:
    """
    Leveled logger writing styled lines to the console and plain lines to files.

    Args:
        options: LoggerConfig, mapping of options, or None for defaults.
        console: Sink receiving console lines; defaults to stdout/stderr.
        style_backend: Terminal styling capability; defaults to ANSI codes.

    Raises:
        InvalidConfigurationError: options is a list/tuple or holds invalid values.
        FileSystemAccessError: File output is enabled and the log directory
            cannot be created.
    """

    def __init__(
            self,
            options: Any = None,
            *,
            console: Optional[ConsoleSink] = None,
            style_backend: Optional[StyleBackend] = None,
    ) -> None:
        self.config: LoggerConfig = build_config(options)
        self.console: ConsoleSink = console or StreamConsoleSink()
        self.formatter = StyleFormatter(style_backend)
        self.prefixes = PrefixBuilder(self.config, self.formatter)
        self.composer = LineComposer(self.config)
        self.timers = TimerRegistry()
        self.files = FileRotationManager(self.config.file_write_mode, _weak_reporter(self))

        self._console_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="twinlog-console")
        self._file_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="twinlog-file")
        self._file_ready = False
        self._closed = False
        self._finalizer = weakref.finalize(
            self, _shutdown, self.files, self._console_executor, self._file_executor
        )

        if self.config.enable_log_file:
            self.init_file()

    # ==========================================================================
    # LIFECYCLE
    # ==========================================================================

    def init_file(self) -> "Logger":
        """
        Validate file settings and create the log directory.

        Raises:
            InvalidConfigurationError: Directory, extension or every filename is empty.
            FileSystemAccessError: The directory cannot be created.
        """
        cfg = self.config
        filenames = (cfg.info_filename, cfg.error_filename, cfg.debug_filename)
        if not cfg.log_directory or not cfg.log_file_extension or not any(filenames):
            raise InvalidConfigurationError(
                "Log file is enabled but log_directory and/or filenames are invalid"
            )

        ensure_directory(cfg.log_directory)
        self._file_ready = True
        logger.debug(f"Log files initialized in {cfg.log_directory}")
        return self

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every previously submitted write has finished."""
        if self._closed:
            return
        pending = [
            self._console_executor.submit(_noop),
            self._file_executor.submit(_noop),
        ]
        for f in pending:
            f.result(timeout=timeout)

    def close(self) -> None:
        """Finish pending writes, stop the workers and release open streams."""
        if self._closed:
            return
        self._closed = True
        self._finalizer()

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ==========================================================================
    # LEVEL API
    # ==========================================================================

    def info(self, msg: Any = "", *args: Any) -> "Future[None]":
        return self._dispatch(Level.INFO, msg, args)

    def error(self, msg: Any = "", *args: Any) -> "Future[None]":
        return self._dispatch(Level.ERROR, msg, args)

    def debug(self, msg: Any = "", *args: Any) -> "Future[None]":
        """Log a debug message; console output only happens in dev mode."""
        return self._dispatch(Level.DEBUG, msg, args, console=self.config.dev)

    # ==========================================================================
    # TIMERS
    # ==========================================================================

    def time(self, timer_id: str = SPONTANEOUS_TIMER_ID) -> int:
        """Start (or restart) a timer and return its start stamp in nanoseconds."""
        return self.timers.start(timer_id)

    def get_timer(self, timer_id: str) -> Optional[int]:
        return self.timers.peek(timer_id)

    def remove_timer(self, timer_id: str) -> bool:
        return self.timers.remove(timer_id)

    def time_end(self, timer_id: str = SPONTANEOUS_TIMER_ID, end_time: Optional[int] = None) -> "Future[None]":
        """
        Stop a timer and log the elapsed time.

        Raises:
            MissingTimerIdError: Called without an id and no default timer runs.
            TimerNotFoundError: No timer runs under the given id.
        """
        message = self.timers.stop(timer_id, end_time)
        return self._dispatch(Level.TIMER, message, ())

    # ==========================================================================
    # FORMATTING
    # ==========================================================================

    def format_value(self, destination: Destination, category: FormatCategory, value: Any = "") -> str:
        """Stringify one argument; console text is additionally styled."""
        if destination is Destination.FILE:
            return plain_string(value)
        return self.formatter.apply(self.config.styles_for(category), pretty_string(value))

    def format_line(
            self,
            destination: Destination,
            level: Level,
            messages: Sequence[str],
            now: Optional[datetime] = None,
    ) -> str:
        """Prefix already formatted messages and compose the final text."""
        prefix = self.prefixes.build_prefix(destination, level, now)
        return self.composer.compose_line(destination, prefix, messages)

    def file_target(self, level: Level) -> FileTarget:
        """Describe the file a level's lines are appended to."""
        profile = LEVEL_PROFILES[level]
        cfg = self.config
        return FileTarget(
            level=profile.file_level,
            directory=cfg.log_directory,
            filename=cfg.filename_for(profile.file_level),
            extension=cfg.log_file_extension,
            size_limit=cfg.file_size_limit,
        )

    # ==========================================================================
    # PRIVATE HELPERS
    # ==========================================================================

    def _render(self, destination: Destination, profile: LevelProfile, msg: Any,
                args: Sequence[Any], now: datetime) -> str:
        messages = [self.format_value(destination, profile.primary, msg)]
        messages.extend(self.format_value(destination, profile.secondary, arg) for arg in args)
        return self.format_line(destination, profile.level, messages, now)

    def _dispatch(self, level: Level, msg: Any, args: Sequence[Any], console: bool = True) -> "Future[None]":
        profile = LEVEL_PROFILES[level]
        now = datetime.now()
        actions: List[Future] = []

        if self.config.enable_console and console:
            text = self._safe_render(Destination.CONSOLE, profile, msg, args, now)
            if text is not None:
                actions.append(self._submit(self._console_executor, self._write_console, profile, text))

        if self.config.enable_log_file:
            text = self._safe_render(Destination.FILE, profile, msg, args, now)
            if text is not None:
                actions.append(self._submit(self._file_executor, self._write_file, profile, text))

        return _gather(actions)

    def _safe_render(self, destination: Destination, profile: LevelProfile, msg: Any,
                     args: Sequence[Any], now: datetime) -> Optional[str]:
        try:
            return self._render(destination, profile, msg, args, now)
        except Exception as e:
            self._report_failure(f"Had trouble formatting a {profile.level.value} message for {destination.value}", e)
            return None

    def _submit(self, executor: ThreadPoolExecutor, fn: Callable[..., None], *args: Any) -> Future:
        if not self._closed:
            try:
                return executor.submit(fn, *args)
            except RuntimeError:
                # Executor shut down by the finalizer; fall through to inline
                pass
        done: Future = Future()
        fn(*args)
        done.set_result(None)
        return done

    def _write_console(self, profile: LevelProfile, text: str) -> None:
        try:
            self.console.write(profile.channel, text)
        except Exception as e:
            logger.error(f"Console write failed on channel {profile.channel.value}: {e}")

    def _write_file(self, profile: LevelProfile, text: str) -> None:
        target = self.file_target(profile.level)
        if not self.files.is_enabled(target):
            return

        try:
            if not self._file_ready:
                self.init_file()
        except Exception as e:
            self._report_failure("Log file subsystem could not be initialized", e)
            return

        event = FileWriteEvent(current_path=target.path, level=profile.level, write_id=now_ns())

        self._run_hook("on_file_write_start", self.config.on_file_write_start, event)
        try:
            self.files.write_with_rotation(target, text)
        except Exception as e:
            self._report_failure(f"Problem with file writer ({self.config.file_write_mode.value})", e)
        self._run_hook("on_file_write_finish", self.config.on_file_write_finish, event)

    def _run_hook(self, name: str, hook: Optional[Callable[[FileWriteEvent], Any]], event: FileWriteEvent) -> None:
        if hook is None:
            return
        try:
            hook(event)
        except Exception as e:
            self._report_failure(f"Problem with {name} handler provided", e)

    def _report_failure(self, message: str, error: BaseException) -> None:
        """Best-effort self-report of a write failure on the console error channel."""
        logger.error(f"{message}: {error!r}")
        if not self.config.enable_console:
            return
        try:
            text = self._render(Destination.CONSOLE, LEVEL_PROFILES[Level.ERROR], message, (str(error),), datetime.now())
            self.console.write(ConsoleChannel.ERROR, text)
        except Exception:
            logger.exception("Unable to report logging failure on the console")


# ==============================================================================
# MODULE HELPERS
# ==============================================================================

def _noop() -> None:
    return None


def _weak_reporter(owner: "Logger") -> Callable[[str, BaseException], None]:
    """Error callback that does not keep the Logger alive."""
    method = weakref.WeakMethod(owner._report_failure)

    def report(message: str, error: BaseException) -> None:
        bound = method()
        if bound is not None:
            bound(message, error)

    return report


def _gather(futures: List[Future]) -> "Future[None]":
    """Return a Future resolved once every given Future is done."""
    combined: Future = Future()
    if not futures:
        combined.set_result(None)
        return combined

    remaining = [len(futures)]
    lock = threading.Lock()

    def _on_done(_: Future) -> None:
        with lock:
            remaining[0] -= 1
            finished = remaining[0] == 0
        if finished:
            combined.set_result(None)

    for f in futures:
        f.add_done_callback(_on_done)
    return combined


def _shutdown(files: FileRotationManager, *executors: ThreadPoolExecutor) -> None:
    for executor in executors:
        executor.shutdown(wait=True)
    files.close()
