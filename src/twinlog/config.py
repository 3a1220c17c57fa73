from __future__ import annotations

"""
Logger Configuration.

Defines the immutable `LoggerConfig` record and the validating factory that
builds it from user supplied options. The factory never touches the
filesystem; directory checks happen when the file subsystem initializes.

Accepted inputs:
- None, an empty mapping, or any non-mapping scalar: defaults apply.
- A mapping of snake_case field names (or the legacy camelCase aliases).
- An existing LoggerConfig, returned as is.
- A list or tuple: always rejected.
"""

import json
import logging
import os
import shutil
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from twinlog.errors import InvalidConfigurationError
from twinlog.models import FileWriteEvent, FileWriteMode, FormatCategory, Level, Multiline

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
DEV_ENV_VAR = "TWINLOG_ENV"
DEFAULT_CONSOLE_WIDTH = 120
DEFAULT_FILE_SIZE_LIMIT = 5_000_000  # 5 MB

StyleList = Tuple[str, ...]
FileWriteHook = Callable[[FileWriteEvent], Any]

DEFAULT_STYLES: Dict[FormatCategory, StyleList] = {
    FormatCategory.LABEL: ("bold",),
    FormatCategory.PID: ("white",),
    FormatCategory.PORT: ("bold",),
    FormatCategory.DATE: ("grey",),
    FormatCategory.TIME: ("yellow",),
    FormatCategory.TIMER: ("greenBright", "inverse"),
    FormatCategory.INFO: ("blueBright",),
    FormatCategory.INFO_SECONDARY: ("whiteBright",),
    FormatCategory.ERROR: ("bold", "redBright"),
    FormatCategory.ERROR_SECONDARY: ("yellowBright",),
    FormatCategory.DEBUG: ("cyanBright",),
    FormatCategory.DEBUG_SECONDARY: ("whiteBright",),
}

# Legacy option names kept for callers migrating from the camelCase API
OPTION_ALIASES: Dict[str, str] = {
    "enableConsole": "enable_console",
    "enableLogFile": "enable_log_file",
    "enableLogFiles": "enable_log_file",
    "enableFile": "enable_log_file",
    "fileWriteMode": "file_write_mode",
    "logDirectory": "log_directory",
    "logFileDirectory": "log_directory",
    "infoFilename": "info_filename",
    "errorFilename": "error_filename",
    "debugFilename": "debug_filename",
    "logFileExtension": "log_file_extension",
    "logFileSizeLimit": "file_size_limit",
    "consoleMaxWidth": "console_max_width",
    "consoleMultiLine": "console_multiline",
    "prefixWithDateTime": "prefix_with_datetime",
    "prefixWithMessageType": "prefix_with_level",
    "pidPrefix": "pid_prefix",
    "portPrefix": "port_prefix",
    "onFileWriteStart": "on_file_write_start",
    "onFileWriteFinish": "on_file_write_finish",
    "labelFormat": "label_style",
    "pidFormat": "pid_style",
    "portFormat": "port_style",
    "dateFormat": "date_style",
    "timeFormat": "time_style",
    "timerFormat": "timer_style",
    "infoMessageFormat": "info_style",
    "infoSecondaryFormat": "info_secondary_style",
    "errorMessageFormat": "error_style",
    "errorSecondaryFormat": "error_secondary_style",
    "debugMessageFormat": "debug_style",
    "debugSecondaryFormat": "debug_secondary_style",
}

_FILE_WRITE_MODE_ALIASES: Dict[str, FileWriteMode] = {
    "async": FileWriteMode.ASYNC,
    "writefileasync": FileWriteMode.ASYNC,
    "stream": FileWriteMode.STREAM,
    "writefilestream": FileWriteMode.STREAM,
}


def _default_dev() -> bool:
    return os.environ.get(DEV_ENV_VAR, "").strip().lower() == "development"


def _default_console_width() -> int:
    columns = shutil.get_terminal_size(fallback=(DEFAULT_CONSOLE_WIDTH, 24)).columns
    return columns if columns > 0 else DEFAULT_CONSOLE_WIDTH


def _default_pid() -> str:
    return str(os.getpid())


# -----------------------------------------------------------------------------
# Configuration Model
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LoggerConfig:
    """
    Immutable settings of one Logger instance.

    Attributes:
        dev: Development mode; enables debug console output and hooks.
        enable_console: Write formatted lines to the console sink.
        enable_log_file: Append plain lines to per-level log files.
        file_write_mode: Append strategy (ASYNC or STREAM).
        log_directory: Folder holding the log files.
        info_filename: Base filename of the info log.
        error_filename: Base filename of the error log.
        debug_filename: Base filename of the debug (and timer) log.
        log_file_extension: Extension shared by every log file.
        file_size_limit: Rotation threshold in bytes; 0 disables rotation.
        console_max_width: Characters per console line before wrapping.
        console_multiline: When the prefix gets its own console line.
        prefix_with_datetime: Prepend the local date and time.
        prefix_with_level: Prepend the upper-cased level label.
        pid_prefix: Leading process identifier; empty to hide.
        port_prefix: Leading server port; empty to hide.
        date_format: strftime pattern of the date fragment.
        time_format: strftime pattern of the time fragment.
        on_file_write_start: Hook called before each file write.
        on_file_write_finish: Hook called after each file write.
    """
    dev: bool = field(default_factory=_default_dev)

    # File options
    enable_log_file: bool = False
    file_write_mode: FileWriteMode = FileWriteMode.ASYNC
    log_directory: str = "./logs"
    info_filename: str = "info"
    error_filename: str = "error"
    debug_filename: str = "debug"
    log_file_extension: str = "log"
    file_size_limit: int = DEFAULT_FILE_SIZE_LIMIT

    # Console options
    enable_console: bool = True
    console_max_width: int = field(default_factory=_default_console_width)
    console_multiline: Multiline = Multiline.ALWAYS

    # Layout options
    prefix_with_datetime: bool = True
    prefix_with_level: bool = True
    pid_prefix: str = field(default_factory=_default_pid)
    port_prefix: str = ""
    date_format: str = "%x"
    time_format: str = "%X"

    # Formatting options
    label_style: StyleList = DEFAULT_STYLES[FormatCategory.LABEL]
    pid_style: StyleList = DEFAULT_STYLES[FormatCategory.PID]
    port_style: StyleList = DEFAULT_STYLES[FormatCategory.PORT]
    date_style: StyleList = DEFAULT_STYLES[FormatCategory.DATE]
    time_style: StyleList = DEFAULT_STYLES[FormatCategory.TIME]
    timer_style: StyleList = DEFAULT_STYLES[FormatCategory.TIMER]
    info_style: StyleList = DEFAULT_STYLES[FormatCategory.INFO]
    info_secondary_style: StyleList = DEFAULT_STYLES[FormatCategory.INFO_SECONDARY]
    error_style: StyleList = DEFAULT_STYLES[FormatCategory.ERROR]
    error_secondary_style: StyleList = DEFAULT_STYLES[FormatCategory.ERROR_SECONDARY]
    debug_style: StyleList = DEFAULT_STYLES[FormatCategory.DEBUG]
    debug_secondary_style: StyleList = DEFAULT_STYLES[FormatCategory.DEBUG_SECONDARY]

    # Lifecycle hooks
    on_file_write_start: Optional[FileWriteHook] = None
    on_file_write_finish: Optional[FileWriteHook] = None

    def styles_for(self, category: FormatCategory) -> StyleList:
        """Return the style list of a fragment category."""
        return getattr(self, _STYLE_FIELDS[category])

    def filename_for(self, level: Level) -> str:
        """Return the base filename a level writes to."""
        if level is Level.ERROR:
            return self.error_filename
        if level is Level.INFO:
            return self.info_filename
        return self.debug_filename


_STYLE_FIELDS: Dict[FormatCategory, str] = {
    FormatCategory.LABEL: "label_style",
    FormatCategory.PID: "pid_style",
    FormatCategory.PORT: "port_style",
    FormatCategory.DATE: "date_style",
    FormatCategory.TIME: "time_style",
    FormatCategory.TIMER: "timer_style",
    FormatCategory.INFO: "info_style",
    FormatCategory.INFO_SECONDARY: "info_secondary_style",
    FormatCategory.ERROR: "error_style",
    FormatCategory.ERROR_SECONDARY: "error_secondary_style",
    FormatCategory.DEBUG: "debug_style",
    FormatCategory.DEBUG_SECONDARY: "debug_secondary_style",
}


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------

def build_config(options: Any = None) -> LoggerConfig:
    """
    Validate raw options and produce a LoggerConfig.

    Args:
        options: A mapping of options, an existing config, or anything else.

    Returns:
        LoggerConfig: The normalized configuration.

    Raises:
        InvalidConfigurationError: If options is a list/tuple or a field value is invalid.
    """
    if isinstance(options, LoggerConfig):
        return options

    if isinstance(options, (list, tuple)):
        raise InvalidConfigurationError(
            "Cannot process options provided. Must be an object with key/value pairs"
        )

    if not isinstance(options, Mapping) or not options:
        if options is not None and not isinstance(options, Mapping):
            logger.debug(f"Ignoring options of type {type(options).__name__}; using defaults")
        return LoggerConfig()

    raw = _resolve_aliases(options)
    values: Dict[str, Any] = {}

    if "dev" in raw:
        values["dev"] = bool(raw["dev"])
    dev = values.get("dev", _default_dev())

    # File options
    if "enable_log_file" in raw:
        values["enable_log_file"] = bool(raw["enable_log_file"])
    if "file_write_mode" in raw:
        values["file_write_mode"] = _as_file_write_mode(raw["file_write_mode"])
    if "log_directory" in raw:
        values["log_directory"] = resolve_log_directory(_as_str(raw["log_directory"], "log_directory"))
    for name in ("info_filename", "error_filename", "debug_filename", "log_file_extension"):
        if name in raw:
            values[name] = _as_str(raw[name], name)
    if "file_size_limit" in raw:
        values["file_size_limit"] = _as_int(raw["file_size_limit"], "file_size_limit", minimum=0)

    # Console options
    if "enable_console" in raw:
        values["enable_console"] = bool(raw["enable_console"])
    if "console_max_width" in raw:
        values["console_max_width"] = _as_int(raw["console_max_width"], "console_max_width", minimum=1)
    if "console_multiline" in raw:
        values["console_multiline"] = _as_multiline(raw["console_multiline"])

    # Layout options
    for name in ("prefix_with_datetime", "prefix_with_level"):
        if name in raw:
            values[name] = bool(raw[name])
    for name in ("pid_prefix", "port_prefix"):
        if name in raw:
            values[name] = "" if raw[name] is None else str(raw[name])
    for name in ("date_format", "time_format"):
        if name in raw:
            values[name] = _as_str(raw[name], name)

    # Formatting options
    for style_field in _STYLE_FIELDS.values():
        if style_field in raw:
            values[style_field] = _as_styles(raw[style_field], style_field)

    # Hooks are only honoured in development mode
    for name in ("on_file_write_start", "on_file_write_finish"):
        if name not in raw or raw[name] is None:
            continue
        if not callable(raw[name]):
            raise InvalidConfigurationError(f"Option '{name}' must be callable")
        if dev:
            values[name] = raw[name]
        else:
            logger.debug(f"Hook '{name}' ignored outside development mode")

    return LoggerConfig(**values)


def load_config(path: str) -> LoggerConfig:
    """
    Build a LoggerConfig from a JSON options file.

    Args:
        path: Location of the JSON document.

    Returns:
        LoggerConfig: The normalized configuration.

    Raises:
        InvalidConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidConfigurationError(f"Unable to load logger options from '{path}': {e}") from e

    logger.debug(f"Logger options loaded from {path}")
    return build_config(data)


def resolve_log_directory(value: str) -> str:
    """
    Resolve './' and '../' relative directories against the working directory.

    Any other value (absolute paths, bare names) is returned verbatim.
    """
    if value.startswith(("./", "../")):
        base = os.environ.get("PWD") or os.getcwd()
        return os.path.abspath(os.path.join(base, value))
    return value


# -----------------------------------------------------------------------------
# Private helpers
# -----------------------------------------------------------------------------

def _resolve_aliases(options: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(LoggerConfig)}
    raw: Dict[str, Any] = {}
    for key, value in options.items():
        name = OPTION_ALIASES.get(key, key)
        if name not in known:
            logger.warning(f"Unknown logger option '{key}' ignored")
            continue
        raw[name] = value
    return raw


def _as_str(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise InvalidConfigurationError(
        f"Option '{name}' invalid: expected str, received {type(value).__name__}"
    )


def _as_int(value: Any, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigurationError(
            f"Option '{name}' invalid: expected int, received {type(value).__name__}"
        )
    if value != value:  # NaN
        raise InvalidConfigurationError(f"Option '{name}' invalid: NaN")
    number = int(value)
    if number < minimum:
        raise InvalidConfigurationError(f"Option '{name}' must be >= {minimum}, received {number}")
    return number


def _as_styles(value: Any, name: str) -> StyleList:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        out = []
        for i, item in enumerate(value):
            if item and not isinstance(item, str):
                raise InvalidConfigurationError(
                    f"Option '{name}[{i}]' invalid: expected str, received {type(item).__name__}"
                )
            out.append(item or "")
        return tuple(out)
    raise InvalidConfigurationError(
        f"Option '{name}' invalid: expected list[str], received {type(value).__name__}"
    )


def _as_file_write_mode(value: Any) -> FileWriteMode:
    if isinstance(value, FileWriteMode):
        return value
    mode = _FILE_WRITE_MODE_ALIASES.get(str(value).strip().lower())
    if mode is None:
        logger.warning(f"Unknown file_write_mode '{value}'; falling back to {FileWriteMode.ASYNC.value}")
        return FileWriteMode.ASYNC
    return mode


def _as_multiline(value: Any) -> Multiline:
    if isinstance(value, Multiline):
        return value
    try:
        return Multiline(str(value).strip().lower())
    except ValueError:
        raise InvalidConfigurationError(
            f"Option 'console_multiline' invalid: '{value}'. "
            f"Allowed: {sorted(m.value for m in Multiline)}"
        ) from None
