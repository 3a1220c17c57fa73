from __future__ import annotations

"""
Log File Persistence.

Appends plain lines to per-level log files and rolls a file over once it
grows past the configured size. The size is read fresh with a stat call
before every write; nothing is cached between writes.

Rotation renames `<name>.<ext>` to `<name>.<ext>.<N>` where N is the number
of directory entries starting with `<name>`, minus one, advanced past any
backup index already taken. Writers living in other processes can still
race between the stat and the rename, so a file may briefly exceed the
limit.
"""

import logging
import os
import threading
from typing import Callable, Dict, Optional, Set, TextIO

from twinlog.errors import FileSystemAccessError
from twinlog.models import FileTarget, FileWriteMode

logger = logging.getLogger(__name__)

ErrorReporter = Callable[[str, BaseException], None]


# ==============================================================================
# DIRECTORY MANAGEMENT
# ==============================================================================

def ensure_directory(directory: str) -> str:
    """
    Create the log directory hierarchy if it is missing.

    Args:
        directory: Target folder.

    Returns:
        str: The same directory.

    Raises:
        FileSystemAccessError: The folder cannot be created.
    """
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise FileSystemAccessError(
            f"Log directory '{directory}' inaccessible and cannot be created: {e}"
        ) from e
    return directory


def next_rotation_index(target: FileTarget) -> int:
    """
    Pick the first unused backup index for a log file.

    The search starts at the number of directory entries sharing the base
    filename, minus the live file, and moves up past any index already on
    disk so an existing backup is never overwritten.
    """
    matches = [name for name in os.listdir(target.directory) if name.startswith(target.filename)]
    index = max(len(matches) - 1, 0)
    while os.path.exists(f"{target.path}.{index}"):
        index += 1
    return index


# ==============================================================================
# ROTATION MANAGER
# ==============================================================================

class FileRotationManager:
    """
    Size-checked appends to log files.

    Attributes:
        mode: ASYNC reopens the file on every write; STREAM keeps one
            handle per path open until an error or `close()`.
    """

    def __init__(self, mode: FileWriteMode, report_error: Optional[ErrorReporter] = None) -> None:
        self.mode = mode
        self._report_error = report_error
        self._streams: Dict[str, TextIO] = {}
        self._disabled: Set[str] = set()
        self._released = False
        self._lock = threading.Lock()

    @property
    def disabled_filenames(self) -> Set[str]:
        return set(self._disabled)

    def is_enabled(self, target: FileTarget) -> bool:
        return bool(target.filename) and target.filename not in self._disabled

    def write_with_rotation(self, target: FileTarget, text: str) -> bool:
        """
        Rotate the target file if it is too large, then append one line.

        Args:
            target: Directory, filename, extension and threshold of the file.
            text: Line content, without the trailing newline.

        Returns:
            bool: False when the target is disabled and nothing was written.

        Raises:
            OSError: The append itself failed.
        """
        if not self.is_enabled(target):
            return False

        path = target.path
        self._rotate_if_needed(target, path)

        if self.mode is FileWriteMode.STREAM:
            self._write_stream(path, text)
        else:
            self._write_append(path, text)
        return True

    def close(self) -> None:
        """
        Release every open stream handle.

        Later writes fall back to one-shot appends so no handle outlives the
        manager.
        """
        with self._lock:
            self._released = True
            paths = list(self._streams)
        for path in paths:
            self._close_stream(path)

    # --------------------------------------------------------------------------
    # Rotation
    # --------------------------------------------------------------------------

    def _rotate_if_needed(self, target: FileTarget, path: str) -> None:
        if target.size_limit <= 0:
            return

        try:
            size = os.stat(path).st_size
        except OSError:
            # Missing file: nothing to roll over yet
            return

        if size <= target.size_limit:
            return

        self._close_stream(path)
        try:
            rotated = f"{path}.{next_rotation_index(target)}"
            os.rename(path, rotated)
        except OSError as e:
            self._disabled.add(target.filename)
            logger.error(f"Rotation of {path} failed; file output disabled for '{target.filename}'")
            if self._report_error:
                self._report_error("Failed to rename large file so killing file writing for this file", e)
            return

        logger.debug(f"Rotated {path} ({size} bytes) to {rotated}")

    # --------------------------------------------------------------------------
    # Write strategies
    # --------------------------------------------------------------------------

    @staticmethod
    def _write_append(path: str, text: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{text}\n")

    def _write_stream(self, path: str, text: str) -> None:
        with self._lock:
            released = self._released
            stream = self._streams.get(path)
            if stream is None and not released:
                stream = open(path, "a", encoding="utf-8")
                self._streams[path] = stream

        if released:
            self._write_append(path, text)
            return

        try:
            stream.write(f"{text}\n")
            stream.flush()
        except (OSError, ValueError):
            # ValueError: handle closed underneath us
            self._close_stream(path)
            raise

    def _close_stream(self, path: str) -> None:
        with self._lock:
            stream = self._streams.pop(path, None)
        if stream is None:
            return
        try:
            stream.close()
        except OSError as e:
            logger.debug(f"Closing stream for {path} failed: {e}")
