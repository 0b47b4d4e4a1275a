"""Console and file logger with coloured level tags."""

from __future__ import annotations

import sys
import threading
from datetime import datetime
from enum import IntEnum
from typing import IO, Optional

_RESET = "\033[0m"


class LogLevel(IntEnum):
    """Severity of a log message; messages below the logger's level are dropped."""

    INFO = 0
    WARN = 1
    ERROR = 2

    @property
    def tag(self) -> str:
        return {LogLevel.INFO: "INFO", LogLevel.WARN: "WARN", LogLevel.ERROR: "ERROR"}[self]

    @property
    def color(self) -> str:
        return {
            LogLevel.INFO: "\033[32m",
            LogLevel.WARN: "\033[1;33m",
            LogLevel.ERROR: "\033[1;31m",
        }[self]


def _format_part(part: object) -> str:
    if isinstance(part, float):
        return format(part, "g")
    return str(part)


class Logger:
    """Writes timestamped messages to a console stream and optionally a file."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()
        self._file: Optional[IO[str]] = None
        self.log_filename = ""
        self.level = LogLevel.INFO

    def set_logfile(self, filename: str = "") -> None:
        """Append to ``filename`` from now on; an empty name stops file logging."""
        if self._file is not None:
            self._file.close()
            self._file = None
        if not filename:
            return
        self.log_filename = filename
        try:
            self._file = open(filename, "a", encoding="utf-8")
        except OSError:
            self.error("Failed to open log file: ", filename)

    def set_level(self, level: int = 0) -> None:
        """Set the minimum level; out-of-range values fall back to INFO."""
        if not 0 <= int(level) <= 2:
            self.warn("Invalid log level: ", level)
            self.warn("Using default log level: ", 0)
            self.level = LogLevel.INFO
            return
        self.level = LogLevel(int(level))

    def info(self, *args: object) -> None:
        self._log(LogLevel.INFO, args)

    def warn(self, *args: object) -> None:
        self._log(LogLevel.WARN, args)

    def error(self, *args: object) -> None:
        self._log(LogLevel.ERROR, args)

    def close(self) -> None:
        """Close the log file, if one is open."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def _log(self, level: LogLevel, args: tuple) -> None:
        if level < self.level:
            return
        message = "".join(_format_part(a) for a in args)
        with self._lock:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            stream = self._stream if self._stream is not None else sys.stdout
            stream.write(f"{level.color}[{level.tag}] {_RESET}[{timestamp}] {message}\n")
            stream.flush()
            if self._file is not None:
                self._file.write(f"[{timestamp}] [{level.tag}] {message}\n")
                self._file.flush()


_instance: Optional[Logger] = None
_instance_lock = threading.Lock()


def get_logger() -> Logger:
    """Return the shared process-wide logger."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = Logger()
        return _instance