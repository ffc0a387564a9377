"""Levelled diagnostic logger with a bounded entry buffer and pluggable outputs."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO

ANSI_COLOR_RED = "\033[31m"
ANSI_COLOR_GREEN = "\033[32m"
ANSI_COLOR_YELLOW = "\033[33m"
ANSI_COLOR_BLUE = "\033[34m"
ANSI_COLOR_CYAN = "\033[36m"
ANSI_COLOR_RESET = "\033[0m"

DEFAULT_BUFFER_SIZE = 100


class LogLevel(IntEnum):
    """Severity levels; a logger keeps messages at or below its own level."""

    OFF = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    VERBOSE = 5


_COLORS = {
    LogLevel.ERROR: ANSI_COLOR_RED,
    LogLevel.WARNING: ANSI_COLOR_YELLOW,
    LogLevel.INFO: ANSI_COLOR_GREEN,
    LogLevel.DEBUG: ANSI_COLOR_CYAN,
    LogLevel.VERBOSE: ANSI_COLOR_BLUE,
}


@dataclass
class LogEntry:
    """One logged message."""

    timestamp: int
    level: LogLevel
    message: str
    source: int = 0


LogOutput = Callable[[LogEntry], None]


def level_name(level) -> str:
    """Return the upper-case name of a level, or ``"UNKNOWN"``."""
    try:
        return LogLevel(level).name
    except ValueError:
        return "UNKNOWN"


def _monotonic_ms_clock() -> Callable[[], int]:
    start = time.monotonic()
    return lambda: int((time.monotonic() - start) * 1000)


class Logger:
    """Buffers log entries and writes them to a stream and to callbacks.

    Errors are written out at once as well as buffered. When the buffer is
    full, new entries overwrite old slots in turn, starting from the first.
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        clock: Callable[[], int] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self._level = LogLevel(level)
        self._buffer_size = buffer_size
        self._clock = clock if clock is not None else _monotonic_ms_clock()
        self._stream = stream
        self._serial_enabled = True
        self._buffer: list[LogEntry] = []
        self._replace_index = 0
        self._outputs: list[LogOutput] = []

    @property
    def level(self) -> LogLevel:
        return self._level

    @level.setter
    def level(self, level: LogLevel) -> None:
        self._level = LogLevel(level)
        self.info(f"Log level set to {level_name(self._level)}")

    def error(self, message: str, source: int = 0) -> None:
        self._log(LogLevel.ERROR, message, source)

    def warning(self, message: str, source: int = 0) -> None:
        self._log(LogLevel.WARNING, message, source)

    def info(self, message: str, source: int = 0) -> None:
        self._log(LogLevel.INFO, message, source)

    def debug(self, message: str, source: int = 0) -> None:
        self._log(LogLevel.DEBUG, message, source)

    def verbose(self, message: str, source: int = 0) -> None:
        self._log(LogLevel.VERBOSE, message, source)

    def process_pending(self) -> None:
        """Write out every buffered entry, then empty the buffer."""
        for entry in self._buffer:
            self._output(entry)
        self.clear_buffer()

    def clear_buffer(self) -> None:
        self._buffer.clear()
        self._replace_index = 0

    def enable_serial_output(self, enable: bool = True) -> None:
        self._serial_enabled = enable

    def add_output(self, callback: LogOutput) -> None:
        """Register a callable that receives each entry as it is written out."""
        if not callable(callback):
            raise TypeError("log output must be callable")
        self._outputs.append(callback)

    def clear_outputs(self) -> None:
        self._outputs.clear()

    def __len__(self) -> int:
        return len(self._buffer)

    def entry(self, index: int) -> LogEntry:
        """Return the buffered entry at ``index``."""
        if not 0 <= index < len(self._buffer):
            raise IndexError(f"log entry index {index} out of range")
        return self._buffer[index]

    def format_entry(self, entry: LogEntry) -> str:
        """Render an entry as ``[timestamp] LEVEL [source]: message`` with colour."""
        color = _COLORS.get(entry.level, "")
        reset = ANSI_COLOR_RESET if color else ""
        source = f" [{entry.source}]" if entry.source > 0 else ""
        return f"{color}[{entry.timestamp}] {level_name(entry.level)}{source}: {entry.message}{reset}"

    def _log(self, level: LogLevel, message: str, source: int) -> None:
        if level == LogLevel.OFF or level > self._level:
            return
        entry = LogEntry(self._clock(), level, message, source)
        if level == LogLevel.ERROR:
            self._output(entry)
        if len(self._buffer) < self._buffer_size:
            self._buffer.append(entry)
            return
        if self._replace_index >= self._buffer_size:
            self._replace_index = 0
        self._buffer[self._replace_index] = entry
        self._replace_index += 1

    def _output(self, entry: LogEntry) -> None:
        if self._serial_enabled:
            stream = self._stream if self._stream is not None else sys.stdout
            print(self.format_entry(entry), file=stream)
        for callback in self._outputs:
            callback(entry)