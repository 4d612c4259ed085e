"""
Log destinations for user-facing helper messages.

A host application passes any object with a ``send(message, level, show_in_ui)``
method. Without one, messages go to the console with a colour per level.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, TextIO, Tuple

import structlog

from fastsqlite.core.config import Config


class LogLevel(str, Enum):
    """Severity of a message sent to a log sink."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogSink(Protocol):
    """Anything able to receive leveled text messages."""

    def send(self, message: str, level: LogLevel, show_in_ui: bool) -> None:
        ...


# ANSI sequences: black background with a per-level foreground
_ESC = "\033["
_RESET = f"{_ESC}0m"
_LEVEL_COLORS = {
    LogLevel.INFO: f"{_ESC}40;37m",
    LogLevel.WARNING: f"{_ESC}40;33m",
    LogLevel.ERROR: f"{_ESC}40;31m",
}


class ConsoleLogSink:
    """Fallback sink writing one colorized line per message."""

    def __init__(self, stream: Optional[TextIO] = None, *, colors: Optional[bool] = None) -> None:
        self._stream = stream
        self.colors = Config.CONSOLE_COLORS if colors is None else colors

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so redirected stdout (pytest capsys) is honoured
        return self._stream or sys.stdout

    def send(self, message: str, level: LogLevel, show_in_ui: bool = False) -> None:
        stream = self.stream
        if not self.colors:
            stream.write(f"{message}\n")
        else:
            stream.write(f"{_LEVEL_COLORS[LogLevel(level)]}{message}{_RESET}\n")
        stream.flush()


class StructlogLogSink:
    """Sink forwarding messages to structlog, for hosts that already collect logs."""

    def __init__(self, name: str = "fastsqlite") -> None:
        self._logger = structlog.get_logger(name)

    def send(self, message: str, level: LogLevel, show_in_ui: bool = False) -> None:
        log_method = getattr(self._logger, LogLevel(level).value)
        log_method("helper_message", message=message, show_in_ui=show_in_ui)


@dataclass
class MemoryLogSink:
    """Keeps every message in memory; handy for hosts polling messages and for tests."""

    records: List[Tuple[str, LogLevel, bool]] = field(default_factory=list)

    def send(self, message: str, level: LogLevel, show_in_ui: bool = False) -> None:
        self.records.append((message, LogLevel(level), show_in_ui))

    @property
    def messages(self) -> List[str]:
        return [message for message, _, _ in self.records]

    def errors(self) -> List[str]:
        return [message for message, level, _ in self.records if level is LogLevel.ERROR]

    def clear(self) -> None:
        self.records.clear()
