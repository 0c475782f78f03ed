"""
Log tabs and loggers
====================

A ``LogTab`` shows the tail of its messages, wrapping long lines. Messages
reach it through a ``Logger``, which formats each message at call time and
queues it for the render thread. The render thread appends it to the tab and
forwards it to the log writer for persistence.

Usage:
    tab = LogTab(engine, "Server")
    log = tab.get_logger()
    log.info("listening on :8080")
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .commands import LogAppend
from .tabs import Tab

if TYPE_CHECKING:
    from .engine import Engine


class LogLevel(enum.IntEnum):
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4


def format_ts(ts: datetime) -> str:
    return ts.strftime("%H:%M:%S.") + f"{ts.microsecond // 1000:03d}"


@dataclass(frozen=True)
class LogMessage:
    tab: LogTab
    level: LogLevel
    text: str
    timestamp: datetime
    formatted: str = field(init=False)

    def __post_init__(self):
        formatted = f"{format_ts(self.timestamp)} [{self.level.name}] {self.text}"
        object.__setattr__(self, "formatted", formatted)


class LogTab(Tab):
    def __init__(self, engine: Engine, name: str, debug: bool = False):
        # list.append is atomic, so any thread may append; only the render
        # thread reads.
        self.lines: list[str] = []
        super().__init__(engine, name, debug)
        if not debug:
            engine.log_writer.start()

    def append(self, line: str):
        self.lines.append(line)

    def draw(self, allowed_lines: int) -> list[str]:
        if allowed_lines <= 0:
            return []
        width = max(1, self.engine.terminal.width)
        recent = self.lines[-allowed_lines:]
        rows = [rows_needed(line, width) for line in recent]
        total = sum(rows)
        start = 0
        while total > allowed_lines and start < len(recent):
            total -= rows[start]
            start += 1
        return recent[start:]

    def get_logger(self) -> Logger:
        return Logger(self)


def rows_needed(line: str, width: int) -> int:
    """Terminal rows taken by ``line`` at ``width`` columns (at least one)."""
    return max(1, math.ceil(len(line) / width))


class Logger:
    """Severity methods bound to one log tab. Safe to call from any thread."""

    def __init__(self, tab: LogTab):
        self.tab = tab

    def log(self, level: LogLevel, message: Any):
        msg = LogMessage(self.tab, LogLevel(level), str(message), datetime.now())
        self.tab.engine.submit(LogAppend(self.tab, msg))

    def debug(self, message: Any):
        self.log(LogLevel.DEBUG, message)

    def info(self, message: Any):
        self.log(LogLevel.INFO, message)

    def warning(self, message: Any):
        self.log(LogLevel.WARNING, message)

    def error(self, message: Any):
        self.log(LogLevel.ERROR, message)

    def fatal(self, message: Any):
        self.log(LogLevel.FATAL, message)
