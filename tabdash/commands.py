"""
Commands
========

Every mutation of dashboard state is one of these records. Any thread may
build one and hand it to ``Engine.submit``; the render thread executes them
one by one, in submission order, before drawing the next frame.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .logs import LogMessage, LogTab
    from .monitor import MonitorTab
    from .tabs import Tab


@dataclass(frozen=True)
class KeyInput:
    tab: Tab | None  # tab that was active when the key was read
    key: str


@dataclass(frozen=True)
class LogAppend:
    tab: LogTab
    message: LogMessage


@dataclass(frozen=True)
class WatcherUpdate:
    tab: MonitorTab
    watcher_name: str
    value: float


Command = Union[KeyInput, LogAppend, WatcherUpdate]
