"""
Monitor tabs and watchers
=========================

A ``MonitorTab`` shows named watchers side by side, two per row. Each
watcher renders itself into one fixed-width column.

Usage:
    tab = MonitorTab(engine, "Metrics")
    latency = tab.create_num_watcher("latency_ms", show_average=True, show_max=True)
    latency.update(12.5)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .commands import WatcherUpdate
from .errors import NamingConflictError
from .tabs import Tab

if TYPE_CHECKING:
    from .engine import Engine

SEPARATOR = "│"


class MonitorTab(Tab):
    def __init__(self, engine: Engine, name: str, debug: bool = False):
        self.watchers: dict[str, Watcher] = {}
        super().__init__(engine, name, debug)

    def add_watcher(self, watcher: Watcher):
        # dict.setdefault is atomic, so two threads racing on one name
        # cannot both win.
        if self.watchers.setdefault(watcher.name, watcher) is not watcher:
            raise NamingConflictError(
                f"watcher {watcher.name!r} already exists in tab {self.name!r}"
            )

    def column_width(self) -> int:
        return max(0, self.engine.terminal.width // 2 - 2)

    def draw(self, allowed_lines: int) -> list[str]:
        if allowed_lines <= 0:
            return []
        width = self.column_width()
        slots = allowed_lines * 2
        names = sorted(self.watchers)[:slots]
        cols = [self.watchers[n].construct_line(width) for n in names]
        cols.extend(" " * width for _ in range(slots - len(cols)))
        return [cols[i] + SEPARATOR + cols[i + 1] for i in range(0, slots, 2)]

    def create_num_watcher(
        self,
        name: str,
        show_current: bool = True,
        show_min: bool = False,
        show_average: bool = False,
        show_max: bool = False,
    ) -> NumWatcher:
        return NumWatcher(self, name, show_current, show_min, show_average, show_max)

    def update(self, name: str, value: float):
        """Queue an update that is applied on the render thread.

        Unknown watcher names raise ``KeyError`` here, in the caller's thread.
        """
        if name not in self.watchers:
            raise KeyError(f"tab {self.name!r} has no watcher named {name!r}")
        self.engine.submit(WatcherUpdate(self, name, value))


class Watcher(ABC):
    def __init__(self, tab: MonitorTab, name: str, show_current: bool = True):
        if not name:
            raise ValueError("watcher name must be a non-empty string")
        self.tab = tab
        self.name = name
        self.show_current = show_current
        tab.add_watcher(self)

    @abstractmethod
    def construct_line(self, allowed_width: int) -> str:
        """
        Render this watcher in at most ``allowed_width`` characters.

        When the full rendering does not fit, return ``allowed_width`` spaces
        rather than a truncated line.
        """

    def update(self, value: float):
        raise NotImplementedError(f"{type(self).__name__} does not accept updates")


def _fmt_number(n: float) -> str:
    if isinstance(n, int) or float(n).is_integer():
        return str(int(n))
    return f"{n:.2f}".rstrip("0").rstrip(".")


class NumWatcher(Watcher):
    """Tracks every value a number has taken."""

    def __init__(
        self,
        tab: MonitorTab,
        name: str,
        show_current: bool = True,
        show_min: bool = False,
        show_average: bool = False,
        show_max: bool = False,
    ):
        self.show_min = show_min
        self.show_average = show_average
        self.show_max = show_max
        self.history: list[float] = []
        super().__init__(tab, name, show_current)

    def update(self, value: float):
        self.history.append(value)

    def current(self) -> float:
        history = self.history
        return history[-1] if history else 0

    def min(self) -> float:
        history = self.history[:]
        return min(history) if history else 0

    def max(self) -> float:
        history = self.history[:]
        return max(history) if history else 0

    def average(self) -> float:
        history = self.history[:]
        return round(sum(history) / len(history), 2) if history else 0

    def construct_line(self, allowed_width: int) -> str:
        value = ""
        if self.show_current:
            value += f"Current: {_fmt_number(self.current())} "
        if self.show_min:
            value += f"Min: {_fmt_number(self.min())} "
        if self.show_average:
            value += f"Avg: {_fmt_number(self.average())} "
        if self.show_max:
            value += f"Max: {_fmt_number(self.max())} "
        size = len(self.name) + len(value)
        if size > allowed_width:
            return " " * max(0, allowed_width)
        return self.name + " " * (allowed_width - size) + value
