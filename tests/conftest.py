"""
Pytest configuration and fixtures.
"""

import sys
from contextlib import contextmanager
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tabdash import DashboardConfig, Engine  # noqa: E402


class ScreenTerminal:
    """In-memory stand-in for ``tabdash.terminal.Terminal``."""

    def __init__(self, width: int = 40, height: int = 12, keys=()):
        self.width = width
        self.height = height
        self.keys = list(keys)
        self.clears = 0
        self.resizes: list[tuple[int, int]] = []
        self.writes: list[tuple[str, str, str]] = []
        self.cursor_visible = True
        self.alt_screen = False
        self.alt_screen_entered = False
        self.x = 0
        self.y = 0
        self.grid = self._blank()

    def _blank(self):
        return [[" "] * self.width for _ in range(self.height)]

    def row(self, y: int) -> str:
        return "".join(self.grid[y])

    def screen(self) -> list[str]:
        return [self.row(y) for y in range(self.height)]

    def resize(self, width: int, height: int):
        self.resizes.append((width, height))

    def clear(self):
        self.clears += 1
        self.grid = self._blank()
        self.x = self.y = 0

    def move_to(self, x: int, y: int):
        self.x, self.y = x, y

    def show_cursor(self, show: bool = True):
        self.cursor_visible = show

    def set_alt_screen(self, enable: bool = True):
        self.alt_screen = enable
        self.alt_screen_entered = self.alt_screen_entered or enable

    def write(self, text: str, fg: str = "white", bg: str = "black"):
        self.writes.append((text, fg, bg))
        for ch in text:
            if self.x >= self.width:
                self.x = 0
                self.y += 1
            if 0 <= self.y < self.height:
                self.grid[self.y][self.x] = ch
            self.x += 1

    @contextmanager
    def frame(self):
        yield

    @contextmanager
    def raw_keys(self):
        yield self

    def read_key(self, timeout: float = 0.1) -> str:
        return self.keys.pop(0) if self.keys else ""


@pytest.fixture
def terminal():
    return ScreenTerminal(width=40, height=12)


@pytest.fixture
def config(tmp_path):
    return DashboardConfig(log_dir=str(tmp_path / "Logs"), key_input=False, refresh_hz=100)


@pytest.fixture
def engine(terminal, config):
    eng = Engine(terminal=terminal, config=config)
    yield eng
    eng.stop(timeout=1.0)
