"""
Terminal Surface
================

Thin wrapper over a Rich console: window size, cursor control, colored
writes, and raw key reads. The render thread is the only caller of the
drawing methods; the key input thread is the only caller of ``read_key``.
"""
from __future__ import annotations

import os
import select
import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator

from rich.console import Console
from rich.control import Control
from rich.style import Style
from rich.text import Text

if os.name == "posix":
    import termios
    import tty

# Keys that are reported by name instead of by character.
LEFT = "LEFT"
RIGHT = "RIGHT"
UP = "UP"
DOWN = "DOWN"
ESC = "ESC"
TAB = "TAB"

_ARROWS = {b"A": UP, b"B": DOWN, b"C": RIGHT, b"D": LEFT}

# how long the rest of an escape sequence may take to arrive
ESC_SEQ_TIMEOUT = 0.08


class Terminal:
    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self.fd: int | None = None
        self._old: Any = None

    # -- size ---------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.console.size.width

    @property
    def height(self) -> int:
        return self.console.size.height

    def resize(self, width: int, height: int):
        """Ask the terminal emulator to grow the window (xterm window ops)."""
        if not self.console.is_terminal:
            return
        self.console.file.write(f"\x1b[8;{height};{width}t")
        self.console.file.flush()

    # -- drawing ------------------------------------------------------------

    def clear(self):
        self.console.control(Control.clear(), Control.home())

    def move_to(self, x: int, y: int):
        self.console.control(Control.move_to(x, y))

    def show_cursor(self, show: bool = True):
        self.console.show_cursor(show)

    def set_alt_screen(self, enable: bool = True):
        """Switch to (or back from) the alternate screen buffer."""
        self.console.set_alt_screen(enable)

    def write(self, text: str, fg: str = "white", bg: str = "black"):
        self.console.print(
            Text(text, style=Style(color=fg, bgcolor=bg)),
            end="",
            soft_wrap=True,
            highlight=False,
        )

    @contextmanager
    def frame(self) -> Iterator[None]:
        """Buffer everything written inside the block into one flush."""
        with self.console:
            yield

    # -- keys ---------------------------------------------------------------

    @property
    def keys_enabled(self) -> bool:
        return os.name == "posix" and sys.stdin.isatty()

    @contextmanager
    def raw_keys(self) -> Iterator[Terminal]:
        """Unbuffered, non-echoing input for the lifetime of the block."""
        if self.keys_enabled:
            self.fd = sys.stdin.fileno()
            self._old = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        try:
            yield self
        finally:
            if self.fd is not None and self._old is not None:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self._old)
            self.fd = None
            self._old = None

    def read_key(self, timeout: float = 0.1) -> str:
        """Return the next key, or "" if none arrived within ``timeout``."""
        if self.fd is None:
            time.sleep(timeout)
            return ""
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return ""
        raw = os.read(self.fd, 1)
        if not raw:
            return ""
        if raw == b"\x1b":
            seq = b""
            deadline = time.time() + ESC_SEQ_TIMEOUT
            while time.time() < deadline:
                rdy, _, _ = select.select([self.fd], [], [], 0.005)
                if not rdy:
                    break
                chunk = os.read(self.fd, 1)
                if not chunk:
                    break
                seq += chunk
                if seq[:1] in (b"[", b"O") and len(seq) > 1 and 0x40 <= seq[-1] <= 0x7E:
                    # final byte, the next key may already be waiting
                    break
            if seq[:1] in (b"[", b"O") and seq[-1:] in _ARROWS:
                return _ARROWS[seq[-1:]]
            return ESC
        if raw == b"\t":
            return TAB
        return raw.decode("utf-8", errors="ignore")
