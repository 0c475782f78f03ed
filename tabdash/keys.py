"""
Key Input Producer
==================

A dedicated thread blocks on raw key reads and turns every keystroke into a
``KeyInput`` command. Keys are never handled on the reading thread: they go
through the same queue as every other mutation, so tab switches and redraws
stay in a deterministic order.
"""
from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from .commands import KeyInput
from .terminal import DOWN, LEFT, RIGHT, UP

if TYPE_CHECKING:
    from .engine import Engine

log = logging.getLogger(__name__)

READ_TIMEOUT = 0.1


class KeyInputProducer:
    def __init__(self, engine: Engine):
        self.engine = engine
        self._thread: threading.Thread | None = None

    def start(self):
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self.run, name="tabdash-keys", daemon=True,
        )
        self._thread.start()

    def join(self, timeout: float | None = None):
        if self._thread is not None:
            self._thread.join(timeout)

    def run(self):
        terminal = self.engine.terminal
        with terminal.raw_keys():
            while not self.engine.stopping:
                self.step()
        log.debug("key input thread exiting")

    def step(self) -> str:
        """Read at most one key and queue it. Returns the key read, or ""."""
        key = self.engine.terminal.read_key(READ_TIMEOUT)
        if key:
            self.engine.submit(KeyInput(self.engine.active_tab, key))
        return key


def dispatch_key(engine: Engine, command: KeyInput):
    """Apply a key on the render thread."""
    key = command.key
    if key in (LEFT, RIGHT):
        tab = command.tab
        if tab is not None and tab.allow_arrow_tab_switch:
            engine.switch_tab(back=key == LEFT)
        # otherwise reserved for horizontal scrolling inside the tab
    elif key in (UP, DOWN):
        pass  # reserved for vertical scrolling inside the tab
