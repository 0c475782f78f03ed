"""
Render Engine
=============

One ``Engine`` owns a dashboard: the tab registry, the active tab, the
command queue and the threads that serve them.

Any thread may ``submit`` commands. A single render thread drains the queue
completely, then redraws the whole window:

    row 0            ═══ <active tab> ═══════════════════
    rows 1..h-4      lines returned by the active tab's draw()
    rows h-3..h-1    ╔══════════════════════════════════╗
                     ║ <tab> <tab> <tab>                ║
                     ╚══════════════════════════════════╝

Usage:
    engine = Engine()
    log = LogTab(engine, "Server").get_logger()   # starts the engine
    log.info("hello")
"""
from __future__ import annotations

import logging
import math
import queue
import threading
import time

from .commands import Command, KeyInput, LogAppend, WatcherUpdate
from .config import DashboardConfig
from .errors import DrawOverflowError, NamingConflictError
from .keys import KeyInputProducer, dispatch_key
from .log_writer import LogWriter
from .tabs import Tab
from .terminal import Terminal

log = logging.getLogger(__name__)

HEADER_ROWS = 1
FOOTER_ROWS = 3
RESERVED_ROWS = HEADER_ROWS + FOOTER_ROWS

# (foreground, background) pairs
RULE_STYLE = ("white", "blue")
ACTIVE_STYLE = ("black", "bright_yellow")
CONTENT_STYLE = ("white", "black")


class Engine:
    def __init__(
        self,
        terminal: Terminal | None = None,
        config: DashboardConfig | None = None,
    ):
        self.config = config or DashboardConfig.from_env()
        self.terminal = terminal or Terminal()
        self.commands: queue.SimpleQueue[Command] = queue.SimpleQueue()
        self.tabs: dict[str, Tab] = {}
        self.active_tab: Tab | None = None
        self.log_writer = LogWriter(self.config.log_dir, archive=self.config.archive_logs)
        self.keys = KeyInputProducer(self)
        self.error: BaseException | None = None

        self._registry_lock = threading.Lock()
        self._start_lock = threading.Lock()
        self._has_tab = threading.Event()
        self._stop = threading.Event()
        self._render_thread: threading.Thread | None = None

        # cached layout, refreshed when the window size changes
        self._width = 0
        self._height = 0
        self._min_width = self.config.min_width

    # -- registry -----------------------------------------------------------

    def register(self, tab: Tab, start: bool = True):
        with self._registry_lock:
            if tab.name in self.tabs:
                raise NamingConflictError(f"a tab named {tab.name!r} already exists")
            self.tabs[tab.name] = tab
            if self.active_tab is None:
                self.active_tab = tab
        self._has_tab.set()
        if start:
            self.start()

    def tab_names(self) -> list[str]:
        return sorted(self.tabs)

    def get_tab(self, name: str) -> Tab:
        return self.tabs[name]

    # -- lifecycle ----------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._render_thread is not None and self._render_thread.is_alive()

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def start(self):
        """Start the render and key input threads. Safe to call repeatedly."""
        with self._start_lock:
            if self._render_thread is not None:
                return
            self._render_thread = threading.Thread(
                target=self.run, name="tabdash-render", daemon=True,
            )
            self._render_thread.start()
            if self.config.key_input:
                self.keys.start()

    def stop(self, timeout: float | None = 2.0):
        """Stop all threads, flush pending log writes and restore the cursor."""
        self._stop.set()
        self._has_tab.set()
        if self._render_thread is not None:
            self._render_thread.join(timeout)
        self.keys.join(timeout)
        if self.log_writer.running:
            self.log_writer.stop(timeout)

    def run(self):
        self._has_tab.wait()
        term = self.terminal
        term.set_alt_screen(True)
        term.show_cursor(False)
        term.clear()
        try:
            while not self._stop.is_set():
                self.run_frame()
                time.sleep(self.config.frame_interval)
        except Exception as exc:
            self.error = exc
            log.exception("render loop aborted")
            raise
        finally:
            term.show_cursor(True)
            term.set_alt_screen(False)

    # -- commands -----------------------------------------------------------

    def submit(self, command: Command):
        self.commands.put(command)

    def drain(self) -> int:
        """Execute every queued command in order. Render thread only."""
        n = 0
        while True:
            try:
                command = self.commands.get_nowait()
            except queue.Empty:
                return n
            self.execute(command)
            n += 1

    def execute(self, command: Command):
        if isinstance(command, KeyInput):
            dispatch_key(self, command)
        elif isinstance(command, LogAppend):
            command.tab.append(command.message.formatted)
            self.log_writer.put(command.message)
        elif isinstance(command, WatcherUpdate):
            command.tab.watchers[command.watcher_name].update(command.value)
        else:
            raise TypeError(f"unknown command {command!r}")

    # -- tabs ---------------------------------------------------------------

    def switch_tab(self, back: bool = False):
        """Activate the next (or previous) tab in name order, wrapping."""
        names = self.tab_names()
        if not names:
            return
        current = self.active_tab.name if self.active_tab is not None else names[0]
        i = names.index(current) if current in names else 0
        i = (i - 1 if back else i + 1) % len(names)
        self.set_active_tab(self.tabs[names[i]])

    def set_active_tab(self, tab: Tab):
        self.active_tab = tab
        # blank the old frame, tabs may differ in height
        term = self.terminal
        blank = " " * term.width
        with term.frame():
            for row in range(term.height):
                term.move_to(0, row)
                term.write(blank, *CONTENT_STYLE)
            term.move_to(0, 0)

    # -- frame --------------------------------------------------------------

    def run_frame(self):
        self.drain()

        tab = self.active_tab
        if tab is None:
            return
        term = self.terminal

        width, height = term.width, term.height
        if width != self._width or height != self._height:
            self._width, self._height = width, height
            term.clear()

        if height < self.config.min_height or width < self._min_width:
            term.resize(max(width, self._min_width), max(height, self.config.min_height))

        available = max(0, height - RESERVED_ROWS)
        lines = tab.draw(available)
        if len(lines) > available:
            raise DrawOverflowError(
                f"tab {tab.name!r} drew {len(lines)} lines, only {available} allowed"
            )

        names = self.tab_names()
        self._min_width = max(
            self.config.min_width, 4 + sum(len(n) + 2 for n in names),
        )

        with term.frame():
            term.move_to(0, 0)
            self._draw_header(tab.name, width)
            self._draw_content(lines, width, available)
            self._draw_footer(names, tab.name, width, available + HEADER_ROWS)
            term.move_to(0, 0)

    def _draw_header(self, name: str, width: int):
        term = self.terminal
        title = name[: max(0, width - 3)]
        term.write("═══"[:width], *RULE_STYLE)
        term.write(title, *ACTIVE_STYLE)
        term.write("═" * max(0, width - len(title) - 3), *RULE_STYLE)

    def _draw_content(self, lines: list[str], width: int, available: int):
        term = self.terminal
        row = 0
        for line in lines:
            for chunk in pad_line(line, width):
                if row >= available:
                    return
                term.move_to(0, HEADER_ROWS + row)
                term.write(chunk, *CONTENT_STYLE)
                row += 1
        blank = " " * width
        while row < available:
            term.move_to(0, HEADER_ROWS + row)
            term.write(blank, *CONTENT_STYLE)
            row += 1

    def _draw_footer(self, names: list[str], active: str, width: int, top: int):
        term = self.terminal
        inner = max(0, width - 2)

        term.move_to(0, top)
        term.write(("╔" + "═" * inner + "╗")[:width], *RULE_STYLE)

        term.move_to(0, top + 1)
        term.write("║"[:width], *RULE_STYLE)
        used = 0
        for name in names:
            label = f" {name} "[: max(0, inner - used)]
            if not label:
                break
            style = ACTIVE_STYLE if name == active else RULE_STYLE
            term.write(label, *style)
            used += len(label)
        if width >= 2:
            term.write(" " * (inner - used) + "║", *RULE_STYLE)

        term.move_to(0, top + 2)
        term.write(("╚" + "═" * inner + "╝")[:width], *RULE_STYLE)


def pad_line(line: str, width: int) -> list[str]:
    """Split ``line`` into rows of exactly ``width`` characters, padding the last."""
    if width <= 0:
        return []
    rows = max(1, math.ceil(len(line) / width))
    padded = line.ljust(rows * width)
    return [padded[i * width:(i + 1) * width] for i in range(rows)]
