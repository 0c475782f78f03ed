"""
Tests for monitor tabs and numeric watchers.
"""

from __future__ import annotations

import threading

import pytest
from hypothesis import given, strategies as st

from tabdash import DashboardConfig, Engine, MonitorTab
from tabdash.errors import NamingConflictError
from tabdash.monitor import SEPARATOR, NumWatcher

from conftest import ScreenTerminal


def _monitor(width: int = 30) -> MonitorTab:
    engine = Engine(
        terminal=ScreenTerminal(width=width, height=12),
        config=DashboardConfig(key_input=False),
    )
    return MonitorTab(engine, "Metrics", debug=True)


def test_aggregates() -> None:
    w = _monitor().create_num_watcher("v")
    for value in (3, 7, 5):
        w.update(value)
    assert w.min() == 3
    assert w.max() == 7
    assert w.average() == 5.00
    assert w.current() == 5


def test_aggregates_default_to_zero() -> None:
    w = _monitor().create_num_watcher("v")
    assert w.min() == 0
    assert w.max() == 0
    assert w.average() == 0
    assert w.current() == 0


def test_average_rounds_to_two_decimals() -> None:
    w = _monitor().create_num_watcher("v")
    for value in (1, 2, 2):
        w.update(value)
    assert w.average() == 1.67


def test_concurrent_updates_are_all_kept() -> None:
    w = _monitor().create_num_watcher("v")

    def feed():
        for i in range(500):
            w.update(i)

    threads = [threading.Thread(target=feed) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(w.history) == 2000
    assert w.max() == 499


def test_construct_line_layout() -> None:
    w = _monitor().create_num_watcher("cpu")
    w.update(5)
    line = w.construct_line(20)
    assert line == "cpu" + " " * 6 + "Current: 5 "
    assert len(line) == 20


def test_construct_line_field_order() -> None:
    w = _monitor().create_num_watcher(
        "lat", show_current=True, show_min=True, show_average=True, show_max=True,
    )
    for value in (1.5, 4, 2):
        w.update(value)
    line = w.construct_line(60)
    assert len(line) == 60
    assert line.startswith("lat ")
    assert line.endswith("Current: 2 Min: 1.5 Avg: 2.5 Max: 4 ")


def test_construct_line_too_narrow_is_blank() -> None:
    w = _monitor().create_num_watcher(
        "requests_per_second",
        show_current=True, show_min=True, show_average=True, show_max=True,
    )
    w.update(123.456)
    assert w.construct_line(25) == " " * 25


def test_construct_line_without_fields() -> None:
    w = _monitor().create_num_watcher("label", show_current=False)
    assert w.construct_line(8) == "label   "


def test_duplicate_watcher_name_raises() -> None:
    tab = _monitor()
    tab.create_num_watcher("x")
    with pytest.raises(NamingConflictError):
        NumWatcher(tab, "x")
    assert len(tab.watchers) == 1


def test_draw_two_columns_sorted() -> None:
    tab = _monitor(width=30)  # columns of 13
    for name in ("b", "c", "a"):
        tab.create_num_watcher(name).update(1)

    lines = tab.draw(2)

    blank = " " * 13
    assert lines == [
        tab.watchers["a"].construct_line(13) + SEPARATOR + tab.watchers["b"].construct_line(13),
        tab.watchers["c"].construct_line(13) + SEPARATOR + blank,
    ]


def test_draw_takes_only_what_fits() -> None:
    tab = _monitor(width=30)
    for name in ("d", "c", "b", "a"):
        tab.create_num_watcher(name)
    lines = tab.draw(1)
    assert len(lines) == 1
    assert lines[0].startswith("a")
    assert lines[0].split(SEPARATOR)[1].startswith("b")


@given(
    count=st.integers(min_value=0, max_value=30),
    width=st.integers(min_value=4, max_value=200),
    allowed=st.integers(min_value=0, max_value=20),
)
def test_draw_fits_budget(count: int, width: int, allowed: int) -> None:
    tab = _monitor(width=width)
    for i in range(count):
        tab.create_num_watcher(f"w{i:02d}", show_max=True).update(i)
    lines = tab.draw(allowed)
    assert len(lines) == allowed
    col = width // 2 - 2
    assert all(len(line) == 2 * col + 1 for line in lines)


def test_update_command_applies_on_drain() -> None:
    tab = _monitor()
    w = tab.create_num_watcher("queued")
    tab.update("queued", 4)
    assert w.history == []
    tab.engine.drain()
    assert w.history == [4]


def test_update_unknown_watcher_raises_in_caller() -> None:
    tab = _monitor()
    tab.create_num_watcher("errors")
    with pytest.raises(KeyError):
        tab.update("erorrs", 1)
    assert tab.engine.commands.empty()
