"""
Tests for key input dispatch.
"""

from __future__ import annotations

from tabdash import DashboardConfig, Engine, LogTab
from tabdash.commands import KeyInput
from tabdash.keys import KeyInputProducer, dispatch_key
from tabdash.terminal import DOWN, LEFT, RIGHT, UP

from conftest import ScreenTerminal


def _engine(keys=()) -> tuple[Engine, LogTab, LogTab, LogTab]:
    engine = Engine(
        terminal=ScreenTerminal(keys=keys),
        config=DashboardConfig(key_input=False),
    )
    a = LogTab(engine, "A", debug=True)
    b = LogTab(engine, "B", debug=True)
    c = LogTab(engine, "C", debug=True)
    return engine, a, b, c


def test_right_and_left_switch_tabs() -> None:
    engine, a, b, c = _engine()
    dispatch_key(engine, KeyInput(a, RIGHT))
    assert engine.active_tab is b
    dispatch_key(engine, KeyInput(b, LEFT))
    dispatch_key(engine, KeyInput(a, LEFT))
    assert engine.active_tab is c


def test_arrow_switch_respects_tagged_tab() -> None:
    engine, a, b, c = _engine()
    a.allow_arrow_tab_switch = False
    dispatch_key(engine, KeyInput(a, RIGHT))
    assert engine.active_tab is a


def test_vertical_arrows_and_other_keys_are_ignored() -> None:
    engine, a, b, c = _engine()
    for key in (UP, DOWN, "q", "ESC"):
        dispatch_key(engine, KeyInput(a, key))
    assert engine.active_tab is a


def test_switch_uses_order_at_execution_time() -> None:
    engine, a, b, c = _engine()
    engine.submit(KeyInput(engine.active_tab, RIGHT))
    # registered after the key was queued, sorts between A and B
    ab = LogTab(engine, "AB", debug=True)
    engine.drain()
    assert engine.active_tab is ab


def test_producer_tags_key_with_active_tab() -> None:
    engine, a, b, c = _engine(keys=[RIGHT, RIGHT])
    producer = KeyInputProducer(engine)

    assert producer.step() == RIGHT
    command = engine.commands.get_nowait()
    assert command == KeyInput(a, RIGHT)
    engine.execute(command)

    assert producer.step() == RIGHT
    assert engine.commands.get_nowait().tab is b
    assert producer.step() == ""


def test_producer_run_exits_on_stop() -> None:
    engine, a, b, c = _engine(keys=[RIGHT])
    engine.stop()
    KeyInputProducer(engine).run()
    assert engine.commands.empty()
