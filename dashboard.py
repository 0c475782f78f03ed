#!/usr/bin/env python3
"""
tabdash demo -- tabbed terminal dashboard
=========================================
Runs a sample dashboard: three log tabs fed by worker threads at different
rates and a Metrics tab with numeric watchers.

Usage:
    python dashboard.py
    python dashboard.py --hz 30 --log-dir /tmp/demo-logs
    python dashboard.py --debug-log tabdash.log
Controls:
    left / right                                # previous / next tab
    ctrl+c                                      # quit
"""

from __future__ import annotations

import argparse
import logging
import random
import threading
import time
from datetime import timedelta

from rich.console import Console

from tabdash import DashboardConfig, Engine, LogTab, MonitorTab
from tabdash.config import DEFAULT_HZ, DEFAULT_LOG_DIR


# ---------------------------------------------------------------------------
# Demo producers
# ---------------------------------------------------------------------------

def log_producer(engine: Engine, name: str, level: str, interval: float):
    """Log a counter to its own tab forever."""
    log = LogTab(engine, name).get_logger()
    emit = getattr(log, level)
    i = 0
    while not engine.stopping:
        emit(f"{name} tick {i}")
        i += 1
        time.sleep(interval)


def metrics_producer(engine: Engine):
    """Feed random-walk metrics into a monitor tab."""
    tab = MonitorTab(engine, "Metrics")
    latency = tab.create_num_watcher("latency_ms", show_min=True, show_average=True, show_max=True)
    queue_depth = tab.create_num_watcher("queue_depth", show_max=True)
    workers = tab.create_num_watcher("workers")
    tab.create_num_watcher("errors", show_average=True)

    lat = 20.0
    depth = 0
    while not engine.stopping:
        lat = max(1.0, lat + random.uniform(-4, 4))
        depth = max(0, depth + random.randint(-3, 4))
        latency.update(round(lat, 2))
        queue_depth.update(depth)
        workers.update(random.randint(4, 8))
        # applied on the render thread, in order with everything else
        tab.update("errors", 1 if random.random() < 0.05 else 0)
        time.sleep(0.25)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    ap = argparse.ArgumentParser(description="tabdash demo dashboard")
    ap.add_argument("--hz", type=int, default=DEFAULT_HZ,
                    help=f"Refresh rate Hz (default {DEFAULT_HZ})")
    ap.add_argument("--log-dir", default=DEFAULT_LOG_DIR,
                    help=f"Directory for log files (default {DEFAULT_LOG_DIR})")
    ap.add_argument("--no-archive", action="store_true",
                    help="Keep old *.log files instead of zipping them at startup")
    ap.add_argument("--debug-log", metavar="PATH",
                    help="Write tabdash diagnostics to this file")
    args = ap.parse_args()

    if args.debug_log:
        logging.basicConfig(
            filename=args.debug_log,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        )

    config = DashboardConfig.from_env(
        refresh_hz=args.hz,
        log_dir=args.log_dir,
        archive_logs=not args.no_archive,
    )
    engine = Engine(config=config)
    start = time.time()

    producers = [
        threading.Thread(target=log_producer, args=(engine, "InfoTab", "info", 1.0), daemon=True),
        threading.Thread(target=log_producer, args=(engine, "DebugTab", "debug", 0.2), daemon=True),
        threading.Thread(target=log_producer, args=(engine, "WarningTab", "warning", 0.05), daemon=True),
        threading.Thread(target=metrics_producer, args=(engine,), daemon=True),
    ]
    for thr in producers:
        thr.start()

    try:
        while not engine.stopping:
            if engine.error is not None:
                break
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        engine.stop()

    console = Console()
    console.clear()
    console.print()
    console.print("[bold bright_cyan]tabdash session complete[/]")
    console.print(f"  Duration    {timedelta(seconds=int(time.time() - start))}")
    console.print(f"  Tabs        {', '.join(engine.tab_names())}")
    console.print(f"  Logs        {config.log_dir}")
    if engine.error is not None:
        console.print(f"  [bold red]Render error[/]  {engine.error}")
    console.print()


if __name__ == "__main__":
    main()
