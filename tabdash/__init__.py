"""
tabdash -- tabbed, auto-refreshing terminal dashboard.

Log tabs and metric monitors render into one terminal window, redrawn every
frame by a single render thread while any other thread feeds them.
"""
import logging

from .config import DashboardConfig
from .engine import Engine
from .errors import DrawOverflowError, NamingConflictError, TabdashError
from .logs import Logger, LogLevel, LogTab
from .monitor import MonitorTab, NumWatcher, Watcher
from .tabs import Tab
from .terminal import Terminal

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DashboardConfig",
    "DrawOverflowError",
    "Engine",
    "LogLevel",
    "LogTab",
    "Logger",
    "MonitorTab",
    "NamingConflictError",
    "NumWatcher",
    "Tab",
    "TabdashError",
    "Terminal",
    "Watcher",
]
