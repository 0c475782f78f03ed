"""
Dashboard configuration
=======================

Defaults mirror the demo CLI flags. Environment variables override the
defaults; keyword overrides passed to ``from_env`` win over both.

    TABDASH_LOG_DIR   directory for log files and archives (default "Logs")
    TABDASH_HZ        frames per second (default 20)
    TABDASH_ARCHIVE   "0" disables archiving old logs at startup
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any

DEFAULT_LOG_DIR = "Logs"
DEFAULT_HZ = 20
MIN_WIDTH = 10
MIN_HEIGHT = 10


@dataclass(frozen=True)
class DashboardConfig:
    log_dir: str = DEFAULT_LOG_DIR
    refresh_hz: int = DEFAULT_HZ
    min_width: int = MIN_WIDTH
    min_height: int = MIN_HEIGHT
    archive_logs: bool = True
    key_input: bool = True

    def __post_init__(self):
        if self.refresh_hz <= 0:
            raise ValueError(f"refresh_hz must be positive, got {self.refresh_hz}")

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.refresh_hz

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        cfg = cls(
            log_dir=os.environ.get("TABDASH_LOG_DIR", DEFAULT_LOG_DIR),
            refresh_hz=int(os.environ.get("TABDASH_HZ", DEFAULT_HZ)),
            archive_logs=os.environ.get("TABDASH_ARCHIVE", "1") != "0",
        )
        return replace(cfg, **overrides) if overrides else cfg
