"""
Log Writer
==========

Persists log messages on its own thread, decoupled from the frame rate.

On startup any ``*.log`` files left by a previous run are bundled into one
zip archive so nothing is overwritten. After that every message is appended
to ``Log_<tab>_latest.log``, and warnings and worse also to
``Log_<tab>_error.log``.

File system errors are logged and swallowed here: this thread is independent
of the render thread and must not take the dashboard down with it.
"""
from __future__ import annotations

import logging
import os
import queue
import re
import shutil
import threading
import zipfile
from datetime import datetime
from pathlib import Path

from .logs import LogLevel, LogMessage

log = logging.getLogger(__name__)

TEMP_DIR = "temp"
RECOVERED_DIR = "recovered"
ARCHIVE_TS_FORMAT = "%Y-%m-%d_%H-%M"
_UNSAFE = re.compile(r'[\\<>:"/|?*]')


def safe_tab_name(name: str) -> str:
    return _UNSAFE.sub("_", name)


def latest_log_path(log_dir: Path, tab_name: str) -> Path:
    return log_dir / f"Log_{safe_tab_name(tab_name)}_latest.log"


def error_log_path(log_dir: Path, tab_name: str) -> Path:
    return log_dir / f"Log_{safe_tab_name(tab_name)}_error.log"


def file_created_at(path: Path) -> datetime:
    """Best available creation time: birth time where the OS records it."""
    st = path.stat()
    created = getattr(st, "st_birthtime", None)
    if created is None:
        # Linux has no portable birth time; the earlier of ctime and mtime is
        # the closest approximation.
        created = min(st.st_ctime, st.st_mtime)
    return datetime.fromtimestamp(created)


def archive_logs(log_dir: Path) -> Path | None:
    """
    Move every ``*.log`` file in ``log_dir`` into one zip archive.

    The archive is named ``Log_<oldest creation time>_<n>.zip`` where ``n`` is
    the smallest number that does not collide with an existing archive.
    Logs left in ``temp`` by a run that died mid-archive are stored in the
    same archive under ``recovered/``.
    Returns the archive path, or None when there was nothing to archive.
    """
    temp = log_dir / TEMP_DIR
    logs = sorted(p for p in log_dir.glob("*.log") if p.is_file())
    leftover = sorted(p for p in temp.rglob("*.log") if p.is_file()) if temp.is_dir() else []
    if not logs and not leftover:
        return None

    oldest = min(file_created_at(p) for p in logs + leftover)
    stamp = oldest.strftime(ARCHIVE_TS_FORMAT)

    if temp.is_dir():
        recovered = temp / RECOVERED_DIR
        recovered.mkdir(exist_ok=True)
        for p in temp.glob("*.log"):
            shutil.move(str(p), str(recovered / p.name))
    else:
        temp.mkdir()
    for p in logs:
        shutil.move(str(p), str(temp / p.name))

    n = 0
    while (log_dir / f"Log_{stamp}_{n}.zip").exists():
        n += 1
    archive = log_dir / f"Log_{stamp}_{n}.zip"
    with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
        for p in sorted(temp.rglob("*.log")):
            zf.write(p, arcname=p.relative_to(temp).as_posix())

    shutil.rmtree(temp)
    log.info(
        "archived %d log file(s) to %s (%d recovered)",
        len(logs) + len(leftover), archive, len(leftover),
    )
    return archive


class LogWriter:
    def __init__(self, log_dir: str | os.PathLike[str], archive: bool = True):
        self.log_dir = Path(log_dir)
        self.archive = archive
        self.queue: queue.Queue[LogMessage] = queue.Queue()
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def put(self, message: LogMessage):
        self.queue.put(message)

    def start(self):
        with self._lock:
            if self._thread is not None:
                return
            self._thread = threading.Thread(
                target=self.run, name="tabdash-log-writer", daemon=True,
            )
            self._thread.start()

    def stop(self, timeout: float | None = None):
        """Stop after writing everything already queued."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def prepare(self):
        self.log_dir.mkdir(parents=True, exist_ok=True)
        if self.archive:
            archive_logs(self.log_dir)

    def run(self):
        try:
            self.prepare()
        except OSError:
            log.exception("could not prepare log directory %s", self.log_dir)

        while not self._stop.is_set():
            try:
                msg = self.queue.get(timeout=0.1)
            except queue.Empty:
                continue
            self.write(msg)

        self.flush()

    def flush(self):
        """Write whatever is queued right now on the calling thread."""
        while True:
            try:
                msg = self.queue.get_nowait()
            except queue.Empty:
                return
            self.write(msg)

    def write(self, message: LogMessage):
        line = message.formatted + "\n"
        name = message.tab.name
        try:
            _append(latest_log_path(self.log_dir, name), line)
            if message.level >= LogLevel.WARNING:
                _append(error_log_path(self.log_dir, name), line)
        except OSError:
            log.exception("failed to persist log line for tab %r", name)


def _append(path: Path, line: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(line)
