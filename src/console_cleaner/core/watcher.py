"""
Purpose: Poll a project tree and keep the result store current.
Constraints: Polling only (stdlib); rescans go through scan_directory.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from console_cleaner.core.config_models import CleanerSettings
from console_cleaner.core.file_scanner import iter_source_files, scan_directory
from console_cleaner.core.storage.scan_store import ResultStore

logger = logging.getLogger(__name__)


@dataclass
class WatchTick:
    created: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    rescanned: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.created or self.modified or self.deleted or self.rescanned)


class PollingWatcher:
    """Debounced rescans on create/modify; immediate store removal on delete."""

    def __init__(
        self,
        root: Union[str, Path],
        settings: CleanerSettings,
        store: ResultStore,
        interval: float = 1.0,
        debounce: float = 2.0,
        on_update: Optional[Callable[[ResultStore], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.root = Path(root).resolve()
        self.settings = settings
        self.store = store
        self.interval = interval
        self.debounce = debounce
        self.on_update = on_update
        self._clock = clock
        self._mtimes: Dict[str, int] = self._snapshot()
        self._pending_since: Optional[float] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _snapshot(self) -> Dict[str, int]:
        mtimes = {}
        for path in iter_source_files(self.root, self.settings.file_extensions, self.settings.ignore_folders):
            try:
                mtimes[path] = os.stat(path).st_mtime_ns
            except OSError:
                continue
        return mtimes

    def poll_once(self) -> WatchTick:
        """Compare the tree against the last snapshot and rescan once the debounce elapses."""
        current = self._snapshot()
        tick = WatchTick(
            created=sorted(set(current) - set(self._mtimes)),
            modified=sorted(p for p in current if p in self._mtimes and current[p] != self._mtimes[p]),
            deleted=sorted(set(self._mtimes) - set(current)),
        )
        self._mtimes = current
        now = self._clock()

        for path in tick.deleted:
            if self.store.remove(path):
                logger.info(f"Dropped deleted file from results: {path}")

        if tick.created or tick.modified:
            self._pending_since = now

        if self._pending_since is not None and now - self._pending_since >= self.debounce:
            self._pending_since = None
            try:
                scan_directory(self.root, self.settings, self.store)
                tick.rescanned = True
            except FileNotFoundError as exc:
                logger.warning(f"Rescan skipped: {exc}")

        if tick.deleted or tick.rescanned:
            if self.on_update:
                self.on_update(self.store)
        return tick

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()

        def _loop():
            while not self._stop.wait(self.interval):
                try:
                    self.poll_once()
                except Exception:
                    logger.exception("Watcher poll failed")

        self._thread = threading.Thread(target=_loop, daemon=True, name="console-cleaner-watcher")
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None

    def wait(self) -> None:
        """Block until stop() is called (or KeyboardInterrupt)."""
        while not self._stop.wait(0.5):
            pass
