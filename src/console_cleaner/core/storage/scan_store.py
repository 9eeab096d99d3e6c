"""
Purpose: Per-file console call counts shared by scan, clean and watch runs.
Constraints: Storage only; never reads or writes scanned source files.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from console_cleaner.core.models import FileConsoleInfo

logger = logging.getLogger(__name__)

STORE_VERSION = 1


class ResultStore:
    """Mapping of file path to a positive console call count.

    Zero counts are never stored. The store is rebuilt wholesale by a full
    scan and shrinks as files get cleaned or deleted.
    """

    def __init__(self, counts: Optional[Mapping[str, int]] = None):
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = {}
        if counts:
            self.replace_all(counts)

    def replace_all(self, counts: Mapping[str, int]) -> None:
        cleaned = {str(path): int(count) for path, count in counts.items() if int(count) > 0}
        with self._lock:
            self._counts = cleaned

    def clear(self) -> None:
        with self._lock:
            self._counts.clear()

    def set_count(self, path: str, count: int) -> None:
        with self._lock:
            if count > 0:
                self._counts[str(path)] = int(count)
            else:
                self._counts.pop(str(path), None)

    def remove(self, path: str) -> bool:
        with self._lock:
            return self._counts.pop(str(path), None) is not None

    def get(self, path: str, default: int = 0) -> int:
        with self._lock:
            return self._counts.get(str(path), default)

    def paths(self) -> List[str]:
        with self._lock:
            return sorted(self._counts)

    def items(self) -> List[Tuple[str, int]]:
        with self._lock:
            return sorted(self._counts.items())

    def entries(self) -> List[FileConsoleInfo]:
        return [FileConsoleInfo(path=path, count=count) for path, count in self.items()]

    @property
    def file_count(self) -> int:
        with self._lock:
            return len(self._counts)

    @property
    def total_calls(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return str(path) in self._counts

    def __len__(self) -> int:
        return self.file_count

    def to_dict(self) -> Dict[str, object]:
        return {"version": STORE_VERSION, "files": dict(self.items())}

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2, sort_keys=True), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "ResultStore":
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"Could not read result store {path}: {exc}")
            return cls()
        files = data.get("files") if isinstance(data, dict) else None
        if not isinstance(files, dict):
            logger.warning(f"Result store {path} should contain a 'files' mapping.")
            return cls()
        store = cls()
        for file_path, count in files.items():
            try:
                store.set_count(file_path, int(count))
            except (TypeError, ValueError):
                logger.debug(f"Skipping malformed count for {file_path}: {count!r}")
        return store

