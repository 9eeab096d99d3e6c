"""
Purpose: Walk a project tree and record console call counts per file.
Constraints: Read-only file access; counting is delegated to the detector.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Set, Union

from console_cleaner.core.config_models import CleanerSettings
from console_cleaner.core.detector import MethodNames, count_console_calls
from console_cleaner.core.metrics import get_metrics
from console_cleaner.core.models import ScanSummary
from console_cleaner.core.storage.scan_store import ResultStore

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 50

PathLike = Union[str, Path]
ScanProgress = Callable[[int], None]


def read_source(path: PathLike) -> str:
    # newline="" keeps CRLF endings intact through a clean/write round trip.
    with open(path, "r", encoding="utf-8", newline="") as handle:
        return handle.read()


def write_source(path: PathLike, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)


def _log_walk_error(error: OSError) -> None:
    logger.debug(f"Skipping unreadable directory: {error}")


def iter_source_files(
    root: PathLike,
    extensions: Iterable[str],
    ignore_folders: Iterable[str] = (),
) -> Iterator[str]:
    """Yield absolute paths of files under root whose suffix is in extensions.

    Names in ignore_folders are skipped whether they are directories or
    files. Symlinked directories are followed once per real path, so link
    cycles terminate.
    """
    ignore = set(ignore_folders)
    suffixes = set(extensions)
    visited: Set[str] = set()
    for dirpath, dirnames, filenames in os.walk(os.path.abspath(root), followlinks=True, onerror=_log_walk_error):
        real = os.path.realpath(dirpath)
        if real in visited:
            dirnames[:] = []
            continue
        visited.add(real)
        dirnames[:] = sorted(name for name in dirnames if name not in ignore)
        for name in sorted(filenames):
            if name in ignore:
                continue
            if os.path.splitext(name)[1] in suffixes:
                yield os.path.join(dirpath, name)


def count_file(path: PathLike, methods: MethodNames) -> int:
    """Console call count for one file; 0 when the file cannot be read."""
    try:
        return count_console_calls(read_source(path), methods)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug(f"Could not read {path}: {exc}")
        return 0


def scan_directory(
    root: PathLike,
    settings: CleanerSettings,
    store: Optional[ResultStore] = None,
    progress: Optional[ScanProgress] = None,
) -> ScanSummary:
    """Rebuild store from a full walk of root and return scan totals.

    Unreadable files are listed in the summary and never abort the scan.
    Raises FileNotFoundError when root is not a directory.
    """
    root_path = Path(root).resolve()
    if not root_path.is_dir():
        raise FileNotFoundError(f"Not a directory: {root_path}")

    store = store if store is not None else ResultStore()
    summary = ScanSummary(root=str(root_path))
    metrics = get_metrics()
    counts = {}

    for path in iter_source_files(root_path, settings.file_extensions, settings.ignore_folders):
        summary.files_scanned += 1
        if progress and summary.files_scanned % PROGRESS_EVERY == 0:
            progress(summary.files_scanned)
        try:
            found = count_console_calls(read_source(path), settings.console_methods)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug(f"Skipping {path}: {exc}")
            summary.unreadable.append(path)
            metrics.record_error("scan.unreadable")
            continue
        metrics.record_file_scanned(found)
        if found > 0:
            counts[path] = found

    store.replace_all(counts)
    summary.files_with_calls = len(counts)
    summary.total_calls = sum(counts.values())
    logger.info(
        f"Scanned {summary.files_scanned} file(s) under {root_path}: "
        f"{summary.total_calls} console call(s) in {summary.files_with_calls} file(s)"
    )
    return summary
