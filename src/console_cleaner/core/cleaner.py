"""
Purpose: Rewrite files without their console calls and keep the result store in sync.
Constraints: Destructive writes only after confirmation; removal logic lives in remover.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional, Union

from console_cleaner.core.config_models import CleanerSettings
from console_cleaner.core.detector import MethodNames
from console_cleaner.core.file_scanner import read_source, write_source
from console_cleaner.core.metrics import get_metrics
from console_cleaner.core.models import CleanSummary
from console_cleaner.core.remover import remove_console_calls
from console_cleaner.core.storage.csv_log_writer import append_clean_result
from console_cleaner.core.storage.scan_store import ResultStore

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Confirm = Callable[[str], bool]
CleanProgress = Callable[[int, int, str], None]


# Helpers
def clean_all_prompt(total_calls: int, file_count: int) -> str:
    return (
        f"This will remove {total_calls} console log(s) from {file_count} file(s). "
        "This action cannot be undone. Continue?"
    )


def clean_file_prompt(path: PathLike, count: int) -> str:
    return f"Remove {count} console log(s) from {os.path.basename(str(path))}? This cannot be undone."


def _rewrite(path: PathLike, methods: MethodNames) -> bool:
    """Clean one file in place; returns True when the content changed."""
    content = read_source(path)
    cleaned = remove_console_calls(content, methods)
    if cleaned == content:
        return False
    write_source(path, cleaned)
    return True


def _clean_one(
    path: str,
    store: ResultStore,
    methods: MethodNames,
    summary: CleanSummary,
    report_path: Optional[Path],
) -> bool:
    calls_before = store.get(path)
    error = ""
    try:
        changed = _rewrite(path, methods)
        success = True
        logger.debug(f"Cleaned {path} (changed={changed})")
    except (OSError, UnicodeDecodeError) as exc:
        success = False
        error = str(exc)
        logger.warning(f"Failed to clean {path}: {exc}")

    get_metrics().record_file_cleaned(success)
    if success:
        summary.cleaned += 1
        store.remove(path)
    else:
        summary.failed += 1
        summary.failed_paths.append(path)

    if report_path:
        try:
            append_clean_result(report_path, path, calls_before, success, error)
        except OSError as exc:
            logger.warning(f"Could not append to clean report {report_path}: {exc}")
    return success


def _confirmed(settings: CleanerSettings, confirm: Optional[Confirm], message: str) -> bool:
    if not settings.confirm_before_cleaning:
        return True
    if confirm is None:
        logger.warning("Cleaning requires confirmation but no prompt is available; skipping")
        return False
    return bool(confirm(message))


# Public API
def clean_file(path: PathLike, methods: MethodNames) -> bool:
    """Remove console calls from one file.

    Returns True on success, including when nothing needed removing, and
    False when the file could not be read or written.
    """
    try:
        _rewrite(path, methods)
        return True
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Failed to clean {path}: {exc}")
        return False


def clean_all(
    store: ResultStore,
    settings: CleanerSettings,
    confirm: Optional[Confirm] = None,
    progress: Optional[CleanProgress] = None,
    report_path: Optional[Path] = None,
) -> CleanSummary:
    """Clean every file recorded in store.

    Successfully cleaned files leave the store; failures stay and are
    counted without stopping the run.
    """
    files = store.paths()
    summary = CleanSummary(files_total=len(files))
    if not files:
        return summary

    if not _confirmed(settings, confirm, clean_all_prompt(store.total_calls, len(files))):
        summary.cancelled = True
        return summary

    for index, path in enumerate(files, start=1):
        if progress:
            progress(index, len(files), path)
        _clean_one(path, store, settings.console_methods, summary, report_path)

    logger.info(f"Clean run finished: {summary.cleaned} cleaned, {summary.failed} failed")
    return summary


def clean_single(
    path: PathLike,
    store: ResultStore,
    settings: CleanerSettings,
    confirm: Optional[Confirm] = None,
    report_path: Optional[Path] = None,
) -> CleanSummary:
    """Clean one file, whether or not the store knows about it."""
    key = os.path.abspath(str(path))
    if key not in store and os.path.realpath(key) in store:
        key = os.path.realpath(key)
    summary = CleanSummary(files_total=1)
    if not _confirmed(settings, confirm, clean_file_prompt(key, store.get(key))):
        summary.cancelled = True
        return summary
    _clean_one(key, store, settings.console_methods, summary, report_path)
    return summary
