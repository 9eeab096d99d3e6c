"""
Purpose: Append per-file clean results to a CSV report.
Constraints: Storage helper only; no business logic.
"""

# Imports
import csv
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Sequence

CLEAN_REPORT_HEADER = ["timestamp_utc", "path", "calls_before", "status", "error"]


# Helpers
def append_log(path: Path, row: Mapping[str, Any], header: Sequence[str]) -> None:
    """Append a row to a CSV log, creating headers on first write."""
    file_exists = path.exists() and path.stat().st_size > 0
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=header, extrasaction="ignore")
        if not file_exists:
            writer.writeheader()
        writer.writerow(row)


def append_clean_result(path: Path, file_path: str, calls_before: int, success: bool, error: str = "") -> None:
    append_log(
        path,
        {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "path": file_path,
            "calls_before": str(calls_before),
            "status": "cleaned" if success else "failed",
            "error": error,
        },
        CLEAN_REPORT_HEADER,
    )
