"""
Purpose: Shared data models for cross-module communication.
Constraints: Data containers only; no logic.
"""

# Imports

from dataclasses import dataclass, field
from typing import List


# Public API
@dataclass(frozen=True)
class MatchSpan:
    """A single console call candidate found in a text."""

    start: int
    end: int
    text: str


@dataclass
class FileConsoleInfo:
    """Per-file entry of a scan result."""

    path: str
    count: int


@dataclass
class ScanSummary:
    root: str
    files_scanned: int = 0
    files_with_calls: int = 0
    total_calls: int = 0
    unreadable: List[str] = field(default_factory=list)


@dataclass
class CleanSummary:
    files_total: int = 0
    cleaned: int = 0
    failed: int = 0
    cancelled: bool = False
    failed_paths: List[str] = field(default_factory=list)
