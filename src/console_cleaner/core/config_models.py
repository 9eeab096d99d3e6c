"""
Purpose: Typed configuration models with validation.
Constraints: Pure models; no file I/O or side effects.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONSOLE_METHODS = [
    "log", "warn", "error", "info", "debug", "trace", "table", "time",
    "timeEnd", "assert", "count", "dir", "dirxml", "group",
    "groupCollapsed", "groupEnd", "clear",
]

DEFAULT_IGNORE_FOLDERS = [
    "node_modules", "build", "dist", ".next", "out", "coverage",
    ".git", ".vscode", "vendor", "tmp", "temp",
]

DEFAULT_FILE_EXTENSIONS = [".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"]


def _unique(values: List[str]) -> List[str]:
    ordered: List[str] = []
    for value in values:
        value = str(value).strip()
        if value and value not in ordered:
            ordered.append(value)
    return ordered


class CleanerSettings(BaseModel):
    model_config = ConfigDict(extra="allow")
    console_methods: List[str] = Field(default_factory=lambda: list(DEFAULT_CONSOLE_METHODS))
    ignore_folders: List[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE_FOLDERS))
    file_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS))
    auto_scan_on_startup: bool = True
    confirm_before_cleaning: bool = True

    @field_validator("console_methods")
    @classmethod
    def _methods_are_ordered_set(cls, value: List[str]) -> List[str]:
        methods = _unique(value)
        if not methods:
            raise ValueError("console_methods must name at least one method")
        return methods

    @field_validator("ignore_folders")
    @classmethod
    def _dedupe_folders(cls, value: List[str]) -> List[str]:
        return _unique(value)

    @field_validator("file_extensions")
    @classmethod
    def _dotted_extensions(cls, value: List[str]) -> List[str]:
        return _unique([ext if ext.startswith(".") else f".{ext}" for ext in _unique(value)])


class RuntimeSettings(BaseModel):
    model_config = ConfigDict(extra="allow")
    log_level: str = "INFO"
    store_path: str = ".console-cleaner/scan_results.json"
    report_path: Optional[str] = None
    metrics_path: Optional[str] = None
    watch_interval: float = Field(default=1.0, gt=0)
    debounce_seconds: float = Field(default=2.0, ge=0)
