"""
Purpose: Centralized logging configuration with structured output support.
Constraints: Logging only; no business logic.
"""

# Imports
import json
import logging
import os
import sys
import threading
import time
import traceback
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from console_cleaner.core.metrics import get_metrics

_FALSE_VALUES = ("0", "false", "no")

# Extra record attributes copied into JSON log lines.
_STRUCTURED_FIELDS = ("action", "details", "path", "metric_snapshot")


def _env_enabled(name: str, default: str = "1") -> bool:
    return os.getenv(name, default).lower() not in _FALSE_VALUES


def default_log_dir() -> Path:
    return Path(os.getenv("CONSOLE_CLEANER_LOG_DIR", "logs"))


# Public API
class UnifiedLogger:
    """Named logger whose records propagate to shared root handlers."""

    _lock = threading.Lock()
    _global_initialized = False

    def __init__(self, name: str = "console_cleaner", log_level: Optional[str] = None):
        self.name = name

        if log_level is None:
            log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        level = getattr(logging, str(log_level).upper(), logging.INFO)

        with self._lock:
            self.logger = logging.getLogger(name)
            self.logger.setLevel(level)
            if not UnifiedLogger._global_initialized:
                self._ensure_root_logger(level)
                UnifiedLogger._global_initialized = True
            self.logger.propagate = True

    def get_logger(self) -> logging.Logger:
        """Get the underlying logger instance"""
        return self.logger

    def log_activity(self, action: str, details: Dict[str, Any], level: str = "INFO"):
        """Log a scan/clean activity with structured data"""
        log_level = getattr(logging, level.upper(), logging.INFO)
        self.logger.log(log_level, f"ACTIVITY: {action}", extra={"action": action, "details": details})
        get_metrics().record(f"activity.{action}", success=log_level < logging.ERROR)

    def log_performance(self, operation: str, duration: float):
        self.logger.info(f"PERFORMANCE: {operation} took {duration:.2f}s")

    def log_error_with_context(self, error: Exception, context: Dict[str, Any], level: str = "ERROR"):
        """Log errors with additional context"""
        error_details = {
            "timestamp": datetime.now().isoformat(),
            "error_type": type(error).__name__,
            "error_message": str(error),
            "context": context,
        }
        if self.logger.isEnabledFor(logging.DEBUG):
            error_details["traceback"] = traceback.format_exc()

        self.logger.log(
            getattr(logging, level.upper(), logging.ERROR),
            f"ERROR: {type(error).__name__}: {error}",
            extra={"details": error_details},
        )
        get_metrics().record_error("exception")

    @contextmanager
    def time_operation(self, operation_name: str):
        """Context manager for timing operations"""
        start_time = time.time()
        try:
            yield
        finally:
            self.log_performance(operation_name, time.time() - start_time)

    def log_metrics_snapshot(self):
        """Emit a metrics snapshot into the JSON log."""
        self.logger.info(
            "METRICS_SNAPSHOT",
            extra={"metric_snapshot": get_metrics().snapshot(), "_metrics_internal": True},
        )

    def _ensure_root_logger(self, level: int) -> None:
        root_logger = logging.getLogger()
        if root_logger.handlers:
            return

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(
            getattr(logging, os.getenv("CONSOLE_LOG_LEVEL", "WARNING").upper(), logging.WARNING)
        )
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
        root_logger.setLevel(level)
        root_logger.addHandler(console_handler)

        if _env_enabled("LOG_TO_FILE"):
            logs_dir = default_log_dir()
            logs_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d")

            file_handler = RotatingFileHandler(
                logs_dir / f"console_cleaner_{timestamp}.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
            ))
            root_logger.addHandler(file_handler)

            if _env_enabled("ENABLE_JSON_LOGGING", "0"):
                json_handler = RotatingFileHandler(
                    logs_dir / f"console_cleaner_json_{timestamp}.log",
                    maxBytes=5 * 1024 * 1024,
                    backupCount=3,
                    encoding="utf-8",
                )
                json_handler.setLevel(level)
                json_handler.setFormatter(JsonFormatter())
                root_logger.addHandler(json_handler)

        if _env_enabled("METRICS_ENABLED"):
            root_logger.addHandler(_MetricsHandler())


def setup_logger(name: str = "console_cleaner", log_level: Optional[str] = None) -> logging.Logger:
    """Return a configured logger; root handlers are installed on first use."""
    return UnifiedLogger(name=name, log_level=log_level).get_logger()


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for field in _STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)
        return json.dumps(log_obj, default=str)


class _MetricsHandler(logging.Handler):
    """Count log records per level."""

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(record, "_metrics_internal", False):
            return
        metrics = get_metrics()
        metrics.record(f"log.{record.levelname.lower()}", success=record.levelno < logging.ERROR)
        if record.levelno >= logging.ERROR:
            metrics.record_error("log.error")
