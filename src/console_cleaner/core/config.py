"""
Purpose: Load environment and JSON configuration for scan and clean runs.
Constraints: Pure config I/O only; never touches scanned source files.
"""

# Imports
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from console_cleaner.core.config_models import CleanerSettings, RuntimeSettings

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".console-cleaner"
SETTINGS_FILENAME = "settings.json"
ENV_FILENAME = ".console-cleaner.env"

_TRUE_VALUES = ("1", "true", "yes", "y", "on")


def _env_list(name: str) -> Optional[List[str]]:
    raw = os.getenv(name, "")
    if not raw.strip():
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


# Public API
class ConfigManager:
    """Settings for one project root: env file, env vars, then settings.json."""

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else Path.cwd()
        self.config_dir = self.root / CONFIG_DIRNAME
        self.settings_file = self.config_dir / SETTINGS_FILENAME
        self.loaded_env_file: Optional[Path] = None

        self.cleaner = CleanerSettings()
        self.runtime = RuntimeSettings()

        self._cleaner_env: Dict[str, Any] = {}
        self._runtime_env: Dict[str, Any] = {}

    def load_all(self):
        """Load all configurations"""
        self.load_env()
        self.load_settings()
        return self

    def load_env(self):
        """Load the first env file found, then read CONSOLE_CLEANER_* variables."""
        env_files = [
            self.root / ENV_FILENAME,
            Path.cwd() / ".env",
            Path.home() / ENV_FILENAME,
        ]
        for env_file in env_files:
            if env_file.exists():
                load_dotenv(env_file)
                self.loaded_env_file = env_file
                break

        if self.loaded_env_file:
            logger.debug(f"Loaded environment from: {self.loaded_env_file}")

        cleaner: Dict[str, Any] = {}
        methods = _env_list("CONSOLE_CLEANER_METHODS")
        if methods:
            cleaner["console_methods"] = methods
        extensions = _env_list("CONSOLE_CLEANER_EXTENSIONS")
        if extensions:
            cleaner["file_extensions"] = extensions
        ignore = _env_list("CONSOLE_CLEANER_IGNORE")
        if ignore is not None:
            cleaner["ignore_folders"] = ignore
        if os.getenv("CONSOLE_CLEANER_CONFIRM"):
            cleaner["confirm_before_cleaning"] = (
                os.getenv("CONSOLE_CLEANER_CONFIRM", "").lower() in _TRUE_VALUES
            )

        runtime: Dict[str, Any] = {}
        if os.getenv("LOG_LEVEL"):
            runtime["log_level"] = os.getenv("LOG_LEVEL", "INFO").upper()
        if os.getenv("CONSOLE_CLEANER_STORE"):
            runtime["store_path"] = os.getenv("CONSOLE_CLEANER_STORE")
        if os.getenv("CONSOLE_CLEANER_REPORT"):
            runtime["report_path"] = os.getenv("CONSOLE_CLEANER_REPORT")
        if os.getenv("CONSOLE_CLEANER_METRICS"):
            runtime["metrics_path"] = os.getenv("CONSOLE_CLEANER_METRICS")

        self._cleaner_env = cleaner
        self._runtime_env = runtime
        self.cleaner = self._build(CleanerSettings, cleaner, "environment")
        self.runtime = self._build(RuntimeSettings, runtime, "environment")
        return self

    def load_settings(self):
        """Overlay settings.json ({"cleaner": {...}, "runtime": {...}}) on env values."""
        data = self.load_json(self.settings_file, default={})
        if not isinstance(data, dict):
            logger.warning(f"Invalid format in {self.settings_file}, using defaults")
            data = {}

        cleaner_raw = {**self._cleaner_env, **(data.get("cleaner") or {})}
        runtime_raw = {**self._runtime_env, **(data.get("runtime") or {})}
        self.cleaner = self._build(CleanerSettings, cleaner_raw, str(self.settings_file))
        self.runtime = self._build(RuntimeSettings, runtime_raw, str(self.settings_file))
        return self

    def override(self, cleaner: Optional[Dict[str, Any]] = None, runtime: Optional[Dict[str, Any]] = None):
        """Apply explicit overrides (command-line flags); invalid values raise ValidationError."""
        if cleaner:
            self.cleaner = CleanerSettings(**{**self.cleaner.model_dump(), **cleaner})
        if runtime:
            self.runtime = RuntimeSettings(**{**self.runtime.model_dump(), **runtime})
        return self

    def load_json(self, path: Path, default: Any = None) -> Any:
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as f:
                content = f.read().strip()
            if not content:
                return default
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Error reading {path}: {e}. Using defaults.")
            return default
        except OSError as e:
            logger.warning(f"Could not open {path}: {e}")
            return default

    def save_settings(self) -> Path:
        """Write current settings to settings.json (explicit action only)."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        payload = {"cleaner": self.cleaner.model_dump(), "runtime": self.runtime.model_dump()}
        self.settings_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info(f"Saved config to: {self.settings_file}")
        return self.settings_file

    def resolve_path(self, value: Optional[str]) -> Optional[Path]:
        """Resolve a configured path relative to the project root."""
        if not value:
            return None
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.root / path

    @property
    def store_path(self) -> Path:
        return self.resolve_path(self.runtime.store_path)

    @property
    def report_path(self) -> Optional[Path]:
        return self.resolve_path(self.runtime.report_path)

    @property
    def metrics_path(self) -> Optional[Path]:
        return self.resolve_path(self.runtime.metrics_path)

    @staticmethod
    def _build(model, raw: Dict[str, Any], source: str):
        try:
            return model(**raw)
        except ValidationError as exc:
            logger.warning(f"Invalid {model.__name__} from {source}: {exc}")
            return model()

    def print_summary(self):
        """Print configuration summary"""
        print("\n" + "=" * 50)
        print("Configuration Summary")
        print("=" * 50)
        methods = self.cleaner.console_methods
        print(f"Console methods ({len(methods)}): {', '.join(methods[:6])}" + ("..." if len(methods) > 6 else ""))
        print(f"File extensions: {', '.join(self.cleaner.file_extensions)}")
        print(f"Ignored folders: {', '.join(self.cleaner.ignore_folders)}")
        print(f"Confirm before cleaning: {self.cleaner.confirm_before_cleaning}")
        print(f"Result store: {self.store_path}")
        if self.report_path:
            print(f"Clean report: {self.report_path}")
        if self.metrics_path:
            print(f"Metrics snapshots: {self.metrics_path}")
        print("=" * 50)
