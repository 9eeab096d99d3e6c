import json

import pytest
from pydantic import ValidationError

from console_cleaner.core.config import ConfigManager
from console_cleaner.core.config_models import (
    DEFAULT_CONSOLE_METHODS,
    DEFAULT_FILE_EXTENSIONS,
    CleanerSettings,
    RuntimeSettings,
)


def write_settings(root, payload):
    config_dir = root / ".console-cleaner"
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / "settings.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_cleaner_defaults():
    settings = CleanerSettings()
    assert settings.console_methods == DEFAULT_CONSOLE_METHODS
    assert settings.file_extensions == DEFAULT_FILE_EXTENSIONS
    assert "node_modules" in settings.ignore_folders
    assert settings.confirm_before_cleaning is True
    assert settings.auto_scan_on_startup is True


def test_methods_deduplicated_in_order():
    settings = CleanerSettings(console_methods=["warn", "log", "warn", " "])
    assert settings.console_methods == ["warn", "log"]


def test_empty_method_list_rejected():
    with pytest.raises(ValidationError):
        CleanerSettings(console_methods=[])


def test_extensions_get_leading_dot():
    settings = CleanerSettings(file_extensions=["js", ".ts", ".js"])
    assert settings.file_extensions == [".js", ".ts"]


def test_runtime_intervals_validated():
    with pytest.raises(ValidationError):
        RuntimeSettings(watch_interval=0)
    with pytest.raises(ValidationError):
        RuntimeSettings(debounce_seconds=-1)


def test_manager_defaults_without_files(tmp_path):
    cfg = ConfigManager(tmp_path).load_all()
    assert cfg.loaded_env_file is None
    assert cfg.cleaner == CleanerSettings()
    assert cfg.store_path == tmp_path / ".console-cleaner" / "scan_results.json"
    assert cfg.report_path is None


def test_settings_file_applied(tmp_path):
    write_settings(
        tmp_path,
        {"cleaner": {"console_methods": ["log"]}, "runtime": {"store_path": "out/results.json"}},
    )
    cfg = ConfigManager(tmp_path).load_all()
    assert cfg.cleaner.console_methods == ["log"]
    assert cfg.store_path == tmp_path / "out" / "results.json"


def test_env_vars_read(tmp_path, monkeypatch):
    monkeypatch.setenv("CONSOLE_CLEANER_METHODS", "log, warn")
    monkeypatch.setenv("CONSOLE_CLEANER_CONFIRM", "no")
    monkeypatch.setenv("CONSOLE_CLEANER_REPORT", "reports/clean.csv")
    monkeypatch.setenv("CONSOLE_CLEANER_METRICS", "/var/tmp/cc-metrics.jsonl")
    cfg = ConfigManager(tmp_path).load_all()
    assert cfg.cleaner.console_methods == ["log", "warn"]
    assert cfg.cleaner.confirm_before_cleaning is False
    assert cfg.report_path == tmp_path / "reports" / "clean.csv"
    assert str(cfg.metrics_path) == "/var/tmp/cc-metrics.jsonl"


def test_settings_file_wins_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv("CONSOLE_CLEANER_METHODS", "log,warn")
    write_settings(tmp_path, {"cleaner": {"console_methods": ["error"]}})
    cfg = ConfigManager(tmp_path).load_all()
    assert cfg.cleaner.console_methods == ["error"]


def test_project_env_file_loaded(tmp_path):
    env_file = tmp_path / ".console-cleaner.env"
    env_file.write_text("CONSOLE_CLEANER_EXTENSIONS=vue,js\n", encoding="utf-8")
    cfg = ConfigManager(tmp_path).load_all()
    assert cfg.loaded_env_file == env_file
    assert cfg.cleaner.file_extensions == [".vue", ".js"]


def test_malformed_settings_fall_back_to_defaults(tmp_path):
    write_settings(tmp_path, "{not json")
    cfg = ConfigManager(tmp_path).load_all()
    assert cfg.cleaner == CleanerSettings()


def test_invalid_settings_values_fall_back_to_defaults(tmp_path):
    write_settings(tmp_path, {"cleaner": {"console_methods": []}, "runtime": {"watch_interval": -5}})
    cfg = ConfigManager(tmp_path).load_all()
    assert cfg.cleaner.console_methods == DEFAULT_CONSOLE_METHODS
    assert cfg.runtime.watch_interval == 1.0


def test_override_applies_and_validates(tmp_path):
    cfg = ConfigManager(tmp_path).load_all()
    cfg.override(cleaner={"console_methods": ["debug"]}, runtime={"log_level": "DEBUG"})
    assert cfg.cleaner.console_methods == ["debug"]
    assert cfg.runtime.log_level == "DEBUG"
    with pytest.raises(ValidationError):
        cfg.override(cleaner={"console_methods": []})


def test_save_settings_round_trip(tmp_path):
    cfg = ConfigManager(tmp_path).load_all()
    cfg.override(cleaner={"console_methods": ["log", "table"]})
    path = cfg.save_settings()
    assert path == tmp_path / ".console-cleaner" / "settings.json"
    reloaded = ConfigManager(tmp_path).load_all()
    assert reloaded.cleaner.console_methods == ["log", "table"]


def test_print_summary(tmp_path, capsys):
    ConfigManager(tmp_path).load_all().print_summary()
    out = capsys.readouterr().out
    assert "Configuration Summary" in out
    assert "Console methods (17)" in out
