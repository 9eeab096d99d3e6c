#!/usr/bin/env python3
"""
Unified CLI entrypoint with subcommands.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from console_cleaner.core.cleaner import clean_all, clean_single
from console_cleaner.core.config import ConfigManager
from console_cleaner.core.file_scanner import scan_directory
from console_cleaner.core.logging import UnifiedLogger
from console_cleaner.core.metrics import get_metrics
from console_cleaner.core.models import CleanSummary
from console_cleaner.core.storage.scan_store import ResultStore
from console_cleaner.core.watcher import PollingWatcher


def _prompt(message: str) -> bool:
    try:
        answer = input(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _display_path(path: str, root: Path) -> str:
    try:
        return os.path.relpath(path, root)
    except ValueError:
        return path


def _print_results(store: ResultStore, root: Path) -> None:
    for entry in store.entries():
        print(f"  {entry.count:>4}  {_display_path(entry.path, root)}")


def _print_found(store: ResultStore) -> None:
    if store.file_count:
        print(f"Found {store.total_calls} console log(s) in {store.file_count} file(s)")
    else:
        print("No console logs found in your project 🎉")


def _run_scan(config: ConfigManager, root: Path, log: UnifiedLogger) -> Optional[ResultStore]:
    store = ResultStore()
    try:
        with log.time_operation("scan"):
            summary = scan_directory(
                root,
                config.cleaner,
                store,
                progress=lambda n: print(f"Scanned {n} files...", file=sys.stderr),
            )
    except FileNotFoundError as exc:
        log.log_error_with_context(exc, {"root": str(root)}, level="WARNING")
        print(f"Error scanning workspace: {exc}")
        return None
    if summary.unreadable:
        log.logger.warning(f"{len(summary.unreadable)} file(s) could not be read")
    store.save(config.store_path)
    return store


def _report_clean(summary: CleanSummary) -> int:
    if summary.failed:
        print(f"✅ Cleaned {summary.cleaned} file(s). Failed to clean {summary.failed} file(s).")
        for path in summary.failed_paths:
            print(f"  ✗ {path}")
        return 1
    print(f"✅ Successfully cleaned console logs from {summary.cleaned} file(s)")
    return 0


def cmd_scan(args, config: ConfigManager, log: UnifiedLogger) -> int:
    root = Path(args.root).resolve() if args.root else config.root.resolve()
    store = _run_scan(config, root, log)
    if store is None:
        return 1
    _print_found(store)
    _print_results(store, root)
    return 0


def cmd_show(args, config: ConfigManager, log: UnifiedLogger) -> int:
    store = ResultStore.load(config.store_path)
    _print_found(store)
    _print_results(store, config.root.resolve())
    return 0


def cmd_clean(args, config: ConfigManager, log: UnifiedLogger) -> int:
    root = Path(args.root).resolve() if args.root else config.root.resolve()
    if args.rescan or not config.store_path.exists():
        store = _run_scan(config, root, log)
        if store is None:
            return 1
    else:
        store = ResultStore.load(config.store_path)

    if not store.file_count:
        print("No console logs found to clean")
        return 0

    summary = clean_all(
        store,
        config.cleaner,
        confirm=(lambda _msg: True) if args.yes else _prompt,
        progress=lambda i, n, path: print(f"Cleaning {i}/{n}: {os.path.basename(path)}", file=sys.stderr),
        report_path=config.report_path,
    )
    store.save(config.store_path)
    if summary.cancelled:
        print("Cancelled")
        return 0
    log.log_activity(
        "clean",
        {"cleaned": summary.cleaned, "failed": summary.failed, "failed_paths": summary.failed_paths},
        level="WARNING" if summary.failed else "INFO",
    )
    log.log_metrics_snapshot()
    return _report_clean(summary)


def cmd_clean_file(args, config: ConfigManager, log: UnifiedLogger) -> int:
    store = ResultStore.load(config.store_path)
    summary = clean_single(
        args.path,
        store,
        config.cleaner,
        confirm=(lambda _msg: True) if args.yes else _prompt,
        report_path=config.report_path,
    )
    if summary.cancelled:
        print("Cancelled")
        return 0
    store.save(config.store_path)
    name = os.path.basename(args.path)
    if summary.cleaned:
        print(f"✅ Cleaned console logs from {name}")
        return 0
    print(f"Failed to clean {name}")
    return 1


def cmd_watch(args, config: ConfigManager, log: UnifiedLogger) -> int:
    root = Path(args.root).resolve() if args.root else config.root.resolve()
    if config.cleaner.auto_scan_on_startup:
        store = _run_scan(config, root, log)
        if store is None:
            return 1
        _print_found(store)
    else:
        store = ResultStore.load(config.store_path)

    def _on_update(updated: ResultStore) -> None:
        updated.save(config.store_path)
        _print_found(updated)

    watcher = PollingWatcher(
        root,
        config.cleaner,
        store,
        interval=config.runtime.watch_interval,
        debounce=config.runtime.debounce_seconds,
        on_update=_on_update,
    )
    print(f"Watching {root} (Ctrl+C to stop)")
    watcher.start()
    try:
        watcher.wait()
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop(timeout=5)
    return 0


def cmd_config(args, config: ConfigManager, log: UnifiedLogger) -> int:
    config.print_summary()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="console-cleaner", description="Find and remove console.* debug calls")
    parser.add_argument("--config-root", default=".", help="Project root holding .console-cleaner/settings.json")
    parser.add_argument("--store", help="Result store JSON path")
    parser.add_argument("--report", help="Append per-file clean results to this CSV")
    parser.add_argument("--metrics", help="Append a JSON metrics snapshot to this file after the command")
    parser.add_argument("--methods", help="Comma-separated console methods (overrides config)")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, ...)")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("scan", "Scan a project for console calls"), ("rescan", "Alias of scan")):
        scan = sub.add_parser(name, help=help_text)
        scan.add_argument("root", nargs="?", help="Directory to scan (default: config root)")
        scan.set_defaults(handler=cmd_scan)

    show = sub.add_parser("show", help="Print the last scan results")
    show.set_defaults(handler=cmd_show)

    clean = sub.add_parser("clean", help="Remove console calls from every file with results")
    clean.add_argument("root", nargs="?", help="Directory to scan when no results exist")
    clean.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
    clean.add_argument("--rescan", action="store_true", help="Scan before cleaning")
    clean.set_defaults(handler=cmd_clean)

    clean_file = sub.add_parser("clean-file", help="Remove console calls from one file")
    clean_file.add_argument("path")
    clean_file.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
    clean_file.set_defaults(handler=cmd_clean_file)

    watch = sub.add_parser("watch", help="Keep results current while files change")
    watch.add_argument("root", nargs="?")
    watch.set_defaults(handler=cmd_watch)

    config = sub.add_parser("config", help="Print the effective configuration")
    config.set_defaults(handler=cmd_config)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = ConfigManager(Path(args.config_root).resolve()).load_all()
    cleaner_overrides = {}
    runtime_overrides = {}
    if args.methods:
        cleaner_overrides["console_methods"] = args.methods.split(",")
    if args.store:
        runtime_overrides["store_path"] = args.store
    if args.report:
        runtime_overrides["report_path"] = args.report
    if args.metrics:
        runtime_overrides["metrics_path"] = args.metrics
    if args.log_level:
        runtime_overrides["log_level"] = args.log_level.upper()
    try:
        config.override(cleaner=cleaner_overrides, runtime=runtime_overrides)
    except ValidationError as exc:
        print(f"Invalid option: {exc}")
        return 2

    log = UnifiedLogger("console_cleaner.cli", log_level=config.runtime.log_level)
    log.logger.debug(f"Running {args.command} with root {config.root}")
    code = args.handler(args, config, log)
    if config.metrics_path:
        get_metrics().write_snapshot(config.metrics_path)
        log.logger.debug(f"Wrote metrics snapshot to {config.metrics_path}")
    return code


if __name__ == "__main__":
    raise SystemExit(main())
