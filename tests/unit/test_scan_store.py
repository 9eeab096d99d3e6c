import json

from console_cleaner.core.metrics import MetricsCollector
from console_cleaner.core.models import FileConsoleInfo
from console_cleaner.core.storage.csv_log_writer import CLEAN_REPORT_HEADER, append_clean_result
from console_cleaner.core.storage.scan_store import ResultStore


def test_zero_counts_never_stored():
    store = ResultStore({"/a.js": 2, "/b.js": 0})
    assert store.paths() == ["/a.js"]
    store.set_count("/a.js", 0)
    assert "/a.js" not in store
    assert len(store) == 0


def test_totals_and_sorted_entries():
    store = ResultStore()
    store.set_count("/z.js", 1)
    store.set_count("/a.js", 4)
    assert store.file_count == 2
    assert store.total_calls == 5
    assert store.entries() == [FileConsoleInfo("/a.js", 4), FileConsoleInfo("/z.js", 1)]


def test_replace_all_drops_previous_entries():
    store = ResultStore({"/old.js": 3})
    store.replace_all({"/new.js": 1})
    assert store.paths() == ["/new.js"]


def test_remove_reports_presence():
    store = ResultStore({"/a.js": 1})
    assert store.remove("/a.js") is True
    assert store.remove("/a.js") is False
    assert store.get("/a.js") == 0


def test_save_and_load(tmp_path):
    path = tmp_path / "nested" / "results.json"
    ResultStore({"/a.js": 2, "/b.ts": 1}).save(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"version": 1, "files": {"/a.js": 2, "/b.ts": 1}}
    loaded = ResultStore.load(path)
    assert loaded.items() == [("/a.js", 2), ("/b.ts", 1)]


def test_load_missing_or_malformed_gives_empty_store(tmp_path):
    assert len(ResultStore.load(tmp_path / "missing.json")) == 0
    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf-8")
    assert len(ResultStore.load(broken)) == 0
    wrong_shape = tmp_path / "wrong.json"
    wrong_shape.write_text(json.dumps(["/a.js"]), encoding="utf-8")
    assert len(ResultStore.load(wrong_shape)) == 0


def test_load_skips_bad_counts(tmp_path):
    path = tmp_path / "results.json"
    path.write_text(json.dumps({"files": {"/a.js": "x", "/b.js": 3, "/c.js": 0}}), encoding="utf-8")
    assert ResultStore.load(path).items() == [("/b.js", 3)]


def test_clean_report_header_written_once(tmp_path):
    report = tmp_path / "reports" / "clean.csv"
    append_clean_result(report, "/a.js", 2, True)
    append_clean_result(report, "/b.js", 1, False, "permission denied")
    lines = report.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(CLEAN_REPORT_HEADER)
    assert len(lines) == 3
    assert lines[1].endswith(",/a.js,2,cleaned,")
    assert lines[2].endswith(",/b.js,1,failed,permission denied")


def test_metrics_totals_and_snapshot(tmp_path):
    metrics = MetricsCollector()
    metrics.record_file_scanned(3)
    metrics.record_file_scanned(0)
    metrics.record_file_cleaned(False)
    assert metrics.total("scan.files") == 2
    assert metrics.total("scan.calls") == 3
    snapshot = metrics.snapshot()
    assert snapshot["errors"] == {"clean.files": 1}
    out = tmp_path / "metrics.jsonl"
    metrics.write_snapshot(out)
    assert json.loads(out.read_text(encoding="utf-8"))["totals"]["scan.files"] == 2
