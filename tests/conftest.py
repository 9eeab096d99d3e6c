import os

import pytest

CONFIG_ENV_VARS = (
    "CONSOLE_CLEANER_METHODS",
    "CONSOLE_CLEANER_EXTENSIONS",
    "CONSOLE_CLEANER_IGNORE",
    "CONSOLE_CLEANER_CONFIRM",
    "CONSOLE_CLEANER_STORE",
    "CONSOLE_CLEANER_REPORT",
    "CONSOLE_CLEANER_METRICS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep config lookups away from the developer's cwd, home and environment."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("LOG_TO_FILE", "0")
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv writes straight to os.environ, outside monkeypatch's bookkeeping.
    for name in CONFIG_ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def project(tmp_path):
    """Small JS/TS tree: three source files, two with console calls."""
    root = tmp_path / "project"
    src = root / "src"
    src.mkdir(parents=True)
    (src / "app.js").write_text("console.log('a');\nconst x = 1;\nconsole.warn('b');\n", encoding="utf-8")
    (src / "util.ts").write_text("export const y = 2;\n", encoding="utf-8")
    (src / "comp.tsx").write_text(
        "function C() {\n  console.debug(\n    'render'\n  );\n  return null;\n}\n",
        encoding="utf-8",
    )
    vendor = root / "node_modules" / "lib"
    vendor.mkdir(parents=True)
    (vendor / "index.js").write_text("console.log('vendor');\n", encoding="utf-8")
    (root / "README.md").write_text("Run `console.log('doc')` to debug.\n", encoding="utf-8")
    return root.resolve()
