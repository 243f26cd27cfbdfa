"""
Tests for the top-level public API (version_watch/__init__.py).
Ensures __version__, __all__, and facade re-exports are present and that importing does not pull cli.
"""

from __future__ import annotations

import subprocess
import sys

# Expected top-level __all__ (must match version_watch/__init__.py exactly).
EXPECTED_TOP_LEVEL_ALL = {
    "__version__",
    "ByBranch",
    "LatestVersionChecker",
    "RequestOutcome",
    "TopPrs",
    "UnrecognizedSelectionRuleError",
    "VersionListFetcher",
    "VersionRequest",
    "VersionStore",
    "VersionWatchError",
    "create_latest_checker",
    "create_list_fetcher",
    "create_version_store",
}


def test_top_level_has_version():
    import version_watch as vw

    assert isinstance(vw.__version__, str)
    assert vw.__version__ == "0.1.0"


def test_top_level_has_explicit_all():
    import version_watch as vw

    assert set(vw.__all__) == EXPECTED_TOP_LEVEL_ALL


def test_top_level_each_all_name_exported():
    import version_watch as vw

    for name in vw.__all__:
        assert hasattr(vw, name), f"version_watch must export {name!r} (in __all__)"


def test_import_does_not_pull_cli():
    r = subprocess.run(
        [
            sys.executable,
            "-c",
            "import sys, version_watch; print('version_watch.cli.main' in sys.modules)",
        ],
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert r.returncode == 0, r.stderr
    assert r.stdout.strip() == "False"


def test_create_version_store_uses_sqlite(tmp_path, monkeypatch):
    import version_watch as vw
    from version_watch.store import SqliteSlotBackend

    monkeypatch.setenv("VERSION_WATCH_CONFIG", str(tmp_path / "absent.yaml"))
    store = vw.create_version_store(tmp_path / "s.sqlite")
    assert isinstance(store.backend, SqliteSlotBackend)
    store.set_current("v1")
    assert vw.create_version_store(tmp_path / "s.sqlite").get_current() == "v1"
