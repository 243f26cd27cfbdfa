"""Tests for layered config: defaults <- config.yaml <- env."""
from __future__ import annotations

import pytest

from version_watch import config
from version_watch.core.errors import UnrecognizedSelectionRuleError
from version_watch.versions.base import ByBranch, TopPrs

_ENV_VARS = (
    "VERSION_WATCH_CONFIG",
    "VERSION_WATCH_VERSIONS_URL",
    "VERSION_WATCH_LATEST_URL",
    "VERSION_WATCH_TIMEOUT_MS",
    "VERSION_WATCH_STORE_PATH",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Point at a file that does not exist so a repo-root config.yaml cannot leak in.
    monkeypatch.setenv("VERSION_WATCH_CONFIG", str(tmp_path / "absent.yaml"))
    return monkeypatch


def _write_yaml(tmp_path, text: str):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_defaults_without_yaml(self, clean_env):
        cfg = config.get_config()
        assert cfg["http"]["timeout_ms"] == 4000
        assert cfg["store"]["key"] == "CURRENT_VERSION"
        assert config.versions_url() == ""
        assert config.latest_url() == ""
        assert config.http_timeout_ms() == 4000
        assert config.store_path() == "version_watch.sqlite"

    def test_default_selection_parsed(self, clean_env):
        assert config.default_selection() == [TopPrs(5), ByBranch("master")]


class TestYaml:
    def test_yaml_overrides_and_merges(self, clean_env, tmp_path):
        path = _write_yaml(
            tmp_path,
            "endpoints:\n"
            "  latest_url: https://builds.example.com/latest.json\n"
            "http:\n"
            "  timeout_ms: 1500\n"
            "selection:\n"
            "  default:\n"
            "    - branch: main\n"
            "    - prs: 2\n",
        )
        clean_env.setenv("VERSION_WATCH_CONFIG", str(path))

        assert config.latest_url() == "https://builds.example.com/latest.json"
        assert config.versions_url() == ""
        assert config.http_timeout_ms() == 1500
        assert config.store_key() == "CURRENT_VERSION"
        assert config.default_selection() == [ByBranch("main"), TopPrs(2)]

    def test_non_mapping_yaml_ignored(self, clean_env, tmp_path):
        path = _write_yaml(tmp_path, "- just\n- a list\n")
        assert config.get_config(path)["http"]["timeout_ms"] == 4000

    def test_bad_selection_in_yaml(self, clean_env, tmp_path):
        path = _write_yaml(tmp_path, "selection:\n  default:\n    - tag: v1\n")
        clean_env.setenv("VERSION_WATCH_CONFIG", str(path))
        with pytest.raises(UnrecognizedSelectionRuleError):
            config.default_selection()


class TestEnv:
    def test_env_beats_yaml(self, clean_env, tmp_path):
        path = _write_yaml(tmp_path, "http:\n  timeout_ms: 1500\n")
        clean_env.setenv("VERSION_WATCH_CONFIG", str(path))
        clean_env.setenv("VERSION_WATCH_TIMEOUT_MS", "900")
        clean_env.setenv("VERSION_WATCH_VERSIONS_URL", "https://e/v.json")
        clean_env.setenv("VERSION_WATCH_LATEST_URL", "https://e/l.json")
        clean_env.setenv("VERSION_WATCH_STORE_PATH", str(tmp_path / "s.sqlite"))

        assert config.http_timeout_ms() == 900
        assert config.versions_url() == "https://e/v.json"
        assert config.latest_url() == "https://e/l.json"
        assert config.store_path() == str(tmp_path / "s.sqlite")
