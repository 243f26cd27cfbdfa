"""
Load config from config.yaml with optional env overrides.
Single source of truth for endpoint URLs, request timeout, store path, and the
default version selection.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .versions.base import SelectionRule, parse_selection

# Defaults if no YAML or env
_DEFAULTS: Dict[str, Any] = {
    "endpoints": {
        "versions_url": "",
        "latest_url": "",
    },
    "http": {"timeout_ms": 4000},
    "store": {
        "path": "version_watch.sqlite",
        "key": "CURRENT_VERSION",
    },
    "selection": {
        "default": [{"prs": 5}, {"branch": "master"}],
    },
}


def _config_yaml_path() -> Path:
    """VERSION_WATCH_CONFIG if set, else config.yaml at repo root (parent of package dir)."""
    override = os.environ.get("VERSION_WATCH_CONFIG")
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml(path: Optional[Path] = None) -> dict:
    config_path = path or _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    versions_url = os.environ.get("VERSION_WATCH_VERSIONS_URL")
    if versions_url:
        overrides.setdefault("endpoints", {})["versions_url"] = versions_url
    latest = os.environ.get("VERSION_WATCH_LATEST_URL")
    if latest:
        overrides.setdefault("endpoints", {})["latest_url"] = latest
    timeout_ms = os.environ.get("VERSION_WATCH_TIMEOUT_MS")
    if timeout_ms:
        overrides.setdefault("http", {})["timeout_ms"] = int(timeout_ms)
    store = os.environ.get("VERSION_WATCH_STORE_PATH")
    if store:
        overrides.setdefault("store", {})["path"] = store
    return overrides


def get_config(path: Optional[Path] = None) -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml(path))
    merged = _deep_merge(merged, _env_overrides())
    return merged


# Convenience accessors
def versions_url() -> str:
    return str(get_config()["endpoints"]["versions_url"] or "")


def latest_url() -> str:
    return str(get_config()["endpoints"]["latest_url"] or "")


def http_timeout_ms() -> int:
    return int(get_config()["http"]["timeout_ms"])


def store_path() -> str:
    return str(get_config()["store"]["path"])


def store_key() -> str:
    return str(get_config()["store"]["key"])


def default_selection() -> List[SelectionRule]:
    return parse_selection(get_config()["selection"]["default"] or [])
