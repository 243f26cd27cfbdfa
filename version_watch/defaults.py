"""
Default wiring from config.yaml settings.

Builds a SQLite-backed VersionStore and fetchers using the configured timeout
and default selection. Hosts that need different collaborators construct the
classes directly.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from . import config
from .store.sqlite_backend import SqliteSlotBackend
from .store.version_store import VersionStore
from .versions.fetchers import LatestVersionChecker, VersionListFetcher
from .versions.transport import Transport

logger = logging.getLogger(__name__)


def create_version_store(path: Optional[Union[str, Path]] = None) -> VersionStore:
    """VersionStore persisting current to SQLite at ``path`` (default: config store.path)."""
    db_path = path or config.store_path()
    logger.debug("using version store at %s", db_path)
    return VersionStore(SqliteSlotBackend(db_path), key=config.store_key())


def create_list_fetcher(transport: Optional[Transport] = None) -> VersionListFetcher:
    return VersionListFetcher(
        transport,
        timeout_ms=config.http_timeout_ms(),
        default_selection=config.default_selection(),
    )


def create_latest_checker(
    store: VersionStore,
    transport: Optional[Transport] = None,
) -> LatestVersionChecker:
    return LatestVersionChecker(store, transport, timeout_ms=config.http_timeout_ms())
