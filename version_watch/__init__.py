"""
Top-level public API surface.
Checks a running client's version against the latest one a server publishes
and lists candidate preview builds. Does not import cli.
"""

from __future__ import annotations

from ._version import __version__
from .core.errors import UnrecognizedSelectionRuleError, VersionWatchError
from .defaults import create_latest_checker, create_list_fetcher, create_version_store
from .store import VersionStore
from .versions import (
    ByBranch,
    LatestVersionChecker,
    RequestOutcome,
    TopPrs,
    VersionListFetcher,
    VersionRequest,
)

# Do not add exports without updating __all__.
__all__ = [
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
]
