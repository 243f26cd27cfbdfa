"""
Version polling: catalog listing, latest-version checks, and the request
handle/transport they share.

Rules select from a catalog (TopPrs ranks PR builds newest first, ByBranch
filters branch builds). Fetchers are callback-driven and return the in-flight
request handle immediately.
"""

from __future__ import annotations

from .base import (
    ByBranch,
    SelectionRule,
    TopPrs,
    VersionCatalog,
    VersionDescriptor,
    parse_selection,
    parse_selection_rule,
)
from .fetchers import DEFAULT_SELECTION, LatestVersionChecker, VersionListFetcher
from .ranking import extract_versions, merge_selections, rank_by_recency
from .transport import (
    RequestOutcome,
    RequestsTransport,
    Transport,
    VersionRequest,
    build_request,
    cache_busted_url,
)

__all__ = [
    "ByBranch",
    "DEFAULT_SELECTION",
    "LatestVersionChecker",
    "RequestOutcome",
    "RequestsTransport",
    "SelectionRule",
    "TopPrs",
    "Transport",
    "VersionCatalog",
    "VersionDescriptor",
    "VersionListFetcher",
    "VersionRequest",
    "build_request",
    "cache_busted_url",
    "extract_versions",
    "merge_selections",
    "parse_selection",
    "parse_selection_rule",
    "rank_by_recency",
]
