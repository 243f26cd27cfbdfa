"""
Version extraction and ranking.

PR builds are ranked newest first; branch builds are filtered by name and keep
catalog order. Results from several rules are concatenated in rule order.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List

from ..core.errors import UnrecognizedSelectionRuleError
from .base import ByBranch, TopPrs, VersionCatalog, VersionDescriptor, same_value

logger = logging.getLogger(__name__)


def _timestamp_key(d: VersionDescriptor) -> float:
    # Missing timestamps rank oldest.
    return d.timestamp if d.timestamp is not None else float("-inf")


def rank_by_recency(entries: Iterable[VersionDescriptor]) -> List[VersionDescriptor]:
    """
    Newest first. Stable ascending sort then reverse, so entries with equal
    timestamps come out in reverse of their original order.
    """
    ranked = sorted(entries, key=_timestamp_key)
    ranked.reverse()
    return ranked


def extract_versions(catalog: VersionCatalog, rule: Any) -> List[VersionDescriptor]:
    """Apply one selection rule to the full catalog."""
    if isinstance(rule, TopPrs):
        return rank_by_recency(catalog.prs)[: rule.count]
    if isinstance(rule, ByBranch):
        return [d for d in catalog.branches if same_value(d.branch, rule.name)]
    raise UnrecognizedSelectionRuleError(rule)


def merge_selections(catalog: VersionCatalog, rules: Iterable[Any]) -> List[VersionDescriptor]:
    """
    Concatenate the output of each rule, in rule order.

    An unrecognized rule aborts the whole merge; no partial result is returned.
    """
    merged: List[VersionDescriptor] = []
    for rule in rules:
        picked = extract_versions(catalog, rule)
        logger.debug("rule %r selected %d version(s)", rule, len(picked))
        merged.extend(picked)
    return merged


def to_payload(entries: Iterable[VersionDescriptor]) -> List[Any]:
    """Raw server entries for the given descriptors."""
    return [d.raw for d in entries]
