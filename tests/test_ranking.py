"""
Tests for version extraction and ranking.

Verifies that:
- TopPrs returns min(N, k) PR builds, newest first
- equal timestamps come out in reverse of catalog order
- ByBranch returns matching branch builds in catalog order
- several rules concatenate in rule order
- an unrecognized rule aborts the whole merge
"""
from __future__ import annotations

import pytest

from tests.fakes import SAMPLE_CATALOG
from version_watch.core.errors import UnrecognizedSelectionRuleError
from version_watch.versions.base import ByBranch, TopPrs, VersionCatalog
from version_watch.versions.ranking import (
    extract_versions,
    merge_selections,
    rank_by_recency,
    to_payload,
)


@pytest.fixture
def catalog() -> VersionCatalog:
    return VersionCatalog.from_json(SAMPLE_CATALOG)


def _versions(entries):
    return [d.version for d in entries]


class TestTopPrs:
    @pytest.mark.parametrize(
        ("n", "expected"),
        [
            (0, []),
            (1, ["pr-104"]),
            (2, ["pr-104", "pr-102"]),
            (4, ["pr-104", "pr-102", "pr-103", "pr-101"]),
            (10, ["pr-104", "pr-102", "pr-103", "pr-101"]),
        ],
        ids=["zero", "one", "two", "all", "more-than-available"],
    )
    def test_top_n_newest_first(self, catalog, n, expected):
        assert _versions(extract_versions(catalog, TopPrs(n))) == expected

    def test_sorted_descending(self, catalog):
        stamps = [d.timestamp for d in extract_versions(catalog, TopPrs(4))]
        assert stamps == sorted(stamps, reverse=True)

    def test_equal_timestamps_reverse_original_order(self):
        cat = VersionCatalog.from_json(
            {
                "prs": [
                    {"version": "a", "timestamp": 5},
                    {"version": "b", "timestamp": 5},
                    {"version": "c", "timestamp": 1},
                    {"version": "d", "timestamp": 5},
                ]
            }
        )
        assert _versions(extract_versions(cat, TopPrs(4))) == ["d", "b", "a", "c"]

    def test_missing_timestamp_ranks_last(self):
        cat = VersionCatalog.from_json(
            {"prs": [{"version": "none"}, {"version": "old", "timestamp": 1}]}
        )
        assert _versions(rank_by_recency(cat.prs)) == ["old", "none"]

    def test_does_not_mutate_catalog(self, catalog):
        before = list(catalog.prs)
        extract_versions(catalog, TopPrs(2))
        assert list(catalog.prs) == before


class TestByBranch:
    def test_matches_in_catalog_order(self, catalog):
        assert _versions(extract_versions(catalog, ByBranch("main"))) == ["main-1", "main-2"]

    def test_no_match_is_empty(self, catalog):
        assert extract_versions(catalog, ByBranch("nope")) == []

    def test_prs_are_not_searched(self, catalog):
        assert extract_versions(catalog, ByBranch("feature/a")) == []

    def test_non_string_branch_compared_as_sent(self):
        cat = VersionCatalog.from_json(
            {
                "branches": [
                    {"version": "n", "branch": 7},
                    {"version": "s", "branch": "7"},
                    {"version": "t", "branch": True},
                    {"version": "e", "branch": ""},
                ]
            }
        )
        assert _versions(extract_versions(cat, ByBranch(7))) == ["n"]
        assert _versions(extract_versions(cat, ByBranch("7"))) == ["s"]
        assert _versions(extract_versions(cat, ByBranch(True))) == ["t"]
        assert _versions(extract_versions(cat, ByBranch(""))) == ["e"]


class TestMergeSelections:
    def test_concatenates_in_rule_order(self, catalog):
        merged = merge_selections(catalog, [TopPrs(2), ByBranch("main")])
        assert _versions(merged) == ["pr-104", "pr-102", "main-1", "main-2"]

    def test_rule_order_is_respected(self, catalog):
        merged = merge_selections(catalog, [ByBranch("release"), TopPrs(1), ByBranch("develop")])
        assert _versions(merged) == ["rel-1", "pr-104", "dev-1"]

    def test_empty_rules_give_empty_list(self, catalog):
        assert merge_selections(catalog, []) == []

    def test_unrecognized_rule_aborts_merge(self, catalog):
        with pytest.raises(UnrecognizedSelectionRuleError):
            merge_selections(catalog, [TopPrs(1), {"neither": True}])

    def test_to_payload_returns_server_entries(self, catalog):
        payload = to_payload(merge_selections(catalog, [ByBranch("develop")]))
        assert payload == [{"version": "dev-1", "branch": "develop"}]

    def test_to_payload_keeps_non_mapping_entries(self):
        cat = VersionCatalog.from_json({"prs": ["pr-1", "pr-2"]})
        assert to_payload(merge_selections(cat, [TopPrs(2)])) == ["pr-2", "pr-1"]
