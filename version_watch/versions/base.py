"""
Version data contracts.

A catalog response is split into two collections:
- prs: pull-request preview builds, ranked by timestamp
- branches: named branch builds, filtered by branch name

Selection rules are a tagged union (TopPrs | ByBranch) validated at
construction. Data is held in frozen dataclasses; the untouched server entry
travels along in ``raw`` so callers get back exactly what the server sent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.errors import UnrecognizedSelectionRuleError


def _to_float(x: Any) -> Optional[float]:
    if x is None or isinstance(x, bool):
        return None
    try:
        return float(x)
    except (TypeError, ValueError):
        return None


def _to_str(x: Any) -> Optional[str]:
    return x if isinstance(x, str) else None


def same_value(a: Any, b: Any) -> bool:
    """Equality that keeps True distinct from 1."""
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


@dataclass(frozen=True)
class VersionDescriptor:
    """
    One deployable build. Only timestamp and branch are interpreted; branch is
    kept as sent. ``raw`` is the untouched server entry, whatever its type.
    """

    version: Optional[str]
    timestamp: Optional[float] = None
    branch: Any = None
    raw: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def from_json(cls, entry: Any) -> "VersionDescriptor":
        if not isinstance(entry, Mapping):
            return cls(version=_to_str(entry), raw=entry)
        return cls(
            version=_to_str(entry.get("version")),
            timestamp=_to_float(entry.get("timestamp")),
            branch=entry.get("branch"),
            raw=entry,
        )


@dataclass(frozen=True)
class VersionCatalog:
    """Full server-reported set of candidate versions. Neither side is sorted."""

    prs: Tuple[VersionDescriptor, ...] = ()
    branches: Tuple[VersionDescriptor, ...] = ()

    @classmethod
    def from_json(cls, payload: Any) -> "VersionCatalog":
        if not isinstance(payload, Mapping):
            return cls()

        def _entries(key: str) -> Tuple[VersionDescriptor, ...]:
            items = payload.get(key)
            if not isinstance(items, list):
                return ()
            return tuple(VersionDescriptor.from_json(item) for item in items)

        return cls(prs=_entries("prs"), branches=_entries("branches"))


@dataclass(frozen=True)
class TopPrs:
    """Take the ``count`` most recent PR builds."""

    count: int

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise TypeError(f"TopPrs.count must be int, got {type(self.count).__name__}")
        if self.count < 0:
            raise ValueError(f"TopPrs.count must be >= 0, got {self.count}")

    def to_json(self) -> Dict[str, Any]:
        return {"prs": self.count}


@dataclass(frozen=True)
class ByBranch:
    """Take every branch build whose branch equals ``name``, compared as sent."""

    name: Any

    def __post_init__(self) -> None:
        if self.name is None:
            raise TypeError("ByBranch.name must not be None")

    def to_json(self) -> Dict[str, Any]:
        return {"branch": self.name}


SelectionRule = Union[TopPrs, ByBranch]


def _count_from_json(rule: Mapping[str, Any]) -> int:
    value = rule["prs"]
    if isinstance(value, bool):
        raise UnrecognizedSelectionRuleError(rule)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise UnrecognizedSelectionRuleError(rule)
    return value


def parse_selection_rule(obj: Any) -> SelectionRule:
    """
    Convert the wire/config form into a SelectionRule.

    ``{"prs": 3}`` -> TopPrs(3), ``{"branch": "main"}`` -> ByBranch("main").
    When both keys are present ``prs`` wins. The branch value is kept as
    given; the count must be a non-negative integer. A mapping with neither
    key, a bad count, or any non-mapping object raises
    UnrecognizedSelectionRuleError.
    """
    if isinstance(obj, (TopPrs, ByBranch)):
        return obj
    if not isinstance(obj, Mapping):
        raise UnrecognizedSelectionRuleError(obj)
    if obj.get("prs") is not None:
        return TopPrs(_count_from_json(obj))
    if obj.get("branch") is not None:
        return ByBranch(obj["branch"])
    raise UnrecognizedSelectionRuleError(obj)


def parse_selection(rules: Sequence[Any]) -> List[SelectionRule]:
    """Parse a list of rules, failing on the first unrecognized one."""
    return [parse_selection_rule(r) for r in rules]
