"""
Shared exception types for version_watch.
Network failures are request outcomes, not exceptions; see versions.transport.
"""

from __future__ import annotations


class VersionWatchError(Exception):
    """Base exception for version_watch; catch this for any package-raised error."""

    pass


class UnrecognizedSelectionRuleError(VersionWatchError, ValueError):
    """A selection rule names neither a PR count nor a branch."""

    def __init__(self, rule: object) -> None:
        super().__init__(f"Unrecognized version type: {rule!r}")
        self.rule = rule


class RequestAlreadySentError(VersionWatchError):
    """send() was called on a request handle that is already in flight."""

    pass


__all__ = [
    "RequestAlreadySentError",
    "UnrecognizedSelectionRuleError",
    "VersionWatchError",
]
