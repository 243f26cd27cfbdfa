"""
Version fetchers: catalog listing and latest-version check.

Both issue one cache-busted GET per call and return the in-flight
VersionRequest immediately. Outcomes arrive later on the transport's thread:

- 200: parse, report through the success callback
- timeout / transport error: report failure, no retry
- any other status: no callback fires (the handle records IGNORED)

Callers waiting on a result must apply their own deadline for the last case;
VersionRequest.wait(timeout) is provided for that.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence

from ..store.version_store import VersionStore
from .base import ByBranch, SelectionRule, TopPrs, VersionCatalog, parse_selection
from .ranking import merge_selections, to_payload
from .transport import (
    DEFAULT_TIMEOUT_MS,
    RequestsTransport,
    Transport,
    VersionRequest,
    build_request,
)

logger = logging.getLogger(__name__)

DEFAULT_SELECTION: List[SelectionRule] = [TopPrs(5), ByBranch("master")]


class VersionListFetcher:
    """Fetch the version catalog and return the selected, ranked entries."""

    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        default_selection: Optional[Sequence[Any]] = None,
    ) -> None:
        self._transport = transport or RequestsTransport()
        self._timeout_ms = timeout_ms
        self._default_selection = (
            parse_selection(default_selection)
            if default_selection is not None
            else list(DEFAULT_SELECTION)
        )

    @property
    def default_selection(self) -> List[SelectionRule]:
        return list(self._default_selection)

    def fetch_all_versions(
        self,
        url: str,
        on_success: Callable[[List[Any]], None],
        on_error: Callable[[], None],
        selection: Optional[Sequence[Any]] = None,
    ) -> VersionRequest:
        """
        Request the catalog at ``url`` and call ``on_success(entries)`` with the
        concatenated output of each selection rule, or ``on_error()`` on
        timeout or transport failure.

        Rules are parsed before anything is sent; an unrecognized rule raises
        UnrecognizedSelectionRuleError and no request goes out.
        """
        rules = parse_selection(selection) if selection is not None else self.default_selection

        logger.info("fetching all available versions from %s", url)
        request = build_request(url, self._timeout_ms)

        def _on_timeout() -> None:
            logger.warning("unable to get all versions; timed out")
            on_error()

        def _on_error(exc: Optional[BaseException]) -> None:
            logger.warning("unable to get all versions: %s", exc)
            on_error()

        def _on_load(status: int, payload: Any) -> None:
            if status != 200:
                logger.debug("ignoring version list response with HTTP %s", status)
                return
            catalog = VersionCatalog.from_json(payload)
            versions = merge_selections(catalog, rules)
            on_success(to_payload(versions))

        request.on_timeout = _on_timeout
        request.on_error = _on_error
        request.on_load = _on_load
        return request.send(self._transport)


class LatestVersionChecker:
    """
    Fetch the latest published version and record it as the updated version.

    The callback always fires for success, timeout and error: with the new
    version on success, with no argument otherwise. On failure updated is
    reset to current so did_update() reports no update.
    """

    def __init__(
        self,
        store: VersionStore,
        transport: Optional[Transport] = None,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        self._store = store
        self._transport = transport or RequestsTransport()
        self._timeout_ms = timeout_ms

    @property
    def store(self) -> VersionStore:
        return self._store

    def fetch_latest_version(self, url: str, callback: Callable[..., None]) -> VersionRequest:
        logger.info("fetching new version from %s", url)
        request = build_request(url, self._timeout_ms)

        def _fail() -> None:
            callback()
            self._store.set_updated(self._store.get_current())

        def _on_timeout() -> None:
            logger.warning("unable to check version; timed out")
            _fail()

        def _on_error(exc: Optional[BaseException]) -> None:
            logger.warning("unable to check version: %s", exc)
            _fail()

        def _on_load(status: int, payload: Any) -> None:
            if status != 200:
                logger.debug("ignoring latest version response with HTTP %s", status)
                return
            new_version = payload.get("version") if isinstance(payload, dict) else None
            self._store.set_updated(new_version)
            callback(new_version)

        request.on_timeout = _on_timeout
        request.on_error = _on_error
        request.on_load = _on_load
        return request.send(self._transport)
