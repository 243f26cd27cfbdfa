"""
Request handle and transport for version endpoints.

A VersionRequest is the in-flight handle returned by both fetchers. It carries
the three outcome hooks (on_load, on_error, on_timeout) and fires at most one
of them. Transports decide how and where the GET actually runs:

- RequestsTransport: requests.Session on a daemon thread, with a deadline watchdog (default).
- tests/fakes ManualTransport: records requests; tests drive the hooks.

Every URL gets a cache-busting ``?<epoch-millis>`` suffix.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from typing import Any, Callable, Optional, Protocol, runtime_checkable

import requests

from ..core.errors import RequestAlreadySentError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 4000
USER_AGENT = "version-watch"


class RequestOutcome(enum.Enum):
    """Terminal state of a VersionRequest."""

    PENDING = "PENDING"
    LOADED = "LOADED"
    IGNORED = "IGNORED"  # response arrived with a non-200 status; no hook fires
    ERROR = "ERROR"
    TIMEOUT = "TIMEOUT"


def cache_busted_url(url: str, now_ms: Optional[int] = None) -> str:
    """Append the current epoch-millis as a query parameter."""
    stamp = int(time.time() * 1000) if now_ms is None else int(now_ms)
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{stamp}"


class VersionRequest:
    """
    One GET against a version endpoint.

    Hooks are plain attributes so callers (and tests) can replace them:
        on_load(status, payload), on_error(exc), on_timeout()
    Only the first outcome is dispatched; later ones are logged and dropped.
    """

    def __init__(
        self,
        url: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        *,
        method: str = "GET",
    ) -> None:
        self.url = url
        self.method = method
        self.timeout_ms = timeout_ms
        self.status: Optional[int] = None
        self.response: Any = None
        self.error: Optional[BaseException] = None
        self.outcome = RequestOutcome.PENDING
        self.on_load: Optional[Callable[[int, Any], None]] = None
        self.on_error: Optional[Callable[[Optional[BaseException]], None]] = None
        self.on_timeout: Optional[Callable[[], None]] = None
        self._transport: Optional["Transport"] = None
        self._lock = threading.Lock()
        self._done = threading.Event()

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def sent(self) -> bool:
        return self._transport is not None

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until an outcome (including IGNORED) is recorded."""
        return self._done.wait(timeout)

    def send(self, transport: "Transport") -> "VersionRequest":
        if self._transport is not None:
            raise RequestAlreadySentError(f"request to {self.url} already sent")
        self._transport = transport
        transport.send(self)
        return self

    def _settle(self, outcome: RequestOutcome) -> bool:
        with self._lock:
            if self.outcome is not RequestOutcome.PENDING:
                logger.debug(
                    "dropping %s for %s; already %s",
                    outcome.value, self.url, self.outcome.value,
                )
                return False
            self.outcome = outcome
        return True

    def handle_load(self, status: int, payload: Any) -> None:
        """Response received. Hooks run before the handle is marked done."""
        outcome = RequestOutcome.LOADED if status == 200 else RequestOutcome.IGNORED
        if not self._settle(outcome):
            return
        self.status = status
        self.response = payload
        try:
            if self.on_load is not None:
                self.on_load(status, payload)
        finally:
            self._done.set()

    def handle_error(self, exc: Optional[BaseException] = None) -> None:
        if not self._settle(RequestOutcome.ERROR):
            return
        self.error = exc
        try:
            if self.on_error is not None:
                self.on_error(exc)
        finally:
            self._done.set()

    def handle_timeout(self) -> None:
        if not self._settle(RequestOutcome.TIMEOUT):
            return
        try:
            if self.on_timeout is not None:
                self.on_timeout()
        finally:
            self._done.set()

    def __repr__(self) -> str:
        return f"VersionRequest({self.method} {self.url!r}, outcome={self.outcome.value})"


def build_request(url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> VersionRequest:
    """Shared request construction: cache-busted URL, JSON response, fixed timeout."""
    return VersionRequest(cache_busted_url(url), timeout_ms=timeout_ms)


@runtime_checkable
class Transport(Protocol):
    """Starts a request; must eventually call exactly one handle_* on it."""

    def send(self, request: VersionRequest) -> None: ...


class RequestsTransport:
    """
    Run each request on a daemon thread with a requests.Session.

    ``timeout_ms`` is a deadline for the whole exchange, body included: a
    watchdog timer fires handle_timeout when it passes, and whatever the
    worker reports afterwards is dropped by the handle. requests' own timeout
    still bounds the connect step and each read. Other RequestException and
    undecodable JSON bodies map to handle_error. Any HTTP status reaches
    handle_load; only 200 bodies are read.
    """

    def __init__(self, session: Optional[requests.Session] = None, *, daemon: bool = True) -> None:
        self._session = session or requests.Session()
        self._daemon = daemon

    def send(self, request: VersionRequest) -> None:
        thread = threading.Thread(
            target=self.perform,
            args=(request,),
            name=f"version-watch:{request.url}",
            daemon=self._daemon,
        )
        thread.start()

    def perform(self, request: VersionRequest) -> None:
        """Blocking GET; dispatches the outcome on the calling thread (or the watchdog's)."""
        deadline = time.monotonic() + request.timeout_s
        watchdog = threading.Timer(request.timeout_s, self._expire, args=(request,))
        watchdog.daemon = True
        watchdog.start()
        try:
            self._exchange(request, deadline)
        finally:
            watchdog.cancel()

    @staticmethod
    def _expire(request: VersionRequest) -> None:
        logger.debug("deadline of %sms passed for %s", request.timeout_ms, request.url)
        request.handle_timeout()

    def _exchange(self, request: VersionRequest, deadline: float) -> None:
        try:
            resp = self._session.request(
                request.method,
                request.url,
                timeout=request.timeout_s,
                headers={"Accept": "application/json", "User-Agent": USER_AGENT},
                stream=True,
            )
        except requests.exceptions.Timeout:
            request.handle_timeout()
            return
        except requests.exceptions.RequestException as exc:
            request.handle_error(exc)
            return

        try:
            payload: Any = None
            if resp.status_code == 200:
                try:
                    payload = resp.json()
                except requests.exceptions.RequestException as exc:
                    # A read timeout while streaming the body surfaces as ConnectionError.
                    if time.monotonic() >= deadline:
                        request.handle_timeout()
                    else:
                        request.handle_error(exc)
                    return
                except ValueError as exc:
                    request.handle_error(exc)
                    return
            if time.monotonic() >= deadline:
                request.handle_timeout()
                return
            request.handle_load(resp.status_code, payload)
        finally:
            resp.close()
