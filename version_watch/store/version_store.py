"""
Current/updated version state.

current: durable, lives in a SlotBackend under a fixed key; set by the host.
updated: volatile, last version observed from the server; None until the
first check completes.
"""

from __future__ import annotations

import threading
from typing import Optional

from .backend import MemorySlotBackend, SlotBackend

CURRENT_VERSION_KEY = "CURRENT_VERSION"


class VersionStore:
    """Owned version state. Lock-protected; fetch hooks run on worker threads."""

    def __init__(
        self,
        backend: Optional[SlotBackend] = None,
        key: str = CURRENT_VERSION_KEY,
    ) -> None:
        self._backend = backend if backend is not None else MemorySlotBackend()
        self._key = key
        self._updated: Optional[str] = None
        self._lock = threading.RLock()

    @property
    def backend(self) -> SlotBackend:
        return self._backend

    @property
    def key(self) -> str:
        return self._key

    def get_current(self) -> Optional[str]:
        with self._lock:
            return self._backend.get(self._key)

    def set_current(self, value: Optional[str]) -> None:
        """Persist the running version. None clears the slot."""
        with self._lock:
            if value is None:
                self._backend.delete(self._key)
            else:
                self._backend.set(self._key, value)

    def get_updated(self) -> Optional[str]:
        with self._lock:
            return self._updated

    def set_updated(self, value: Optional[str]) -> None:
        with self._lock:
            self._updated = value

    def did_update(self) -> bool:
        """True when the last observed server version differs from current."""
        with self._lock:
            return self._updated != self._backend.get(self._key)

    def __repr__(self) -> str:
        return f"VersionStore(key={self._key!r}, updated={self._updated!r})"
