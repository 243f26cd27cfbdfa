"""
Slot backend interface: a durable string slot keyed by a fixed name.
Reads and writes are synchronous. No business logic.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional


class SlotBackend(ABC):
    """Key-value slots. Missing keys read as None."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the slot. Deleting a missing key is a no-op."""
        ...


class MemorySlotBackend(SlotBackend):
    """Process-lifetime slots; for tests and hosts without a disk."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._slots: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._slots[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._slots.pop(key, None)
