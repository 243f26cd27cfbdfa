"""
Store: slot backends and the current/updated version state.
No network logic.
"""

from __future__ import annotations

from .backend import MemorySlotBackend, SlotBackend
from .sqlite_backend import SqliteSlotBackend
from .version_store import CURRENT_VERSION_KEY, VersionStore

__all__ = [
    "CURRENT_VERSION_KEY",
    "MemorySlotBackend",
    "SlotBackend",
    "SqliteSlotBackend",
    "VersionStore",
]
