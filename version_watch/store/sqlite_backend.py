"""
SQLite slot backend. The version_slots table is created on first use.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from .backend import SlotBackend
from .sqlite_session import sqlite_conn

logger = logging.getLogger(__name__)

_CREATE_SQL = """
CREATE TABLE IF NOT EXISTS version_slots (
    slot_key TEXT PRIMARY KEY,
    slot_value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SqliteSlotBackend(SlotBackend):
    """Read/write slots from a SQLite file."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        if str(db_path) == ":memory:":
            raise ValueError("connections are per-operation; use MemorySlotBackend for in-memory slots")
        self._db_path = db_path

    @property
    def db_path(self) -> Union[str, Path]:
        return self._db_path

    def _ensure_table(self, conn: sqlite3.Connection) -> None:
        conn.execute(_CREATE_SQL)

    def get(self, key: str) -> Optional[str]:
        with sqlite_conn(self._db_path) as conn:
            self._ensure_table(conn)
            row = conn.execute(
                "SELECT slot_value FROM version_slots WHERE slot_key = ?",
                (key,),
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat(timespec="seconds")
        with sqlite_conn(self._db_path) as conn:
            self._ensure_table(conn)
            conn.execute(
                """
                INSERT INTO version_slots (slot_key, slot_value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(slot_key) DO UPDATE SET
                    slot_value = excluded.slot_value,
                    updated_at = excluded.updated_at;
                """,
                (key, value, now),
            )
            conn.commit()
        logger.debug("slot %s set in %s", key, self._db_path)

    def delete(self, key: str) -> None:
        with sqlite_conn(self._db_path) as conn:
            self._ensure_table(conn)
            conn.execute("DELETE FROM version_slots WHERE slot_key = ?", (key,))
            conn.commit()
