"""
SQLite connection lifecycle: context manager with guaranteed close.
Each operation opens its own connection so slots can be touched from any thread.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union


@contextmanager
def sqlite_conn(db_path: Union[str, Path]) -> Generator[sqlite3.Connection, None, None]:
    """Yield a SQLite connection that is always closed on exit. Creates the parent dir."""
    path = Path(db_path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    try:
        yield conn
    finally:
        conn.close()
