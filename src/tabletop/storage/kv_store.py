"""
Key-value stores for the little state the games persist (the best score).

Two implementations of the same get/set shape:
- MemoryStore: a dict, lives as long as the session
- SqliteStore: a single ``metadata(key, value)`` table in a sqlite file
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);
"""


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Session-scoped store backed by a dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def close(self) -> None:
        # Nothing to release; values vanish with the session
        pass


class SqliteStore:
    """Store persisted to a sqlite database file (``:memory:`` works too)."""

    def __init__(self, db_path: str | Path):
        self._closed = False
        if str(db_path) == ":memory:":
            self.db_path = None
            self.conn = sqlite3.connect(":memory:")
        else:
            self.db_path = Path(db_path).resolve()
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(self.db_path))
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")

        self.conn.executescript(SCHEMA)
        self.conn.commit()
        logger.debug("Opened key-value store at %s", self.db_path or ":memory:")

    def get(self, key: str) -> Optional[str]:
        row = self.conn.execute(
            "SELECT value FROM metadata WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
            (key, str(value)),
        )
        self.conn.commit()

    def keys(self) -> list:
        return [r[0] for r in self.conn.execute("SELECT key FROM metadata ORDER BY key")]

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the database connection."""
        if self._closed:
            return
        self._closed = True

        if self.db_path is not None:
            try:
                self.conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")
            except sqlite3.Error as e:
                logger.debug("WAL checkpoint skipped: %s", e)
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()
