"""SQLiteBackend: key/value table for operators who keep state in one DB file.

Schema:
  kv  one row per storage key, the value is the JSON document as text.
"""

from __future__ import annotations

import json
import logging
import sqlite3

from reviewdesk_store.base import SessionBackend

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key    TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);
"""


class SQLiteBackend(SessionBackend):
    """Stores session documents in a local SQLite database file.

    Configure via .reviewdesk.yml: `session_store: sqlite` and optionally
    `session_path: /path/to/reviewdesk.db`.
    """

    def __init__(self, db_path: str = ".reviewdesk.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def read(self, key: str) -> dict | None:
        row = self._conn.execute("SELECT value FROM kv WHERE key=?", (key,)).fetchone()
        if row is None:
            return None
        try:
            value = json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt session row for key %r", key)
            return None
        return value if isinstance(value, dict) else None

    def write(self, key: str, value: dict) -> None:
        self._conn.execute(
            "INSERT INTO kv (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, json.dumps(value)),
        )
        self._conn.commit()

    def remove(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv WHERE key=?", (key,))
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()
