"""
Key-value backing for small JSON documents.

The ledger is a single JSON string stored under one key. `SqliteKeyValueStore`
keeps it in a one-table SQLite file; `InMemoryKeyValueStore` implements the same
protocol for tests and throwaway sessions.

Reads never raise: a store that cannot be read behaves as if the key were
absent. Writes raise `StorageWriteError`.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import closing
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from havs.errors import StorageWriteError
from havs.utils.logging import get_logger

log = get_logger(__name__)

_CREATE_TABLE = "CREATE TABLE IF NOT EXISTS preferences (key TEXT PRIMARY KEY, value TEXT NOT NULL);"


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string-to-string store used by the ledger."""

    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, value: str) -> None:
        ...


class SqliteKeyValueStore:
    """
    Key-value pairs in a SQLite `preferences` table.

    A connection is opened per call; the ledger is written a handful of times
    per session, so pooling buys nothing here.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        try:
            conn.execute(_CREATE_TABLE)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def get(self, key: str) -> Optional[str]:
        if not self._db_path.exists():
            return None
        try:
            with closing(self._connect()) as conn:
                row = conn.execute("SELECT value FROM preferences WHERE key = ?;", (key,)).fetchone()
        except sqlite3.Error as exc:
            log.warning(
                "Key-value read failed; treating key as absent",
                extra={"key": key, "db_path": str(self._db_path), "error": str(exc)},
            )
            return None
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(self._connect()) as conn:
                with conn:
                    conn.execute(
                        "INSERT INTO preferences (key, value) VALUES (?, ?) "
                        "ON CONFLICT(key) DO UPDATE SET value = excluded.value;",
                        (key, value),
                    )
        except (sqlite3.Error, OSError) as exc:
            raise StorageWriteError(f"Failed to write '{key}' to {self._db_path}: {exc}") from exc


class InMemoryKeyValueStore:
    """Dict-backed store; counts writes so callers can assert on persistence."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()
        self.put_count = 0

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            self.put_count += 1


__all__ = ["KeyValueStore", "SqliteKeyValueStore", "InMemoryKeyValueStore"]
