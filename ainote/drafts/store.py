"""
Key-value stores backing draft persistence.

Any object with get/set/delete over string keys and values satisfies
KeyValueStore. Two implementations ship: an in-process dict (tests, single
worker dev servers) and a table in the service's SQLite database.
"""

from __future__ import annotations

from datetime import UTC, datetime
from threading import Lock
from typing import Protocol, runtime_checkable

from ainote.infrastructure.database import db_transaction, get_db_connection, retry_on_db_lock


class StorageError(RuntimeError):
    """Raised by a store that cannot complete a read or write."""


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Thread-safe dict-backed store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class SQLiteKeyValueStore:
    """Store backed by the kv_store table (last write wins)."""

    def get(self, key: str) -> str | None:
        with get_db_connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    @retry_on_db_lock()
    def set(self, key: str, value: str) -> None:
        with db_transaction() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(UTC).isoformat()),
            )

    @retry_on_db_lock()
    def delete(self, key: str) -> None:
        with db_transaction() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
