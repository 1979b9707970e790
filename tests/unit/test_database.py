"""Tests for the connection pool and schema"""

from __future__ import annotations

import sqlite3

import pytest

from ainote.infrastructure.database import (
    DatabaseConnectionPool,
    db_transaction,
    get_db_connection,
    get_pool_stats,
    reset_pool,
    retry_on_db_lock,
    validate_schema,
)
from ainote.infrastructure.database_schema import EXPECTED_TABLES
from ainote.infrastructure.database_schema import validate_schema as validate_connection


def test_schema_has_expected_tables():
    assert validate_schema() is True
    with get_db_connection() as conn:
        names = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert set(EXPECTED_TABLES) <= names


def test_validate_schema_reports_missing_tables():
    conn = sqlite3.connect(":memory:")
    with pytest.raises(ValueError, match="Missing tables"):
        validate_connection(conn)
    conn.close()


def test_transaction_rolls_back_on_error():
    with pytest.raises(RuntimeError), db_transaction() as conn:
        conn.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES ('k', 'v', 'now')"
        )
        raise RuntimeError("abort")

    with get_db_connection() as conn:
        assert conn.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0] == 0


def test_foreign_keys_enforced():
    with pytest.raises(sqlite3.IntegrityError), db_transaction() as conn:
        conn.execute(
            "INSERT INTO note_tags (id, note_id, tag, created_at) VALUES ('t', 'missing', 'x', 'now')"
        )


def test_pool_stats_and_reuse(tmp_path):
    reset_pool()
    stats = get_pool_stats()
    assert stats["in_use"] == 0
    assert stats["closed"] is False

    with get_db_connection():
        assert get_pool_stats()["in_use"] == 1
    assert get_pool_stats()["in_use"] == 0


def test_pool_close_all(tmp_path):
    db_path = tmp_path / "pool.db"
    sqlite3.connect(db_path).close()
    pool = DatabaseConnectionPool(db_path, pool_size=2)

    conn = pool.get_connection()
    pool.return_connection(conn)
    pool.close_all()

    assert pool.closed


def test_missing_database_file(monkeypatch, tmp_path):
    monkeypatch.setenv("AINOTE_DB_PATH", str(tmp_path / "absent.db"))
    reset_pool()
    with pytest.raises(FileNotFoundError), get_db_connection():
        pass


def test_retry_on_db_lock_retries_locked_errors():
    attempts = []

    @retry_on_db_lock(max_retries=3, base_delay=0.001, max_delay=0.002)
    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise sqlite3.OperationalError("database is locked")
        return "ok"

    assert flaky() == "ok"
    assert len(attempts) == 3


def test_retry_on_db_lock_passes_other_errors():
    @retry_on_db_lock(max_retries=3, base_delay=0.001)
    def broken():
        raise sqlite3.OperationalError("no such table: nope")

    with pytest.raises(sqlite3.OperationalError, match="no such table"):
        broken()
