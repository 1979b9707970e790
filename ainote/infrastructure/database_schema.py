"""
Database schema initialization for the AI note pad.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ainote.observability.logging import get_logger

logger = get_logger(__name__)

EXPECTED_TABLES = (
    "user_profiles",
    "notes",
    "note_tags",
    "summaries",
    "ai_regenerations",
    "token_usage",
    "kv_store",
)


def init_database(db_path: Path) -> None:
    """
    Initialize database with schema (idempotent)

    Args:
        db_path: Path to the database file

    Side Effects:
    - Creates the parent directory if needed
    - Creates tables and indexes if they don't exist
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS user_profiles (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL UNIQUE,
                has_completed_onboarding INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS notes (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                title VARCHAR(500) NOT NULL,
                content TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_notes_user_created
                ON notes(user_id, created_at);

            CREATE TABLE IF NOT EXISTS note_tags (
                id TEXT PRIMARY KEY,
                note_id TEXT NOT NULL REFERENCES notes(id) ON DELETE CASCADE,
                tag VARCHAR(50) NOT NULL,
                created_at TEXT NOT NULL,
                UNIQUE(note_id, tag)
            );

            CREATE TABLE IF NOT EXISTS summaries (
                id TEXT PRIMARY KEY,
                note_id TEXT NOT NULL UNIQUE REFERENCES notes(id) ON DELETE CASCADE,
                model TEXT NOT NULL,
                content TEXT NOT NULL,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS ai_regenerations (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                note_id TEXT NOT NULL,
                type TEXT NOT NULL CHECK (type IN ('summary', 'tags')),
                created_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_regenerations_user_type_created
                ON ai_regenerations(user_id, type, created_at);

            CREATE TABLE IF NOT EXISTS token_usage (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                note_id TEXT,
                operation_type TEXT NOT NULL,
                input_tokens INTEGER NOT NULL DEFAULT 0,
                output_tokens INTEGER NOT NULL DEFAULT 0,
                total_tokens INTEGER NOT NULL DEFAULT 0,
                cost_usd REAL NOT NULL DEFAULT 0,
                model TEXT NOT NULL,
                created_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_token_usage_user_created
                ON token_usage(user_id, created_at);

            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
        """)
        conn.commit()
    finally:
        conn.close()

    logger.info("Database schema initialized at %s", db_path)


def validate_schema(conn: sqlite3.Connection) -> bool:
    """
    Check that every expected table exists.

    Raises:
        ValueError: If tables are missing
    """
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    present = {row[0] for row in rows}
    missing = [table for table in EXPECTED_TABLES if table not in present]
    if missing:
        raise ValueError(f"Missing tables: {', '.join(missing)}")
    return True
