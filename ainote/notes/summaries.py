"""
Summary Repository - one AI summary per note.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from ainote.infrastructure.database import db_transaction, get_db_connection, retry_on_db_lock
from ainote.notes.models import Summary
from ainote.observability.logging import get_logger

logger = get_logger(__name__)


class SummaryRepository:
    @staticmethod
    def get(note_id: str) -> Summary | None:
        with get_db_connection() as conn:
            row = conn.execute("SELECT * FROM summaries WHERE note_id = ?", (note_id,)).fetchone()
        return Summary.from_db_row(dict(row)) if row else None

    @staticmethod
    @retry_on_db_lock()
    def upsert(note_id: str, content: str, model: str) -> Summary:
        """
        Store the note's summary, replacing any previous one.

        Side Effects:
            - Inserts or updates the row in summaries (unique on note_id)
        """
        summary = Summary(
            id=str(uuid.uuid4()),
            note_id=note_id,
            model=model,
            content=content,
            created_at=datetime.now(UTC),
        )

        with db_transaction() as conn:
            conn.execute(
                """
                INSERT INTO summaries (id, note_id, model, content, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(note_id) DO UPDATE SET
                    model = excluded.model,
                    content = excluded.content,
                    created_at = excluded.created_at
                """,
                (
                    summary.id,
                    summary.note_id,
                    summary.model,
                    summary.content,
                    summary.created_at.isoformat(),
                ),
            )

        logger.info("Saved summary for note %s (model=%s)", note_id, model)
        return SummaryRepository.get(note_id) or summary
