"""
Note Repository - CRUD operations for the notes table.

Every read and write is scoped to the owning user; a note that exists but
belongs to someone else is reported exactly like a missing one.
"""

from __future__ import annotations

import math
import uuid
from datetime import UTC, datetime
from typing import Any

from ainote.config import NOTES_PAGE_SIZE
from ainote.infrastructure.database import db_transaction, get_db_connection, retry_on_db_lock
from ainote.notes.models import Note, SortOption
from ainote.observability.logging import get_logger
from ainote.utils.validators import validate_note_content, validate_note_title

logger = get_logger(__name__)

ORDER_BY: dict[SortOption, str] = {
    SortOption.LATEST: "created_at DESC",
    SortOption.OLDEST: "created_at ASC",
    SortOption.TITLE: "title COLLATE NOCASE ASC, created_at DESC",
}


class NoteNotFoundError(LookupError):
    """Raised when a note does not exist or is not owned by the user."""

    def __init__(self, note_id: str) -> None:
        self.note_id = note_id
        super().__init__("Note not found")


class NoteRepository:
    """
    Repository for Note CRUD operations.

    All methods use connection pooling and proper transaction handling.
    """

    @staticmethod
    @retry_on_db_lock()
    def create(user_id: str, title: str, content: str) -> Note:
        """
        Create a note.

        Raises:
            ValidationError: If the title or content is invalid

        Side Effects:
            - Inserts row into notes table
        """
        now = datetime.now(UTC)
        note = Note(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=validate_note_title(title),
            content=validate_note_content(content),
            created_at=now,
            updated_at=now,
        )

        with db_transaction() as conn:
            conn.execute(
                """
                INSERT INTO notes (id, user_id, title, content, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    note.id,
                    note.user_id,
                    note.title,
                    note.content,
                    note.created_at.isoformat(),
                    note.updated_at.isoformat(),
                ),
            )

        logger.info("Created note %s", note.id)
        return note

    @staticmethod
    def get(user_id: str, note_id: str) -> Note:
        """
        Raises:
            NoteNotFoundError: If the note is missing or owned by another user
        """
        with get_db_connection() as conn:
            row = conn.execute(
                "SELECT * FROM notes WHERE id = ? AND user_id = ?",
                (note_id, user_id),
            ).fetchone()

        if row is None:
            raise NoteNotFoundError(note_id)
        return Note.from_db_row(dict(row))

    @staticmethod
    def list_notes(
        user_id: str,
        sort: SortOption | str | None = SortOption.LATEST,
        page: int = 1,
        page_size: int = NOTES_PAGE_SIZE,
    ) -> dict[str, Any]:
        """
        One page of the user's notes.

        Returns:
            dict with notes, total, page, page_size, total_pages and sort
        """
        order = SortOption.parse(sort.value if isinstance(sort, SortOption) else sort)
        page = max(page, 1)
        offset = (page - 1) * page_size

        with get_db_connection() as conn:
            total = conn.execute(
                "SELECT COUNT(*) FROM notes WHERE user_id = ?", (user_id,)
            ).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM notes WHERE user_id = ? ORDER BY {ORDER_BY[order]} LIMIT ? OFFSET ?",
                (user_id, page_size, offset),
            ).fetchall()

        return {
            "notes": [Note.from_db_row(dict(row)) for row in rows],
            "total": total,
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(total / page_size) if total else 0,
            "sort": order.value,
        }

    @staticmethod
    @retry_on_db_lock()
    def update(
        user_id: str,
        note_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Note:
        """
        Update title and/or content; omitted fields are kept.

        Raises:
            NoteNotFoundError: If the note is missing or owned by another user
            ValidationError: If a supplied field is invalid
        """
        note = NoteRepository.get(user_id, note_id)
        if title is not None:
            note.title = validate_note_title(title)
        if content is not None:
            note.content = validate_note_content(content)
        note.updated_at = datetime.now(UTC)

        with db_transaction() as conn:
            conn.execute(
                """
                UPDATE notes SET title = ?, content = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (note.title, note.content, note.updated_at.isoformat(), note_id, user_id),
            )

        logger.info("Updated note %s", note_id)
        return note

    @staticmethod
    @retry_on_db_lock()
    def delete(user_id: str, note_id: str) -> None:
        """
        Delete a note with its tags and summary (ON DELETE CASCADE).

        Raises:
            NoteNotFoundError: If the note is missing or owned by another user
        """
        with db_transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM notes WHERE id = ? AND user_id = ?", (note_id, user_id)
            )
            deleted = cursor.rowcount

        if not deleted:
            raise NoteNotFoundError(note_id)
        logger.info("Deleted note %s", note_id)
