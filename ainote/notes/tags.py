"""
Note tags: parsing AI responses and the note_tags table.

A note has at most TAG_MAX_COUNT distinct tags of at most TAG_MAX_LENGTH
characters each.
"""

from __future__ import annotations

import re
import uuid
from datetime import UTC, datetime

from ainote.config import TAG_MAX_COUNT, TAG_MAX_LENGTH
from ainote.infrastructure.database import db_transaction, get_db_connection, retry_on_db_lock
from ainote.observability.logging import get_logger
from ainote.utils.validators import ValidationError, validate_tag

logger = get_logger(__name__)

_LEADING_BULLET = re.compile(r"^[-•*\s]+")


def parse_tags_from_response(response: str, max_tags: int = TAG_MAX_COUNT) -> list[str]:
    """
    Turn a comma-separated model response into a clean tag list.

    Bullets and surrounding whitespace are stripped; empty entries, entries
    longer than TAG_MAX_LENGTH and duplicates are dropped; at most
    ``max_tags`` tags are kept, in response order.
    """
    tags: list[str] = []
    for part in response.replace("\n", ",").split(","):
        tag = _LEADING_BULLET.sub("", part).strip().lstrip("#").strip()
        if not tag or len(tag) > TAG_MAX_LENGTH or tag in tags:
            continue
        tags.append(tag)
        if len(tags) >= max_tags:
            break
    return tags


def _normalize_tags(tags: list[str]) -> list[str]:
    cleaned: list[str] = []
    for tag in tags:
        tag = validate_tag(tag)
        if tag not in cleaned:
            cleaned.append(tag)
    if len(cleaned) > TAG_MAX_COUNT:
        raise ValidationError(f"A note can have at most {TAG_MAX_COUNT} tags")
    return cleaned


class TagRepository:
    """
    Tag persistence. Callers verify note ownership first.
    """

    @staticmethod
    def get_tags(note_id: str) -> list[str]:
        with get_db_connection() as conn:
            rows = conn.execute(
                "SELECT tag FROM note_tags WHERE note_id = ? ORDER BY created_at, rowid",
                (note_id,),
            ).fetchall()
        return [row["tag"] for row in rows]

    @staticmethod
    @retry_on_db_lock()
    def replace_tags(note_id: str, tags: list[str]) -> list[str]:
        """
        Replace the note's whole tag set.

        Raises:
            ValidationError: If a tag is invalid or there are too many
        """
        cleaned = _normalize_tags(tags)
        now = datetime.now(UTC).isoformat()

        with db_transaction() as conn:
            conn.execute("DELETE FROM note_tags WHERE note_id = ?", (note_id,))
            conn.executemany(
                "INSERT INTO note_tags (id, note_id, tag, created_at) VALUES (?, ?, ?, ?)",
                [(str(uuid.uuid4()), note_id, tag, now) for tag in cleaned],
            )

        logger.info("Saved %d tags for note %s", len(cleaned), note_id)
        return cleaned

    @staticmethod
    @retry_on_db_lock()
    def add_tag(note_id: str, tag: str) -> list[str]:
        """
        Raises:
            ValidationError: If the tag is invalid, already present, or the note is full
        """
        tag = validate_tag(tag)
        current = TagRepository.get_tags(note_id)
        if tag in current:
            raise ValidationError("This tag already exists")
        if len(current) >= TAG_MAX_COUNT:
            raise ValidationError(f"A note can have at most {TAG_MAX_COUNT} tags")

        with db_transaction() as conn:
            conn.execute(
                "INSERT INTO note_tags (id, note_id, tag, created_at) VALUES (?, ?, ?, ?)",
                (str(uuid.uuid4()), note_id, tag, datetime.now(UTC).isoformat()),
            )
        return current + [tag]

    @staticmethod
    @retry_on_db_lock()
    def remove_tag(note_id: str, tag: str) -> list[str]:
        with db_transaction() as conn:
            conn.execute("DELETE FROM note_tags WHERE note_id = ? AND tag = ?", (note_id, tag))
        return TagRepository.get_tags(note_id)

    @staticmethod
    @retry_on_db_lock()
    def delete_tags(note_id: str) -> None:
        with db_transaction() as conn:
            conn.execute("DELETE FROM note_tags WHERE note_id = ?", (note_id,))
