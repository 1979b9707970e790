"""
Note domain models.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ainote.config import NOTE_TITLE_MAX_LENGTH


def utc_now() -> datetime:
    """Return current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


class SortOption(str, Enum):
    """Note list ordering."""

    LATEST = "latest"
    OLDEST = "oldest"
    TITLE = "title"

    @classmethod
    def parse(cls, value: str | None) -> SortOption:
        """Unknown or missing values fall back to LATEST."""
        try:
            return cls(value) if value else cls.LATEST
        except ValueError:
            return cls.LATEST


class Note(BaseModel):
    model_config = ConfigDict(frozen=False)

    id: str
    user_id: str
    title: str = Field(..., max_length=NOTE_TITLE_MAX_LENGTH)
    content: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> Note:
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            content=row["content"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class Summary(BaseModel):
    id: str
    note_id: str
    model: str
    content: str
    created_at: datetime

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> Summary:
        return cls(
            id=row["id"],
            note_id=row["note_id"],
            model=row["model"],
            content=row["content"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class NoteTemplate(BaseModel):
    id: str
    name: str
    description: str
    title: str
    body: str


NOTE_TEMPLATES: list[NoteTemplate] = [
    NoteTemplate(
        id="meeting",
        name="Meeting notes",
        description="Capture discussion points and action items",
        title="Meeting notes - ",
        body="## Attendees\n\n\n## Agenda\n\n\n## Decisions\n\n\n## Action items\n\n",
    ),
    NoteTemplate(
        id="idea",
        name="Idea",
        description="Jot down an idea before it slips away",
        title="Idea - ",
        body="## Core idea\n\n\n## Background\n\n\n## Next steps\n\n",
    ),
    NoteTemplate(
        id="todo",
        name="To-do list",
        description="Plan what needs doing today",
        title="To-do - ",
        body="## Today's goal\n\n\n## Tasks\n- [ ] \n- [ ] \n- [ ] \n\n## Notes\n\n",
    ),
]


def get_template(template_id: str) -> NoteTemplate | None:
    return next((t for t in NOTE_TEMPLATES if t.id == template_id), None)
