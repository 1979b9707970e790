"""
Draft persistence for unsaved note edits.

One draft slot per user, stored as JSON under ``note-draft-<user_id>``.
Nothing here raises to the caller: write failures report False, read
failures and corrupt entries read as "no draft".
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from ainote.drafts.store import KeyValueStore, StorageError
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import counter

logger = get_logger(__name__)

DRAFT_KEY_PREFIX = "note-draft-"

# Failures a store may surface; anything else is a programming error and propagates
STORE_ERRORS: tuple[type[BaseException], ...] = (StorageError, OSError, sqlite3.Error)


@dataclass(frozen=True)
class NoteDraft:
    title: str
    content: str
    savedAt: str  # noqa: N815 - stored JSON field name
    userId: str  # noqa: N815 - stored JSON field name

    @property
    def saved_at(self) -> str:
        return self.savedAt

    @property
    def user_id(self) -> str:
        return self.userId


def draft_key(user_id: str) -> str:
    return f"{DRAFT_KEY_PREFIX}{user_id}"


class DraftStorage:
    """
    Save, load and clear a user's single draft slot.

    Args:
        store: KeyValueStore holding the serialized drafts
        clock: returns the current time (injectable for tests)
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self._clock = clock or (lambda: datetime.now(UTC))

    def save_draft(self, user_id: str, title: str, content: str) -> bool:
        """
        Overwrite the user's draft.

        Returns:
            False when both title and content are blank (nothing is written)
            or when the store write fails; True otherwise.
        """
        if not title.strip() and not content.strip():
            return False

        draft = NoteDraft(
            title=title,
            content=content,
            savedAt=self._clock().isoformat(),
            userId=user_id,
        )

        try:
            self.store.set(draft_key(user_id), json.dumps(asdict(draft), ensure_ascii=False))
        except STORE_ERRORS as e:
            logger.warning("Failed to save draft for user %s: %s", user_id, e)
            counter("drafts.save_failed")
            return False

        return True

    def get_draft(self, user_id: str) -> NoteDraft | None:
        """
        Load the user's draft.

        Side Effects:
            - Deletes the entry when it is not valid JSON or a field is not a string
            - Leaves the entry alone when it belongs to a different user
        """
        key = draft_key(user_id)
        try:
            raw = self.store.get(key)
        except STORE_ERRORS as e:
            logger.warning("Failed to read draft for user %s: %s", user_id, e)
            return None

        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding unreadable draft for user %s", user_id)
            self.clear_draft(user_id)
            return None

        fields = ("title", "content", "savedAt", "userId")
        if not isinstance(data, dict) or not all(isinstance(data.get(f), str) for f in fields):
            logger.warning("Discarding malformed draft for user %s", user_id)
            self.clear_draft(user_id)
            return None

        if data["userId"] != user_id:
            return None

        return NoteDraft(**{f: data[f] for f in fields})

    def clear_draft(self, user_id: str) -> None:
        try:
            self.store.delete(draft_key(user_id))
        except STORE_ERRORS as e:
            logger.warning("Failed to clear draft for user %s: %s", user_id, e)

    def has_draft(self, user_id: str) -> bool:
        return self.get_draft(user_id) is not None
