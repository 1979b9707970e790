"""
Daily AI regeneration limits.

Each user may regenerate a note's summary or tags a limited number of times
per calendar day (UTC). Records live in the ai_regenerations table; a day's
count is every record created since 00:00 UTC.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, time
from typing import Any, Literal, NamedTuple

from ainote.config import REGENERATION_DAILY_LIMITS
from ainote.infrastructure.database import db_transaction, get_db_connection, retry_on_db_lock
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import counter, log_event

logger = get_logger(__name__)

RegenerationType = Literal["summary", "tags"]
REGENERATION_TYPES: tuple[str, ...] = ("summary", "tags")


class RegenerationStatus(NamedTuple):
    """Current daily regeneration status for a user and type."""

    can_regenerate: bool
    current_count: int
    limit: int


class RegenerationLimitExceeded(Exception):
    """Raised when a user has used up today's regenerations for a type."""

    def __init__(self, regeneration_type: str, current_count: int, limit: int) -> None:
        self.regeneration_type = regeneration_type
        self.current_count = current_count
        self.limit = limit
        super().__init__(
            f"Daily {regeneration_type} regeneration limit ({limit}) reached. "
            "Please try again tomorrow."
        )


def _now() -> datetime:
    return datetime.now(UTC)


def _start_of_day(now: datetime) -> str:
    return datetime.combine(now.astimezone(UTC).date(), time.min, tzinfo=UTC).isoformat()


def _check_type(regeneration_type: str) -> None:
    if regeneration_type not in REGENERATION_TYPES:
        raise ValueError(f"Unknown regeneration type: {regeneration_type}")


def get_regeneration_limit(regeneration_type: str) -> int:
    _check_type(regeneration_type)
    return REGENERATION_DAILY_LIMITS[regeneration_type]


@retry_on_db_lock()
def check_regeneration_limit(
    user_id: str,
    regeneration_type: str,
    now: datetime | None = None,
) -> RegenerationStatus:
    """
    Count today's regenerations for ``user_id`` and ``regeneration_type``.

    Args:
        now: reference time (defaults to the current UTC time)
    """
    limit = get_regeneration_limit(regeneration_type)
    since = _start_of_day(now or _now())

    with get_db_connection() as conn:
        row = conn.execute(
            """
            SELECT COUNT(*) FROM ai_regenerations
            WHERE user_id = ? AND type = ? AND created_at >= ?
            """,
            (user_id, regeneration_type, since),
        ).fetchone()

    current = row[0]
    return RegenerationStatus(can_regenerate=current < limit, current_count=current, limit=limit)


@retry_on_db_lock()
def record_regeneration(
    user_id: str,
    note_id: str,
    regeneration_type: str,
    now: datetime | None = None,
) -> str:
    """
    Store one regeneration.

    Returns:
        The new record id
    """
    _check_type(regeneration_type)
    record_id = str(uuid.uuid4())
    created_at = (now or _now()).astimezone(UTC).isoformat()

    with db_transaction() as conn:
        conn.execute(
            """
            INSERT INTO ai_regenerations (id, user_id, note_id, type, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (record_id, user_id, note_id, regeneration_type, created_at),
        )

    counter(f"regenerations.{regeneration_type}")
    logger.info("Recorded %s regeneration for note %s", regeneration_type, note_id)
    return record_id


def can_regenerate_and_record(
    user_id: str,
    note_id: str,
    regeneration_type: str,
    now: datetime | None = None,
) -> RegenerationStatus:
    """
    Enforce the daily limit, then record the regeneration.

    Returns:
        Status with current_count including this regeneration

    Raises:
        RegenerationLimitExceeded: If today's limit is already used up
    """
    status = check_regeneration_limit(user_id, regeneration_type, now=now)
    if not status.can_regenerate:
        counter("regenerations.limit_exceeded")
        log_event(
            "regenerations.limit_exceeded",
            type=regeneration_type,
            current_count=status.current_count,
            limit=status.limit,
        )
        raise RegenerationLimitExceeded(regeneration_type, status.current_count, status.limit)

    record_regeneration(user_id, note_id, regeneration_type, now=now)
    current = status.current_count + 1
    return RegenerationStatus(
        can_regenerate=current < status.limit, current_count=current, limit=status.limit
    )


def get_regeneration_history(
    user_id: str,
    regeneration_type: str | None = None,
    limit: int = 100,
) -> list[dict[str, Any]]:
    """Most recent regenerations first."""
    query = "SELECT id, note_id, type, created_at FROM ai_regenerations WHERE user_id = ?"
    params: list[Any] = [user_id]
    if regeneration_type is not None:
        _check_type(regeneration_type)
        query += " AND type = ?"
        params.append(regeneration_type)
    query += " ORDER BY created_at DESC LIMIT ?"
    params.append(limit)

    with get_db_connection() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(row) for row in rows]
