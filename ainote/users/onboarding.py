"""
Onboarding completion flag, one row per user in user_profiles.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from ainote.infrastructure.database import db_transaction, get_db_connection, retry_on_db_lock
from ainote.observability.logging import get_logger

logger = get_logger(__name__)


def get_onboarding_status(user_id: str) -> bool:
    """Users without a profile row have not completed onboarding."""
    with get_db_connection() as conn:
        row = conn.execute(
            "SELECT has_completed_onboarding FROM user_profiles WHERE user_id = ?",
            (user_id,),
        ).fetchone()
    return bool(row["has_completed_onboarding"]) if row else False


@retry_on_db_lock()
def _set_onboarding(user_id: str, completed: bool) -> None:
    now = datetime.now(UTC).isoformat()
    with db_transaction() as conn:
        conn.execute(
            """
            INSERT INTO user_profiles (id, user_id, has_completed_onboarding, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                has_completed_onboarding = excluded.has_completed_onboarding,
                updated_at = excluded.updated_at
            """,
            (str(uuid.uuid4()), user_id, int(completed), now, now),
        )


def complete_onboarding(user_id: str) -> None:
    _set_onboarding(user_id, True)
    logger.info("User %s completed onboarding", user_id)


def reset_onboarding(user_id: str) -> None:
    _set_onboarding(user_id, False)
    logger.info("Reset onboarding for user %s", user_id)
