"""
Token usage accounting for AI generations.

Every summary/tag generation records estimated input/output tokens and the
resulting cost so users can see their usage and operators can see daily
totals.
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime, time, timedelta
from typing import Any, Literal

from ainote.infrastructure.database import db_transaction, get_db_connection, retry_on_db_lock
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import counter
from ainote.utils.token_calculator import calculate_gemini_cost

logger = get_logger(__name__)

OperationType = Literal["summary", "tags", "regeneration"]
OPERATION_TYPES: tuple[str, ...] = ("summary", "tags", "regeneration")

UsagePeriod = Literal["today", "week", "month", "year"]
PERIOD_DAYS: dict[str, int] = {"today": 0, "week": 7, "month": 30, "year": 365}


def _period_start(period: str, now: datetime) -> datetime:
    if period not in PERIOD_DAYS:
        raise ValueError(f"Unknown usage period: {period}")
    midnight = datetime.combine(now.astimezone(UTC).date(), time.min, tzinfo=UTC)
    return midnight - timedelta(days=PERIOD_DAYS[period])


@retry_on_db_lock()
def record_token_usage(
    user_id: str,
    operation_type: str,
    input_tokens: int,
    output_tokens: int,
    model: str,
    note_id: str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Store one usage record.

    Returns:
        The stored record as a dict

    Raises:
        ValueError: If operation_type is unknown or a token count is negative
    """
    if operation_type not in OPERATION_TYPES:
        raise ValueError(f"Unknown operation type: {operation_type}")
    if input_tokens < 0 or output_tokens < 0:
        raise ValueError("Token counts must be non-negative")

    record = {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "note_id": note_id,
        "operation_type": operation_type,
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
        "cost_usd": calculate_gemini_cost(input_tokens, output_tokens, model),
        "model": model,
        "created_at": (now or datetime.now(UTC)).astimezone(UTC).isoformat(),
    }

    with db_transaction() as conn:
        conn.execute(
            """
            INSERT INTO token_usage (
                id, user_id, note_id, operation_type, input_tokens, output_tokens,
                total_tokens, cost_usd, model, created_at
            ) VALUES (
                :id, :user_id, :note_id, :operation_type, :input_tokens, :output_tokens,
                :total_tokens, :cost_usd, :model, :created_at
            )
            """,
            record,
        )

    counter(f"token_usage.{operation_type}")
    return record


def get_token_usage(
    user_id: str,
    period: str = "month",
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Aggregate a user's usage since the start of ``period``.

    Returns:
        dict with totals, per-operation breakdown and a per-day series
    """
    since = _period_start(period, now or datetime.now(UTC)).isoformat()

    with get_db_connection() as conn:
        totals = conn.execute(
            """
            SELECT COUNT(*) AS requests,
                   COALESCE(SUM(input_tokens), 0) AS input_tokens,
                   COALESCE(SUM(output_tokens), 0) AS output_tokens,
                   COALESCE(SUM(total_tokens), 0) AS total_tokens,
                   COALESCE(SUM(cost_usd), 0) AS cost_usd
            FROM token_usage
            WHERE user_id = ? AND created_at >= ?
            """,
            (user_id, since),
        ).fetchone()

        by_operation = conn.execute(
            """
            SELECT operation_type, COUNT(*) AS requests, SUM(total_tokens) AS total_tokens
            FROM token_usage
            WHERE user_id = ? AND created_at >= ?
            GROUP BY operation_type
            """,
            (user_id, since),
        ).fetchall()

        daily = conn.execute(
            """
            SELECT substr(created_at, 1, 10) AS day,
                   SUM(total_tokens) AS total_tokens,
                   SUM(cost_usd) AS cost_usd
            FROM token_usage
            WHERE user_id = ? AND created_at >= ?
            GROUP BY day
            ORDER BY day
            """,
            (user_id, since),
        ).fetchall()

    return {
        "period": period,
        "since": since,
        **dict(totals),
        "by_operation": {
            row["operation_type"]: {
                "requests": row["requests"],
                "total_tokens": row["total_tokens"],
            }
            for row in by_operation
        },
        "daily": [dict(row) for row in daily],
    }


def get_daily_usage_report(report_date: date | None = None) -> dict[str, Any]:
    """
    Global usage for one UTC day (admin endpoint). Contains no user ids.
    """
    day = (report_date or datetime.now(UTC).date()).isoformat()

    with get_db_connection() as conn:
        totals = conn.execute(
            """
            SELECT COUNT(*) AS requests,
                   COUNT(DISTINCT user_id) AS unique_users,
                   COALESCE(SUM(total_tokens), 0) AS total_tokens,
                   COALESCE(SUM(cost_usd), 0) AS cost_usd
            FROM token_usage
            WHERE substr(created_at, 1, 10) = ?
            """,
            (day,),
        ).fetchone()

        by_model = conn.execute(
            """
            SELECT model, COUNT(*) AS requests, SUM(total_tokens) AS total_tokens
            FROM token_usage
            WHERE substr(created_at, 1, 10) = ?
            GROUP BY model
            """,
            (day,),
        ).fetchall()

    return {
        "date": day,
        **dict(totals),
        "by_model": {row["model"]: dict(row) for row in by_model},
    }
