"""
Token usage endpoints.

- /api/usage - the user's own usage for a period
- /api/admin/usage - global daily report (admin API key)
"""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from ainote.api.dependencies import require_admin
from ainote.api.middleware.user_auth import AuthenticatedUser, get_current_user
from ainote.usage import get_daily_usage_report, get_token_usage
from ainote.utils.token_calculator import format_cost, format_token_count, get_token_usage_status

router = APIRouter(tags=["usage"])

# Soft monthly budget used for the usage meter
MONTHLY_TOKEN_BUDGET = 1_000_000


@router.get("/api/usage")
async def user_usage(
    user: AuthenticatedUser = Depends(get_current_user),
    period: str = Query("month", description="today | week | month | year"),
) -> dict[str, Any]:
    try:
        usage = get_token_usage(user.id, period)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    status = get_token_usage_status(usage["total_tokens"], MONTHLY_TOKEN_BUDGET)
    return {
        **usage,
        "display": {
            "total_tokens": format_token_count(usage["total_tokens"]),
            "cost": format_cost(usage["cost_usd"]),
        },
        "budget": {
            "limit": MONTHLY_TOKEN_BUDGET,
            "percentage": status.percentage,
            "status": status.status,
            "remaining": status.remaining,
        },
    }


@router.get("/api/admin/usage")
async def admin_usage_report(
    report_date: date | None = Query(None, description="UTC day, defaults to today"),
    _: bool = Depends(require_admin),
) -> dict[str, Any]:
    """Global usage for one day. Contains no user ids."""
    return get_daily_usage_report(report_date)
