"""Onboarding flag endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ainote.api.middleware.user_auth import AuthenticatedUser, get_current_user
from ainote.users.onboarding import complete_onboarding, get_onboarding_status, reset_onboarding

router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])


@router.get("")
async def onboarding_status(
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, bool]:
    return {"has_completed_onboarding": get_onboarding_status(user.id)}


@router.post("")
async def finish_onboarding(
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, bool]:
    complete_onboarding(user.id)
    return {"has_completed_onboarding": True}


@router.delete("")
async def restart_onboarding(
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, bool]:
    """Show the onboarding flow again on next login."""
    reset_onboarding(user.id)
    return {"has_completed_onboarding": False}
