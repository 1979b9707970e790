"""
Draft endpoints.

Each user has a single draft slot for the note they are editing. A failed
save is reported as ``{"saved": false}``, never as an error.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from ainote.api.dependencies import get_draft_storage
from ainote.api.middleware.user_auth import AuthenticatedUser, get_current_user
from ainote.drafts import DraftStorage

router = APIRouter(prefix="/api/drafts", tags=["drafts"])


class SaveDraftRequest(BaseModel):
    title: str = ""
    content: str = ""


@router.get("")
async def get_draft(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: DraftStorage = Depends(get_draft_storage),
) -> dict[str, Any]:
    draft = storage.get_draft(user.id)
    if draft is None:
        return {"draft": None}
    return {
        "draft": {
            "title": draft.title,
            "content": draft.content,
            "saved_at": draft.saved_at,
        }
    }


@router.put("")
async def save_draft(
    request: SaveDraftRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: DraftStorage = Depends(get_draft_storage),
) -> dict[str, bool]:
    """Overwrite the draft. Blank title and content is not saved."""
    return {"saved": storage.save_draft(user.id, request.title, request.content)}


@router.delete("", status_code=204)
async def clear_draft(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: DraftStorage = Depends(get_draft_storage),
) -> Response:
    storage.clear_draft(user.id)
    return Response(status_code=204)
