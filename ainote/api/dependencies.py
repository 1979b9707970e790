"""
FastAPI dependencies for services held on ``app.state``.

create_app() builds the services once; routes receive them through these
functions, so tests swap implementations by passing them to create_app().
"""

from __future__ import annotations

from fastapi import Header, HTTPException, Request, status

from ainote.drafts import DraftStorage
from ainote.infrastructure.auth_backend import AuthBackendClient
from ainote.notes.service import NoteAIService


def get_auth_client(request: Request) -> AuthBackendClient:
    return request.app.state.auth_client


def get_draft_storage(request: Request) -> DraftStorage:
    return request.app.state.draft_storage


def get_note_ai_service(request: Request) -> NoteAIService:
    """
    Raises:
        HTTPException: 503 when no Gemini backend was configured at startup
    """
    service = request.app.state.note_ai_service
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI features are not configured on this server",
        )
    return service


def require_admin(request: Request, authorization: str | None = Header(None)) -> bool:
    return request.app.state.admin_auth.verify_api_key(authorization)
