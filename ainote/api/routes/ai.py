"""
AI endpoints: summaries, tags and regeneration status.

Generation endpoints are plain ``def`` so the blocking Gemini call runs in
FastAPI's threadpool. Failures map to:

- ValidationError (note too short, bad tag) -> 400
- NoteNotFoundError -> 404
- RegenerationLimitExceeded -> 429 with the day's counts
- AIGenerationError -> status by AIErrorType, with action and solutions
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from ainote.api.dependencies import get_note_ai_service
from ainote.api.middleware.user_auth import AuthenticatedUser, get_current_user
from ainote.notes import (
    AIGenerationError,
    NoteAIService,
    NoteNotFoundError,
    NoteRepository,
    SummaryRepository,
    TagRepository,
)
from ainote.observability.logging import get_logger
from ainote.usage import (
    RegenerationGate,
    RegenerationLimitExceeded,
    check_regeneration_limit,
    get_regeneration_history,
)
from ainote.utils.ai_errors import (
    AI_ERROR_MESSAGES,
    AIErrorType,
    get_error_description,
    get_error_solutions,
    is_retryable_error,
)
from ainote.utils.error_sanitizer import sanitize_error_message

router = APIRouter(tags=["ai"])
logger = get_logger(__name__)

AI_ERROR_STATUS: dict[AIErrorType, int] = {
    AIErrorType.VALIDATION: 400,
    AIErrorType.INVALID_REQUEST: 400,
    AIErrorType.QUOTA_EXCEEDED: 429,
    AIErrorType.API_KEY_MISSING: 503,
    AIErrorType.TIMEOUT: 504,
}


# ============================================================================
# Request/Response Models
# ============================================================================


class SummaryResponse(BaseModel):
    note_id: str
    summary: str | None
    model: str | None = None
    created_at: str | None = None


class TagsResponse(BaseModel):
    note_id: str
    tags: list[str]


class ReplaceTagsRequest(BaseModel):
    tags: list[str] = Field(default_factory=list)


class PreviewTagsRequest(BaseModel):
    content: str


class PreviewTagsResponse(BaseModel):
    tags: list[str]


# ============================================================================
# Error mapping
# ============================================================================


def _limit_exceeded(e: RegenerationLimitExceeded) -> HTTPException:
    return HTTPException(
        status_code=429,
        detail={
            "message": str(e),
            "regeneration_type": e.regeneration_type,
            "current_count": e.current_count,
            "limit": e.limit,
        },
    )


def _generation_failed(e: AIGenerationError) -> HTTPException:
    message = str(e) or AI_ERROR_MESSAGES[e.error_type]
    return HTTPException(
        status_code=AI_ERROR_STATUS.get(e.error_type, 502),
        detail={
            "message": message,
            "error_type": e.error_type.value,
            "description": get_error_description(e.error_type),
            "action": e.action,
            "retryable": is_retryable_error(e.error_type),
            "solutions": get_error_solutions(e.error_type),
        },
    )


def _run_generation(operation: Any) -> Any:
    try:
        return operation()
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except RegenerationLimitExceeded as e:
        raise _limit_exceeded(e) from None
    except AIGenerationError as e:
        logger.warning("AI generation failed: %s (%s)", e, e.error_type.value)
        raise _generation_failed(e) from None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=sanitize_error_message(str(e), 400)) from None


def _owned_note_id(user: AuthenticatedUser, note_id: str) -> str:
    try:
        return NoteRepository.get(user.id, note_id).id
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None


# ============================================================================
# Summaries
# ============================================================================


@router.get("/api/notes/{note_id}/summary", response_model=SummaryResponse)
async def get_summary(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> SummaryResponse:
    _owned_note_id(user, note_id)
    summary = SummaryRepository.get(note_id)
    if summary is None:
        return SummaryResponse(note_id=note_id, summary=None)
    return SummaryResponse(
        note_id=note_id,
        summary=summary.content,
        model=summary.model,
        created_at=summary.created_at.isoformat(),
    )


@router.post("/api/notes/{note_id}/summary", response_model=SummaryResponse)
def generate_summary(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: NoteAIService = Depends(get_note_ai_service),
) -> SummaryResponse:
    """
    Generate (or regenerate) the note's summary.

    Replacing an existing summary counts against the daily summary limit.
    """
    summary = _run_generation(lambda: service.generate_summary(user.id, note_id))
    return SummaryResponse(
        note_id=note_id,
        summary=summary.content,
        model=summary.model,
        created_at=summary.created_at.isoformat(),
    )


# ============================================================================
# Tags
# ============================================================================


@router.get("/api/notes/{note_id}/tags", response_model=TagsResponse)
async def get_tags(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> TagsResponse:
    _owned_note_id(user, note_id)
    return TagsResponse(note_id=note_id, tags=TagRepository.get_tags(note_id))


@router.post("/api/notes/{note_id}/tags", response_model=TagsResponse)
def generate_tags(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: NoteAIService = Depends(get_note_ai_service),
) -> TagsResponse:
    """Generate tags with AI, replacing the current set."""
    tags = _run_generation(lambda: service.generate_tags(user.id, note_id))
    return TagsResponse(note_id=note_id, tags=tags)


@router.put("/api/notes/{note_id}/tags", response_model=TagsResponse)
async def replace_tags(
    note_id: str,
    request: ReplaceTagsRequest,
    user: AuthenticatedUser = Depends(get_current_user),
) -> TagsResponse:
    """Save a tag set chosen by the user (e.g. accepted preview tags)."""
    _owned_note_id(user, note_id)
    tags = _run_generation(lambda: TagRepository.replace_tags(note_id, request.tags))
    return TagsResponse(note_id=note_id, tags=tags)


@router.delete("/api/notes/{note_id}/tags", status_code=204)
async def clear_tags(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> Response:
    _owned_note_id(user, note_id)
    TagRepository.delete_tags(note_id)
    return Response(status_code=204)


@router.post("/api/notes/{note_id}/tags/{tag}", response_model=TagsResponse)
async def add_tag(
    note_id: str,
    tag: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> TagsResponse:
    _owned_note_id(user, note_id)
    tags = _run_generation(lambda: TagRepository.add_tag(note_id, tag))
    return TagsResponse(note_id=note_id, tags=tags)


@router.delete("/api/notes/{note_id}/tags/{tag}", response_model=TagsResponse)
async def remove_tag(
    note_id: str,
    tag: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> TagsResponse:
    _owned_note_id(user, note_id)
    return TagsResponse(note_id=note_id, tags=TagRepository.remove_tag(note_id, tag))


@router.post("/api/tags/preview", response_model=PreviewTagsResponse)
def preview_tags(
    request: PreviewTagsRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: NoteAIService = Depends(get_note_ai_service),
) -> PreviewTagsResponse:
    """Suggest tags for content that has not been saved yet. Nothing is stored."""
    tags = _run_generation(lambda: service.generate_temp_tags(user.id, request.content))
    return PreviewTagsResponse(tags=tags)


# ============================================================================
# Regenerations
# ============================================================================


@router.get("/api/regenerations")
async def regeneration_history(
    user: AuthenticatedUser = Depends(get_current_user),
    regeneration_type: str | None = Query(None, alias="type", description="summary | tags"),
    limit: int = Query(100, ge=1, le=500),
) -> dict[str, Any]:
    try:
        history = get_regeneration_history(user.id, regeneration_type, limit=limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    return {"regenerations": history, "count": len(history)}


@router.get("/api/regenerations/{regeneration_type}")
async def regeneration_status(
    regeneration_type: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Today's usage for one regeneration type, as shown in the confirmation gate.
    """
    try:
        status = check_regeneration_limit(user.id, regeneration_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    gate: RegenerationGate[Any] = RegenerationGate(regeneration_type)
    gate.open(current_count=status.current_count, limit=status.limit)
    return {**gate.to_dict(), "can_regenerate": status.can_regenerate}
