"""
Notes API endpoints.

CRUD for the authenticated user's notes plus the starter templates. Notes
owned by other users are reported as 404.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel

from ainote.api.middleware.user_auth import AuthenticatedUser, get_current_user
from ainote.config import NOTES_PAGE_SIZE
from ainote.notes import (
    NOTE_TEMPLATES,
    Note,
    NoteNotFoundError,
    NoteRepository,
    NoteTemplate,
    SummaryRepository,
    TagRepository,
    get_template,
)
from ainote.observability.logging import get_logger
from ainote.utils.date_format import format_date, truncate_text
from ainote.utils.error_sanitizer import get_safe_error_detail, sanitize_error_message

router = APIRouter(prefix="/api/notes", tags=["notes"])
logger = get_logger(__name__)

PREVIEW_LENGTH = 150


# ============================================================================
# Request/Response Models
# ============================================================================


class NoteResponse(BaseModel):
    """API response for a single note."""

    id: str
    title: str
    content: str
    preview: str
    tags: list[str]
    summary: str | None
    created_at: str
    updated_at: str
    created_display: str

    @classmethod
    def from_note(cls, note: Note, include_summary: bool = True) -> NoteResponse:
        summary = SummaryRepository.get(note.id) if include_summary else None
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            preview=truncate_text(note.content, PREVIEW_LENGTH),
            tags=TagRepository.get_tags(note.id),
            summary=summary.content if summary else None,
            created_at=note.created_at.isoformat(),
            updated_at=note.updated_at.isoformat(),
            created_display=format_date(note.created_at),
        )


class NoteListResponse(BaseModel):
    notes: list[NoteResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    sort: str


class CreateNoteRequest(BaseModel):
    title: str = ""
    content: str = ""


class UpdateNoteRequest(BaseModel):
    """Only the fields that are present are changed."""

    title: str | None = None
    content: str | None = None


# ============================================================================
# Endpoints
# ============================================================================


@router.get("", response_model=NoteListResponse)
async def list_notes(
    user: AuthenticatedUser = Depends(get_current_user),
    sort: str = Query("latest", description="latest | oldest | title"),
    page: int = Query(1, ge=1),
    page_size: int = Query(NOTES_PAGE_SIZE, ge=1, le=100),
) -> NoteListResponse:
    """List the user's notes, one page at a time."""
    try:
        result = NoteRepository.list_notes(user.id, sort=sort, page=page, page_size=page_size)
    except Exception as e:
        raise HTTPException(
            status_code=500, detail=get_safe_error_detail(e, 500, "Failed to list notes")
        ) from None

    return NoteListResponse(
        notes=[NoteResponse.from_note(n, include_summary=False) for n in result["notes"]],
        total=result["total"],
        page=result["page"],
        page_size=result["page_size"],
        total_pages=result["total_pages"],
        sort=result["sort"],
    )


@router.get("/templates", response_model=list[NoteTemplate])
async def list_templates() -> list[NoteTemplate]:
    return NOTE_TEMPLATES


@router.get("/templates/{template_id}", response_model=NoteTemplate)
async def get_note_template(template_id: str) -> NoteTemplate:
    template = get_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.post("", response_model=NoteResponse, status_code=201)
async def create_note(
    request: CreateNoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
) -> NoteResponse:
    try:
        note = NoteRepository.create(user.id, request.title, request.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=sanitize_error_message(str(e), 400)) from None
    except Exception as e:
        raise HTTPException(
            status_code=500, detail=get_safe_error_detail(e, 500, "Failed to create note")
        ) from None

    logger.info("Created note %s for %s", note.id, user)
    return NoteResponse.from_note(note)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> NoteResponse:
    try:
        note = NoteRepository.get(user.id, note_id)
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return NoteResponse.from_note(note)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    request: UpdateNoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
) -> NoteResponse:
    """
    Update a note's title and/or content.

    Existing summary and tags are kept; regenerate them explicitly.
    """
    try:
        note = NoteRepository.update(
            user.id, note_id, title=request.title, content=request.content
        )
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=sanitize_error_message(str(e), 400)) from None
    except Exception as e:
        raise HTTPException(
            status_code=500, detail=get_safe_error_detail(e, 500, "Failed to update note")
        ) from None

    return NoteResponse.from_note(note)


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> Response:
    """Delete a note. Its tags and summary are removed with it."""
    try:
        NoteRepository.delete(user.id, note_id)
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None

    logger.info("Deleted note %s for %s", note_id, user)
    return Response(status_code=204)
