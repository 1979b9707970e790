"""
Client error reporting.

The web client's error boundary posts uncaught errors here. Reports are
sanitized, classified and written to the log; nothing is stored.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ainote.api.middleware.user_auth import AuthenticatedUser, get_optional_user
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import counter, log_event
from ainote.utils.ai_errors import classify_error, requires_user_action
from ainote.utils.error_sanitizer import redact_secrets, sanitize_error_message

router = APIRouter(prefix="/api/errors", tags=["errors"])
logger = get_logger(__name__)

MAX_BATCH_SIZE = 50


class ErrorReport(BaseModel):
    message: str
    stack: str | None = None
    component_stack: str | None = Field(None, alias="componentStack")
    url: str | None = None
    user_agent: str | None = Field(None, alias="userAgent")
    timestamp: str | None = None
    session_id: str | None = Field(None, alias="sessionId")


class ErrorReportResponse(BaseModel):
    success: bool
    error_type: str
    action: str
    requires_user_action: bool


class BatchErrorReportRequest(BaseModel):
    reports: list[ErrorReport] = Field(default_factory=list, max_length=MAX_BATCH_SIZE)


def record_error_report(report: ErrorReport, user: AuthenticatedUser | None) -> ErrorReportResponse:
    """Classify one report and log it with secrets removed."""
    classified = classify_error(report.message)
    fields: dict[str, Any] = {
        "error_type": classified.type.value,
        "message": redact_secrets(sanitize_error_message(report.message, 400)),
        "stack": redact_secrets(report.stack) if report.stack else None,
        "component_stack": redact_secrets(report.component_stack)
        if report.component_stack
        else None,
        "url": report.url,
        "user_agent": report.user_agent,
        "timestamp": report.timestamp,
        "session_id": report.session_id,
        "user_id": user.id if user else None,
    }
    log_event("client.error_reported", **fields)
    counter(f"client.errors.{classified.type.value.lower()}")

    return ErrorReportResponse(
        success=True,
        error_type=classified.type.value,
        action=classified.action,
        requires_user_action=requires_user_action(classified.type),
    )


@router.post("", response_model=ErrorReportResponse)
async def report_error(
    report: ErrorReport,
    user: AuthenticatedUser | None = Depends(get_optional_user),
) -> ErrorReportResponse:
    """Accept an error report from the client. Authentication is optional."""
    return record_error_report(report, user)


@router.post("/batch")
async def report_errors(
    request: BatchErrorReportRequest,
    user: AuthenticatedUser | None = Depends(get_optional_user),
) -> dict[str, Any]:
    results = [record_error_report(report, user) for report in request.reports]
    return {"success": True, "count": len(results)}
