"""Health check endpoints for the note API.

- /health - Service health including LLM and auth backend configuration
- /health/db - Database pool health and schema check
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request

from ainote.config import (
    APP_VERSION,
    AUTH_URL,
    ENV,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    GOOGLE_CLOUD_PROJECT,
)
from ainote.observability.telemetry import get_latency_stats

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Health check endpoint.

    Reports whether Gemini credentials are present (no API call is made) and
    whether the AI service was built at startup.
    """
    return {
        "status": "healthy",
        "service": "AI Note Pad API",
        "version": APP_VERSION,
        "environment": ENV,
        "timestamp": datetime.now(UTC).isoformat(),
        "llm": {
            "ready": request.app.state.note_ai_service is not None,
            "model": GEMINI_MODEL,
            "gemini_api_key": bool(GEMINI_API_KEY),
            "google_cloud_project": bool(GOOGLE_CLOUD_PROJECT),
            "latency_ms": {
                "summary": get_latency_stats("llm.summary.latency"),
                "tags": get_latency_stats("llm.tags.latency"),
            },
        },
        "auth": {"configured": bool(AUTH_URL)},
    }


@router.get("/health/db")
async def database_health() -> dict[str, Any]:
    """
    Database health check endpoint.

    Returns connection pool metrics; pool usage above 80% or a missing table
    reports "degraded".
    """
    from ainote.infrastructure.database import get_pool_stats, validate_schema

    stats = get_pool_stats()
    usage_percent = stats["usage_percent"]

    schema_error = None
    try:
        validate_schema()
    except ValueError as e:
        schema_error = str(e)

    degraded = usage_percent > 80 or schema_error is not None
    warning = schema_error or ("Pool usage high" if usage_percent > 80 else None)
    return {
        "status": "degraded" if degraded else "healthy",
        "pool": stats,
        "warning": warning,
    }
