"""FastAPI server for the AI note pad"""

from __future__ import annotations

import os
import sqlite3

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ainote.api.middleware.admin_auth import APIKeyAuth
from ainote.api.routes.ai import router as ai_router
from ainote.api.routes.auth import router as auth_router
from ainote.api.routes.drafts import router as drafts_router
from ainote.api.routes.errors import router as errors_router
from ainote.api.routes.health import router as health_router
from ainote.api.routes.notes import router as notes_router
from ainote.api.routes.onboarding import router as onboarding_router
from ainote.api.routes.usage import router as usage_router
from ainote.config import API_HOST, API_PORT, APP_VERSION, CORS_ORIGINS, LOG_LEVEL
from ainote.drafts import DraftStorage, SQLiteKeyValueStore
from ainote.infrastructure.auth_backend import AuthBackendClient
from ainote.infrastructure.database import init_database
from ainote.llm.gemini import GeminiInitializationError, TextGenerator, create_text_generator
from ainote.notes.service import NoteAIService
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import counter, log_event

logger = get_logger(__name__)

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8000",
]


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Return field names only, never the validation rules.

    Side Effects:
        - Logs the full validation errors
        - Increments api.validation_errors
    """
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    counter("api.validation_errors")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Invalid request format. Please check your request and try again.",
            "error_count": len(exc.errors()),
            "invalid_fields": [str(err["loc"][-1]) for err in exc.errors()],
        },
    )


def _allowed_origins() -> list[str]:
    origins = list(CORS_ORIGINS)
    if os.getenv("AINOTE_ENV", "development") == "development":
        origins.extend(o for o in DEV_ORIGINS if o not in origins)
    return origins


def _initialize_database() -> None:
    try:
        logger.info("Initializing database schema...")
        init_database()
        logger.info("Database initialization complete")
    except sqlite3.OperationalError as e:
        logger.critical("Database schema error: %s", e)
        raise RuntimeError(f"Database initialization failed: {e}") from e
    except OSError as e:
        logger.critical("Database file could not be created: %s", e)
        raise RuntimeError(f"Database initialization failed: {e}") from e


def _check_admin_key() -> None:
    if os.getenv("AINOTE_ADMIN_API_KEY"):
        logger.info("Admin API authentication enabled")
        return

    if os.getenv("AINOTE_ENV", "development") == "production":
        logger.critical("AINOTE_ADMIN_API_KEY is not set in production")
        raise RuntimeError(
            "Security misconfiguration: AINOTE_ADMIN_API_KEY not set in "
            "production. Refusing to start with unprotected admin endpoints."
        )
    logger.warning("AINOTE_ADMIN_API_KEY not set; admin endpoints are unprotected")


def _build_ai_service(text_generator: TextGenerator | None) -> NoteAIService | None:
    if text_generator is None:
        try:
            text_generator = create_text_generator()
        except GeminiInitializationError as e:
            logger.warning("AI features disabled: %s", e)
            return None
    logger.info("AI features enabled (model=%s)", text_generator.model_name)
    return NoteAIService(text_generator)


def create_app(
    text_generator: TextGenerator | None = None,
    auth_client: AuthBackendClient | None = None,
    draft_storage: DraftStorage | None = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        text_generator: Gemini-backed generator; built from the environment when omitted
        auth_client: auth backend client; built from AINOTE_AUTH_URL when omitted
        draft_storage: draft store; SQLite-backed when omitted

    Raises:
        RuntimeError: If the database cannot be initialized, or the admin key is
            missing in production
    """
    load_dotenv()

    _check_admin_key()
    _initialize_database()

    app = FastAPI(title="AI Note Pad API", version=APP_VERSION)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.state.auth_client = auth_client or AuthBackendClient()
    app.state.note_ai_service = _build_ai_service(text_generator)
    app.state.draft_storage = draft_storage or DraftStorage(SQLiteKeyValueStore())
    app.state.admin_auth = APIKeyAuth()

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(notes_router)
    app.include_router(ai_router)
    app.include_router(usage_router)
    app.include_router(onboarding_router)
    app.include_router(drafts_router)
    app.include_router(errors_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"service": "AI Note Pad API", "version": APP_VERSION, "docs": "/docs"}

    log_event("api.startup", version=APP_VERSION, ai_enabled=app.state.note_ai_service is not None)
    return app


def main() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run(
        "ainote.api.app:create_app",
        factory=True,
        host=API_HOST,
        port=API_PORT,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
