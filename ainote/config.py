"""Centralized configuration for the AI note pad backend.

Re-exports everything from ainote.infrastructure.settings, then adds typed
constants for the database, LLM, note, quota and API settings.  Environment
variable overrides use safe defaults so the app starts without extra env
configuration.
"""

from __future__ import annotations

import os

from ainote.infrastructure.settings import *  # noqa: F401, F403

# --- App ---
APP_VERSION: str = "1.0.0"

# --- Database ---
DB_POOL_SIZE: int = int(os.getenv("AINOTE_DB_POOL_SIZE", "5"))
DB_POOL_TIMEOUT: float = float(os.getenv("AINOTE_DB_POOL_TIMEOUT", "5.0"))
DB_CONNECT_TIMEOUT: float = float(os.getenv("AINOTE_DB_CONNECT_TIMEOUT", "30.0"))
DB_TEMP_CONN_MAX: int = int(os.getenv("AINOTE_DB_TEMP_CONN_MAX", "10"))
DB_RETRY_MAX: int = int(os.getenv("AINOTE_DB_RETRY_MAX", "5"))
DB_RETRY_BASE_DELAY: float = float(os.getenv("AINOTE_DB_RETRY_BASE_DELAY", "0.1"))
DB_RETRY_MAX_DELAY: float = float(os.getenv("AINOTE_DB_RETRY_MAX_DELAY", "2.0"))
DB_RETRY_JITTER: float = float(os.getenv("AINOTE_DB_RETRY_JITTER", "0.1"))

# --- LLM ---
LLM_TIMEOUT_SECONDS: int = int(os.getenv("AINOTE_LLM_TIMEOUT", "10"))
LLM_MAX_RETRIES: int = int(os.getenv("AINOTE_LLM_MAX_RETRIES", "3"))
LLM_MAX_PROMPT_LENGTH: int = 10000
LLM_MAX_WORKERS: int = int(os.getenv("AINOTE_LLM_MAX_WORKERS", "4"))

# --- Notes ---
NOTE_TITLE_MAX_LENGTH: int = 500
NOTE_CONTENT_MAX_CHARS_FOR_AI: int = 8000
NOTE_MIN_CONTENT_FOR_AI: int = 50
NOTES_PAGE_SIZE: int = 10
TAG_MAX_LENGTH: int = 50
TAG_MAX_COUNT: int = 6

# --- Auth ---
MIN_PASSWORD_LENGTH: int = 8
AUTH_TOKEN_CACHE_SIZE: int = 1000
AUTH_TOKEN_CACHE_TTL_SECONDS: int = 600
AUTH_REQUEST_TIMEOUT: float = float(os.getenv("AINOTE_AUTH_TIMEOUT", "10.0"))

# --- Quotas ---
REGENERATION_DAILY_LIMITS: dict[str, int] = {
    "summary": int(os.getenv("AINOTE_SUMMARY_REGENERATION_LIMIT", "10")),
    "tags": int(os.getenv("AINOTE_TAGS_REGENERATION_LIMIT", "10")),
}
