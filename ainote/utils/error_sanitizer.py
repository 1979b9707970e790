"""
Error message sanitization utility.

Keeps internal details (paths, SQL errors, tokens, module names) out of
HTTP error responses.
"""

from __future__ import annotations

import re

from ainote.observability.logging import get_logger

logger = get_logger(__name__)

SENSITIVE_PATTERNS = [
    # File paths
    r"/[^\s]+\.py",
    r"[A-Za-z]:\\[^\s]+",
    # Stack traces
    r"Traceback \(most recent call last\)",
    r"File \".*\"",
    # Database errors
    r"sqlite3?\.",
    r"UNIQUE constraint",
    r"FOREIGN KEY constraint",
    r"no such (table|column)",
    # Keys / tokens
    r"[A-Za-z0-9_-]{32,}",
    r"Bearer [A-Za-z0-9._-]+",
    # Internal module names
    r"ainote\.[a-z_.]+",
]

GENERIC_MESSAGES = {
    400: "Invalid request. Please check your input and try again.",
    401: "Authentication required.",
    403: "Access denied.",
    404: "Resource not found.",
    422: "Invalid data format.",
    429: "Too many requests. Please try again later.",
    500: "An internal error occurred. Please try again later.",
    503: "Service temporarily unavailable.",
}


def sanitize_error_message(message: str, status_code: int = 500) -> str:
    """
    Return ``message`` if it is a short, plain client-error message, otherwise
    the generic message for ``status_code``.
    """
    generic = GENERIC_MESSAGES.get(status_code, "An error occurred.")
    if not message:
        return generic

    for pattern in SENSITIVE_PATTERNS:
        if re.search(pattern, message, re.IGNORECASE):
            logger.warning("Sanitized sensitive error pattern: %s", pattern)
            return generic

    if (
        400 <= status_code < 500
        and len(message) < 200
        and not any(c in message for c in "{}[]\n")
    ):
        return message

    return generic


def get_safe_error_detail(
    error: Exception,
    status_code: int = 500,
    context: str | None = None,
) -> str:
    """
    Log the full error and return a detail string that is safe for clients.

    For 5xx errors ``context`` (e.g. "Failed to create note") replaces the
    generic message when given.
    """
    logger.error("Error (status=%d): %s - %s", status_code, type(error).__name__, str(error))

    if context and status_code >= 500:
        return context

    return sanitize_error_message(str(error), status_code)


REDACTION_PATTERNS = [
    (re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*"), "Bearer [REDACTED]"),
    (re.compile(r"api[_-]?key[=:]\s*[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE), "api_key=[REDACTED]"),
    (re.compile(r"token[=:]\s*[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE), "token=[REDACTED]"),
    (re.compile(r"[A-Za-z0-9]{20,}"), "[REDACTED]"),
]


def redact_secrets(text: str) -> str:
    """
    Mask tokens and keys inside free text (client stack traces) while keeping
    the rest readable.
    """
    for pattern, replacement in REDACTION_PATTERNS:
        text = pattern.sub(replacement, text)
    return text
