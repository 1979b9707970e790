"""
AI (Gemini) error classification.

Two classifiers share the AIErrorType taxonomy:

- handle_ai_error(): the one used on every failed generation. Checks timeout
  and API-key messages first, then the HTTP status, then message keywords.
- classify_error(): a broader, case-insensitive keyword classifier for errors
  surfaced by other callers (network stacks, proxies).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class AIErrorType(str, Enum):
    NETWORK = "NETWORK"
    API = "API"
    VALIDATION = "VALIDATION"
    TIMEOUT = "TIMEOUT"
    API_KEY_MISSING = "API_KEY_MISSING"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    INVALID_REQUEST = "INVALID_REQUEST"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


AI_ERROR_MESSAGES: dict[AIErrorType, str] = {
    AIErrorType.NETWORK: "There is a problem with the network connection. Please check your internet connection.",
    AIErrorType.API: "The AI service is temporarily unavailable. Please try again shortly.",
    AIErrorType.VALIDATION: "The input is not valid. Please check the content.",
    AIErrorType.TIMEOUT: "AI processing timed out. Please try again.",
    AIErrorType.API_KEY_MISSING: "The GEMINI_API_KEY environment variable is not set.",
    AIErrorType.QUOTA_EXCEEDED: "The AI usage limit was exceeded. Please try again later.",
    AIErrorType.INVALID_REQUEST: "Invalid request. Please check the input.",
    AIErrorType.SERVER_ERROR: "The AI server had a temporary problem.",
    AIErrorType.UNKNOWN_ERROR: "An unknown error occurred during AI processing.",
}

AI_ERROR_DESCRIPTIONS: dict[AIErrorType, str] = {
    AIErrorType.NETWORK: "The connection is unstable or the server cannot be reached.",
    AIErrorType.API: "The AI service is temporarily unavailable.",
    AIErrorType.VALIDATION: "The content does not meet the AI processing requirements.",
    AIErrorType.TIMEOUT: "AI processing is taking longer than expected.",
    AIErrorType.API_KEY_MISSING: "The key required to authenticate with the AI service is not configured.",
    AIErrorType.QUOTA_EXCEEDED: "The daily or monthly AI usage limit has been reached.",
    AIErrorType.INVALID_REQUEST: "The request format or content has a problem.",
    AIErrorType.SERVER_ERROR: "The AI server reported an internal error.",
    AIErrorType.UNKNOWN_ERROR: "An unexpected error occurred.",
}

AI_ERROR_SOLUTIONS: dict[AIErrorType, list[str]] = {
    AIErrorType.NETWORK: [
        "Check your internet connection.",
        "Reconnect to Wi-Fi or mobile data.",
        "Check whether a firewall or security tool is blocking the request.",
        "Try again in a moment.",
    ],
    AIErrorType.API: [
        "Wait for the AI service to recover.",
        "Try again in a few minutes.",
        "Contact the administrator if the problem persists.",
    ],
    AIErrorType.VALIDATION: [
        "Check the length of the content.",
        "Write the content more simply.",
        "Split the content into several parts.",
    ],
    AIErrorType.TIMEOUT: [
        "Try again in a moment.",
        "Shorten the content if it is very long.",
        "Check your network connection.",
    ],
    AIErrorType.API_KEY_MISSING: [
        "Ask the administrator to check the API key configuration.",
        "Review the system settings.",
    ],
    AIErrorType.QUOTA_EXCEEDED: [
        "Try again tomorrow.",
        "Reduce usage and try again.",
    ],
    AIErrorType.INVALID_REQUEST: [
        "Check the input again.",
        "Make sure no required information is missing.",
    ],
    AIErrorType.SERVER_ERROR: [
        "Wait for the AI server to recover.",
        "Try again in a few minutes.",
        "Contact the administrator if the problem persists.",
    ],
    AIErrorType.UNKNOWN_ERROR: [
        "Refresh the page.",
        "Try again in a moment.",
        "Contact the administrator if the problem persists.",
    ],
}

AI_ERROR_ACTIONS: dict[AIErrorType, tuple[str, str]] = {
    AIErrorType.API_KEY_MISSING: ("Check API key", "check-key"),
    AIErrorType.QUOTA_EXCEEDED: ("Retry later", "wait"),
    AIErrorType.TIMEOUT: ("Retry", "retry"),
    AIErrorType.INVALID_REQUEST: ("Retry", "retry"),
    AIErrorType.SERVER_ERROR: ("Retry", "retry"),
}

RETRYABLE_ERROR_TYPES = frozenset(
    {
        AIErrorType.NETWORK,
        AIErrorType.TIMEOUT,
        AIErrorType.SERVER_ERROR,
        AIErrorType.API,
        AIErrorType.QUOTA_EXCEEDED,
    }
)

USER_ACTION_ERROR_TYPES = frozenset(
    {
        AIErrorType.API_KEY_MISSING,
        AIErrorType.VALIDATION,
        AIErrorType.INVALID_REQUEST,
    }
)

# (type, action, lowercase keywords); first match wins
CLASSIFIER_RULES: tuple[tuple[AIErrorType, str, tuple[str, ...]], ...] = (
    (
        AIErrorType.NETWORK,
        "retry",
        ("network", "fetch", "connection", "timeout", "dns", "enotfound", "econnrefused"),
    ),
    (
        AIErrorType.API_KEY_MISSING,
        "check-key",
        ("api key", "apikey", "unauthorized", "401", "forbidden", "403"),
    ),
    (
        AIErrorType.QUOTA_EXCEEDED,
        "wait",
        ("quota", "limit", "rate limit", "429", "too many requests"),
    ),
    (AIErrorType.VALIDATION, "retry", ("token", "length", "too long", "max tokens")),
    (AIErrorType.TIMEOUT, "retry", ("timeout", "timed out", "etimedout")),
    (
        AIErrorType.SERVER_ERROR,
        "retry",
        (
            "500",
            "502",
            "503",
            "504",
            "internal server error",
            "bad gateway",
            "service unavailable",
        ),
    ),
    (AIErrorType.INVALID_REQUEST, "retry", ("400", "404", "bad request", "not found")),
    (AIErrorType.API, "retry", ("api", "service", "endpoint")),
)


@dataclass(frozen=True)
class AIError:
    type: AIErrorType
    message: str
    action: str
    original_error: Any = None


def _error_message(err: Any) -> str:
    if isinstance(err, str):
        return err
    if isinstance(err, Mapping):
        message = err.get("message")
        if isinstance(message, str):
            return message
        if isinstance(err.get("status"), int):
            return f"HTTP {err['status']}"
        try:
            return json.dumps(dict(err), default=str)
        except (TypeError, ValueError):
            return str(err)
    message = getattr(err, "message", None)
    if isinstance(message, str):
        return message
    return str(err)


def _error_status(err: Any) -> int | None:
    """HTTP status from ``status``/``status_code``/``code``, following ``__cause__``."""
    seen = 0
    while err is not None and seen < 5:
        for attr in ("status", "status_code", "code"):
            value = err.get(attr) if isinstance(err, Mapping) else getattr(err, attr, None)
            if isinstance(value, int) and not isinstance(value, bool) and value >= 100:
                return value
        err = getattr(err, "__cause__", None)
        seen += 1
    return None


def handle_ai_error(err: Any) -> AIError:
    """
    Classify a failed Gemini call into an AIError with a fixed message.

    Unknown errors keep their own message and suggest contacting support.
    """
    message = _error_message(err) if err is not None else ""

    def build(error_type: AIErrorType, action: str) -> AIError:
        return AIError(error_type, AI_ERROR_MESSAGES[error_type], action, err)

    if isinstance(err, TimeoutError) or "Timeout" in message or "timeout" in message:
        return build(AIErrorType.TIMEOUT, "retry")

    if "API key" in message or "GEMINI_API_KEY" in message:
        return build(AIErrorType.API_KEY_MISSING, "check-key")

    status = _error_status(err)
    if status is not None:
        if status == 429:
            return build(AIErrorType.QUOTA_EXCEEDED, "wait")
        if 400 <= status < 500:
            return build(AIErrorType.INVALID_REQUEST, "check-key")
        if status >= 500:
            return build(AIErrorType.SERVER_ERROR, "retry")

    if message:
        if "quota" in message or "rate limit" in message:
            return build(AIErrorType.QUOTA_EXCEEDED, "wait")
        if "authentication" in message or "unauthorized" in message:
            return build(AIErrorType.API_KEY_MISSING, "check-key")
        if "invalid" in message or "bad request" in message:
            return build(AIErrorType.INVALID_REQUEST, "retry")

    return AIError(
        AIErrorType.UNKNOWN_ERROR,
        message or AI_ERROR_MESSAGES[AIErrorType.UNKNOWN_ERROR],
        "contact-support",
        err,
    )


def classify_error(err: Any) -> AIError:
    """Keyword classifier over the lower-cased error message."""
    if not err:
        return AIError(
            AIErrorType.UNKNOWN_ERROR, "An unknown error occurred.", "contact-support", err
        )

    lowered = _error_message(err).lower()
    for error_type, action, keywords in CLASSIFIER_RULES:
        if any(keyword in lowered for keyword in keywords):
            return AIError(error_type, AI_ERROR_MESSAGES[error_type], action, err)

    return AIError(
        AIErrorType.UNKNOWN_ERROR,
        AI_ERROR_MESSAGES[AIErrorType.UNKNOWN_ERROR],
        "contact-support",
        err,
    )


def get_ai_error_action(error_type: AIErrorType) -> dict[str, str]:
    label, action = AI_ERROR_ACTIONS.get(error_type, ("Contact support", "contact-support"))
    return {"label": label, "action": action}


def is_retryable_error(error_type: AIErrorType) -> bool:
    return error_type in RETRYABLE_ERROR_TYPES


def requires_user_action(error_type: AIErrorType) -> bool:
    return error_type in USER_ACTION_ERROR_TYPES


def get_error_solutions(error_type: AIErrorType) -> list[str]:
    return list(AI_ERROR_SOLUTIONS.get(error_type, AI_ERROR_SOLUTIONS[AIErrorType.UNKNOWN_ERROR]))


def get_error_description(error_type: AIErrorType) -> str:
    return AI_ERROR_DESCRIPTIONS.get(error_type, AI_ERROR_DESCRIPTIONS[AIErrorType.UNKNOWN_ERROR])
