"""
Authentication error classification.

Maps raw errors from the auth backend (exceptions, response dicts, or objects
with ``message``/``status``) to a fixed taxonomy carrying a stable user-facing
message and a suggested action.

Classification walks AUTH_ERROR_RULES top to bottom; the first matching rule
wins. Message rules are case-sensitive substring matches, so "network error"
(lowercase n) does NOT match the NETWORK rule and falls through to the status
rules or UNKNOWN_ERROR.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

AuthAction = Literal["retry", "login", "resend-email", "go-home"]


class AuthErrorType(str, Enum):
    NETWORK_ERROR = "NETWORK_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    CLIENT_ERROR = "CLIENT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    EMAIL_NOT_CONFIRMED = "EMAIL_NOT_CONFIRMED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES: dict[AuthErrorType, str] = {
    AuthErrorType.NETWORK_ERROR: "Please check your network connection.",
    AuthErrorType.SERVER_ERROR: "A temporary server problem occurred. Please try again shortly.",
    AuthErrorType.CLIENT_ERROR: "There was a problem with the request. Please try again.",
    AuthErrorType.VALIDATION_ERROR: "Please check your input.",
    AuthErrorType.SESSION_EXPIRED: "Your session has expired. Please log in again.",
    AuthErrorType.PERMISSION_DENIED: "You do not have permission to access this.",
    AuthErrorType.EMAIL_NOT_CONFIRMED: "Please confirm your email address first.",
    AuthErrorType.INVALID_CREDENTIALS: "The email or password is incorrect.",
    AuthErrorType.UNKNOWN_ERROR: "An unknown error occurred.",
}


@dataclass(frozen=True)
class AuthError:
    type: AuthErrorType
    message: str
    action: AuthAction
    original_error: Any = None

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "message": self.message, "action": self.action}


@dataclass(frozen=True)
class AuthErrorRule:
    """One row of the classification table."""

    type: AuthErrorType
    action: AuthAction
    matches: Callable[[str, int | None], bool]


def _message_contains(*needles: str) -> Callable[[str, int | None], bool]:
    return lambda message, _status: any(needle in message for needle in needles)


def _status_in(low: int, high: int | None = None) -> Callable[[str, int | None], bool]:
    def check(_message: str, status: int | None) -> bool:
        if status is None:
            return False
        return status >= low and (high is None or status < high)

    return check


AUTH_ERROR_RULES: tuple[AuthErrorRule, ...] = (
    AuthErrorRule(AuthErrorType.NETWORK_ERROR, "retry", _message_contains("Network", "fetch")),
    AuthErrorRule(AuthErrorType.SESSION_EXPIRED, "login", _message_contains("Session", "expired")),
    AuthErrorRule(
        AuthErrorType.EMAIL_NOT_CONFIRMED, "resend-email", _message_contains("Email not confirmed")
    ),
    AuthErrorRule(
        AuthErrorType.INVALID_CREDENTIALS,
        "retry",
        _message_contains("Invalid login credentials", "Invalid email"),
    ),
    AuthErrorRule(
        AuthErrorType.PERMISSION_DENIED, "go-home", _message_contains("Permission", "403")
    ),
    AuthErrorRule(AuthErrorType.SERVER_ERROR, "retry", _status_in(500)),
    AuthErrorRule(AuthErrorType.CLIENT_ERROR, "retry", _status_in(400, 500)),
)

ERROR_ACTIONS: dict[AuthErrorType, tuple[str, AuthAction]] = {
    AuthErrorType.NETWORK_ERROR: ("Retry", "retry"),
    AuthErrorType.SERVER_ERROR: ("Retry", "retry"),
    AuthErrorType.SESSION_EXPIRED: ("Log in", "login"),
    AuthErrorType.INVALID_CREDENTIALS: ("Log in", "login"),
    AuthErrorType.EMAIL_NOT_CONFIRMED: ("Resend email", "resend-email"),
    AuthErrorType.PERMISSION_DENIED: ("Go home", "go-home"),
}


def _extract(err: Any) -> tuple[str, int | None]:
    """Pull (message, status) out of an exception, mapping or plain object."""
    if isinstance(err, Mapping):
        message = err.get("message")
        status = err.get("status")
    else:
        message = getattr(err, "message", None)
        if message is None and isinstance(err, BaseException):
            message = str(err)
        status = getattr(err, "status", None)

    if not isinstance(message, str):
        message = ""
    if not isinstance(status, int) or isinstance(status, bool):
        status = None
    return message, status


def handle_auth_error(err: Any) -> AuthError:
    """
    Classify an authentication failure.

    Args:
        err: Exception, ``{"message": ..., "status": ...}`` mapping, or any
            object exposing ``message``/``status`` attributes

    Returns:
        AuthError with the fixed message for its type. UNKNOWN_ERROR keeps the
        original message when there is one.
    """
    message, status = _extract(err)

    for rule in AUTH_ERROR_RULES:
        if rule.matches(message, status):
            return AuthError(
                type=rule.type,
                message=ERROR_MESSAGES[rule.type],
                action=rule.action,
                original_error=err,
            )

    return AuthError(
        type=AuthErrorType.UNKNOWN_ERROR,
        message=message or ERROR_MESSAGES[AuthErrorType.UNKNOWN_ERROR],
        action="retry",
        original_error=err,
    )


def validation_error(message: str | None = None) -> AuthError:
    """Build a VALIDATION_ERROR for input rejected before reaching the backend."""
    return AuthError(
        type=AuthErrorType.VALIDATION_ERROR,
        message=message or ERROR_MESSAGES[AuthErrorType.VALIDATION_ERROR],
        action="retry",
    )


def get_error_action(error_type: AuthErrorType) -> dict[str, str]:
    label, action = ERROR_ACTIONS.get(error_type, ("Retry", "retry"))
    return {"label": label, "action": action}


def format_error_message(error: AuthError) -> str:
    return error.message
