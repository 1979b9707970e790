"""Tests for authentication error classification"""

from __future__ import annotations

from ainote.infrastructure.auth_backend import AuthBackendError
from ainote.utils.error_handler import (
    ERROR_MESSAGES,
    AuthErrorType,
    format_error_message,
    get_error_action,
    handle_auth_error,
    validation_error,
)


def test_network_errors():
    error = handle_auth_error(AuthBackendError("Network request failed"))
    assert error.type is AuthErrorType.NETWORK_ERROR
    assert error.action == "retry"
    assert error.message == ERROR_MESSAGES[AuthErrorType.NETWORK_ERROR]

    assert handle_auth_error({"message": "Failed to fetch"}).type is AuthErrorType.NETWORK_ERROR


def test_message_rules_are_case_sensitive():
    # lowercase "network" does not match; no status either
    error = handle_auth_error({"message": "network error"})
    assert error.type is AuthErrorType.UNKNOWN_ERROR
    assert error.message == "network error"


def test_rule_order_message_before_status():
    error = handle_auth_error({"message": "Invalid login credentials", "status": 400})
    assert error.type is AuthErrorType.INVALID_CREDENTIALS

    # Session rule precedes the status rules even for a 500
    error = handle_auth_error({"message": "Session expired", "status": 500})
    assert error.type is AuthErrorType.SESSION_EXPIRED
    assert error.action == "login"


def test_email_not_confirmed():
    error = handle_auth_error(AuthBackendError("Email not confirmed", 400))
    assert error.type is AuthErrorType.EMAIL_NOT_CONFIRMED
    assert error.action == "resend-email"


def test_permission_denied():
    error = handle_auth_error({"message": "Request failed with 403"})
    assert error.type is AuthErrorType.PERMISSION_DENIED
    assert error.action == "go-home"


def test_status_fallbacks():
    assert handle_auth_error({"message": "oops", "status": 502}).type is AuthErrorType.SERVER_ERROR
    assert handle_auth_error({"message": "oops", "status": 422}).type is AuthErrorType.CLIENT_ERROR


def test_status_only_errors():
    assert handle_auth_error({"status": 500}).type is AuthErrorType.SERVER_ERROR
    assert handle_auth_error({"status": 404}).type is AuthErrorType.CLIENT_ERROR
    assert handle_auth_error({"status": 500}).message == ERROR_MESSAGES[AuthErrorType.SERVER_ERROR]


def test_unknown_without_message():
    error = handle_auth_error(object())
    assert error.type is AuthErrorType.UNKNOWN_ERROR
    assert error.message == ERROR_MESSAGES[AuthErrorType.UNKNOWN_ERROR]


def test_plain_exception_uses_str():
    error = handle_auth_error(RuntimeError("Network down"))
    assert error.type is AuthErrorType.NETWORK_ERROR


def test_validation_error_and_helpers():
    error = validation_error("Please enter a valid email address.")
    assert error.type is AuthErrorType.VALIDATION_ERROR
    assert error.to_dict() == {
        "type": "VALIDATION_ERROR",
        "message": "Please enter a valid email address.",
        "action": "retry",
    }
    assert format_error_message(error) == "Please enter a valid email address."
    assert validation_error().message == ERROR_MESSAGES[AuthErrorType.VALIDATION_ERROR]


def test_get_error_action():
    assert get_error_action(AuthErrorType.EMAIL_NOT_CONFIRMED) == {
        "label": "Resend email",
        "action": "resend-email",
    }
    assert get_error_action(AuthErrorType.CLIENT_ERROR) == {"label": "Retry", "action": "retry"}


def test_invalid_credentials_action_differs_between_lookup_and_classifier():
    # The lookup table offers a login button; the classifier asks the user to retry.
    assert get_error_action(AuthErrorType.INVALID_CREDENTIALS)["action"] == "login"

    error = handle_auth_error({"message": "Invalid login credentials"})
    assert error.type is AuthErrorType.INVALID_CREDENTIALS
    assert error.action == "retry"
