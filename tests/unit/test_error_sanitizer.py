"""Tests for error message sanitization and secret redaction"""

from __future__ import annotations

from ainote.utils.error_sanitizer import (
    GENERIC_MESSAGES,
    get_safe_error_detail,
    redact_secrets,
    sanitize_error_message,
)


def test_plain_client_messages_pass_through():
    assert sanitize_error_message("Title is too long", 400) == "Title is too long"


def test_internal_details_are_replaced():
    assert sanitize_error_message("sqlite3.OperationalError: locked", 400) == GENERIC_MESSAGES[400]
    assert sanitize_error_message("boom in /srv/app/ainote/notes.py", 500) == GENERIC_MESSAGES[500]
    assert sanitize_error_message("", 404) == GENERIC_MESSAGES[404]


def test_safe_detail_prefers_context_for_server_errors():
    assert get_safe_error_detail(RuntimeError("disk"), 500, "Failed to save") == "Failed to save"


def test_redact_secrets_keeps_surrounding_text():
    text = "GET /notes failed: Bearer eyJhbGci.payload.sig token=abc123 apiKey: xyz"
    redacted = redact_secrets(text)
    assert redacted.startswith("GET /notes failed: Bearer [REDACTED]")
    assert "token=[REDACTED]" in redacted
    assert "apiKey" not in redacted
    assert "eyJhbGci" not in redacted


def test_redact_long_opaque_strings():
    assert redact_secrets("id ABCDEFGHIJKLMNOPQRSTUV0123") == "id [REDACTED]"
