"""Tests for credential and note input validation"""

from __future__ import annotations

import pytest

from ainote.utils.validators import (
    ValidationError,
    calculate_password_strength,
    get_password_strength_color,
    get_password_strength_level,
    get_password_strength_text,
    is_valid_email,
    validate_note_content,
    validate_note_title,
    validate_password,
    validate_tag,
)


@pytest.mark.parametrize(
    "email",
    ["user@example.com", "first.last+tag@sub.example.co", "a@b.c"],
)
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    [
        "",
        "user@example",
        "user example@x.com",
        "@example.com",
        "user@@example.com",
        " user@example.com",
        "a@b.com\n",
    ],
)
def test_invalid_emails(email):
    assert not is_valid_email(email)


def test_password_strength_scores():
    assert calculate_password_strength("") == 0
    assert calculate_password_strength("abc") == 1
    assert calculate_password_strength("abcdefgh") == 2
    assert calculate_password_strength("Abcdefgh1") == 4
    # All six criteria met, capped at 5
    assert calculate_password_strength("Abcdefgh123!") == 5


@pytest.mark.parametrize(
    "base, extra",
    [
        ("abcdefgh", "A"),
        ("abcdefgh", "1"),
        ("abcdefgh", "!"),
        ("ABCDEFGH", "a"),
        ("abc", "defgh"),
        ("Abcdefgh1", "!"),
    ],
)
def test_password_strength_never_drops_when_characters_are_added(base, extra):
    before = calculate_password_strength(base)
    after = calculate_password_strength(base + extra)
    assert after >= before
    assert after <= 5


def test_password_strength_levels():
    assert get_password_strength_level(0) == "weak"
    assert get_password_strength_level(2) == "weak"
    assert get_password_strength_level(3) == "medium"
    assert get_password_strength_level(4) == "medium"
    assert get_password_strength_level(5) == "strong"

    assert get_password_strength_text(1) == "Weak"
    assert get_password_strength_text(5) == "Strong"
    assert get_password_strength_color(3) == "bg-yellow-500"


def test_validate_password_minimum_length():
    assert validate_password("12345678") == "12345678"
    with pytest.raises(ValidationError, match="at least 8"):
        validate_password("1234567")


def test_validate_note_title_trims_and_limits():
    assert validate_note_title("  Groceries  ") == "Groceries"
    assert validate_note_title("x" * 500) == "x" * 500

    with pytest.raises(ValidationError, match="Please enter a title"):
        validate_note_title("   ")
    with pytest.raises(ValidationError, match="at most 500"):
        validate_note_title("x" * 501)


def test_validate_note_content():
    assert validate_note_content("\n body \n") == "body"
    with pytest.raises(ValidationError, match="Please enter some content"):
        validate_note_content(None)


def test_validate_tag():
    assert validate_tag(" work ") == "work"
    with pytest.raises(ValidationError, match="Tag cannot be empty"):
        validate_tag("")
    with pytest.raises(ValidationError):
        validate_tag("t" * 51)
