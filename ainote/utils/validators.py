"""
Input validation utilities.

Credential checks (email format, password strength) and note input
validation shared by the API request models and the repositories.
"""

from __future__ import annotations

import re
from typing import Literal

from ainote.config import MIN_PASSWORD_LENGTH, NOTE_TITLE_MAX_LENGTH, TAG_MAX_LENGTH

# local@domain.tld: no whitespace or "@" in either part, at least one dot in the domain.
# Used with fullmatch so a trailing newline is rejected.
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PasswordStrengthLevel = Literal["weak", "medium", "strong"]

MAX_PASSWORD_STRENGTH = 5

PASSWORD_STRENGTH_TEXT: dict[str, str] = {
    "weak": "Weak",
    "medium": "Medium",
    "strong": "Strong",
}

PASSWORD_STRENGTH_COLOR: dict[str, str] = {
    "weak": "bg-red-500",
    "medium": "bg-yellow-500",
    "strong": "bg-green-500",
}


class ValidationError(ValueError):
    """Raised when input validation fails."""

    pass


def is_valid_email(email: str) -> bool:
    """
    Check the basic shape of an email address.

    No normalization is applied: surrounding whitespace makes the address invalid.
    """
    return bool(EMAIL_PATTERN.fullmatch(email))


def calculate_password_strength(password: str) -> int:
    """
    Score a password from 0 to 5.

    One point each for: length >= 8, length >= 12, an ASCII uppercase letter,
    an ASCII lowercase letter, a digit, and a character outside [A-Za-z0-9].
    The sum is capped at 5, so a password meeting all six criteria scores 5.
    """
    score = 0

    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1
    if re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"[a-z]", password):
        score += 1
    if re.search(r"[0-9]", password):
        score += 1
    if re.search(r"[^A-Za-z0-9]", password):
        score += 1

    return min(score, MAX_PASSWORD_STRENGTH)


def get_password_strength_level(score: int) -> PasswordStrengthLevel:
    if score <= 2:
        return "weak"
    if score <= 4:
        return "medium"
    return "strong"


def get_password_strength_text(score: int) -> str:
    return PASSWORD_STRENGTH_TEXT[get_password_strength_level(score)]


def get_password_strength_color(score: int) -> str:
    return PASSWORD_STRENGTH_COLOR[get_password_strength_level(score)]


def validate_password(password: str) -> str:
    """
    Enforce the minimum length for new passwords (signup and reset).

    Raises:
        ValidationError: If the password is shorter than MIN_PASSWORD_LENGTH
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def validate_note_title(title: str | None) -> str:
    """
    Trim and validate a note title.

    Raises:
        ValidationError: If the title is missing, blank, or too long
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Please enter a title")
    if len(title) > NOTE_TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {NOTE_TITLE_MAX_LENGTH} characters")
    return title


def validate_note_content(content: str | None) -> str:
    """
    Trim and validate note content.

    Raises:
        ValidationError: If the content is missing or blank
    """
    content = (content or "").strip()
    if not content:
        raise ValidationError("Please enter some content")
    return content


def validate_tag(tag: str | None) -> str:
    """
    Trim and validate a single tag.

    Raises:
        ValidationError: If the tag is blank or longer than TAG_MAX_LENGTH
    """
    tag = (tag or "").strip()
    if not tag:
        raise ValidationError("Tag cannot be empty")
    if len(tag) > TAG_MAX_LENGTH:
        raise ValidationError(f"Tag must be at most {TAG_MAX_LENGTH} characters")
    return tag
