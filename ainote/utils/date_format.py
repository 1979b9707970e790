"""Relative date display and text truncation for note lists."""

from __future__ import annotations

from datetime import UTC, datetime


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _parse(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return _as_aware(value)
    # fromisoformat in 3.11+ also accepts a trailing "Z"
    return _as_aware(datetime.fromisoformat(value))


def format_date(value: datetime | str, now: datetime | None = None) -> str:
    """
    Render a timestamp relative to now.

    Differences are floor-truncated: under a minute is "moments ago", then
    minutes, hours and days; a week or more renders the absolute date as
    YYYY-MM-DD. Naive datetimes are treated as UTC.

    Args:
        value: datetime or ISO-8601 string
        now: reference time (defaults to the current UTC time)
    """
    target = _parse(value)
    reference = _as_aware(now) if now is not None else datetime.now(UTC)

    diff_seconds = int((reference - target).total_seconds())
    diff_minutes = diff_seconds // 60
    diff_hours = diff_minutes // 60
    diff_days = diff_hours // 24

    if diff_days < 7:
        if diff_seconds < 60:
            return "moments ago"
        if diff_minutes < 60:
            return f"{diff_minutes} minutes ago"
        if diff_hours < 24:
            return f"{diff_hours} hours ago"
        return f"{diff_days} days ago"

    return target.strftime("%Y-%m-%d")


def truncate_text(text: str, max_length: int) -> str:
    """Cut text to max_length code points and append "..." when it was longer."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."
