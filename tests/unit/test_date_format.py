"""Tests for relative date display"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from ainote.utils.date_format import format_date, truncate_text

NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=UTC)


def test_moments_ago():
    assert format_date(NOW - timedelta(seconds=59), now=NOW) == "moments ago"
    # Future timestamps are also "moments ago"
    assert format_date(NOW + timedelta(minutes=5), now=NOW) == "moments ago"


def test_minutes_hours_days_are_floored():
    assert format_date(NOW - timedelta(seconds=119), now=NOW) == "1 minutes ago"
    assert format_date(NOW - timedelta(minutes=59, seconds=59), now=NOW) == "59 minutes ago"
    assert format_date(NOW - timedelta(hours=23, minutes=59), now=NOW) == "23 hours ago"
    assert format_date(NOW - timedelta(days=6, hours=23), now=NOW) == "6 days ago"


def test_week_or_more_shows_date():
    assert format_date(NOW - timedelta(days=7), now=NOW) == "2024-03-08"


def test_accepts_iso_strings_and_naive_datetimes():
    assert format_date("2024-03-15T11:30:00+00:00", now=NOW) == "30 minutes ago"
    assert format_date("2024-03-15T11:00:00Z", now=NOW) == "1 hours ago"
    assert format_date(datetime(2024, 3, 15, 10, 0), now=NOW) == "2 hours ago"


def test_truncate_text():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("exactly10!", 10) == "exactly10!"
    assert truncate_text("this is longer", 4) == "this..."


def test_truncate_text_counts_characters_not_bytes():
    assert truncate_text("안녕하세요 세계", 3) == "안녕하..."
    assert truncate_text("안녕하세요", 5) == "안녕하세요"
