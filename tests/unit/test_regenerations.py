"""Tests for daily regeneration limits"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from ainote.usage import (
    RegenerationLimitExceeded,
    can_regenerate_and_record,
    check_regeneration_limit,
    get_regeneration_history,
    record_regeneration,
)
from ainote.usage.regenerations import get_regeneration_limit

NOW = datetime(2024, 6, 10, 15, 0, tzinfo=UTC)


def test_fresh_user_can_regenerate():
    status = check_regeneration_limit("u1", "summary", now=NOW)
    assert status.can_regenerate
    assert status.current_count == 0
    assert status.limit == 10


def test_limit_reached_after_ten():
    for _ in range(10):
        record_regeneration("u1", "n1", "summary", now=NOW)

    status = check_regeneration_limit("u1", "summary", now=NOW)
    assert not status.can_regenerate
    assert status.current_count == 10

    # Counted per type and per user
    assert check_regeneration_limit("u1", "tags", now=NOW).current_count == 0
    assert check_regeneration_limit("u2", "summary", now=NOW).current_count == 0


def test_count_resets_at_utc_midnight():
    yesterday = NOW - timedelta(days=1)
    for _ in range(10):
        record_regeneration("u1", "n1", "tags", now=yesterday)

    assert check_regeneration_limit("u1", "tags", now=yesterday).can_regenerate is False
    assert check_regeneration_limit("u1", "tags", now=NOW).current_count == 0


def test_can_regenerate_and_record():
    for expected in range(1, 11):
        status = can_regenerate_and_record("u1", "n1", "summary", now=NOW)
        assert status.current_count == expected

    assert status.can_regenerate is False

    with pytest.raises(RegenerationLimitExceeded) as exc_info:
        can_regenerate_and_record("u1", "n1", "summary", now=NOW)

    assert exc_info.value.current_count == 10
    assert exc_info.value.limit == 10
    assert "Daily summary regeneration limit (10) reached" in str(exc_info.value)
    assert check_regeneration_limit("u1", "summary", now=NOW).current_count == 10


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        get_regeneration_limit("title")
    with pytest.raises(ValueError):
        record_regeneration("u1", "n1", "title")


def test_history_newest_first():
    record_regeneration("u1", "n1", "summary", now=NOW - timedelta(hours=2))
    record_regeneration("u1", "n2", "tags", now=NOW - timedelta(hours=1))
    record_regeneration("u1", "n3", "summary", now=NOW)

    history = get_regeneration_history("u1")
    assert [h["note_id"] for h in history] == ["n3", "n2", "n1"]

    summaries = get_regeneration_history("u1", "summary")
    assert [h["note_id"] for h in summaries] == ["n3", "n1"]
    assert get_regeneration_history("u2") == []
