"""Tests for token usage accounting"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from ainote.usage import get_daily_usage_report, get_token_usage, record_token_usage

NOW = datetime(2024, 6, 10, 15, 0, tzinfo=UTC)


def test_record_token_usage_computes_totals():
    record = record_token_usage(
        "u1", "summary", 1000, 500, "gemini-1.5-flash", note_id="n1", now=NOW
    )
    assert record["total_tokens"] == 1500
    assert record["cost_usd"] == pytest.approx((1000 * 0.075 + 500 * 0.30) / 1_000_000)


def test_record_token_usage_validates():
    with pytest.raises(ValueError):
        record_token_usage("u1", "translate", 1, 1, "gemini-1.5-flash")
    with pytest.raises(ValueError):
        record_token_usage("u1", "tags", -1, 1, "gemini-1.5-flash")


def test_usage_by_period():
    record_token_usage("u1", "summary", 100, 50, "gemini-1.5-flash", now=NOW)
    record_token_usage("u1", "tags", 40, 10, "gemini-1.5-flash", now=NOW - timedelta(days=3))
    record_token_usage("u1", "regeneration", 10, 10, "gemini-1.5-flash", now=NOW - timedelta(days=40))
    record_token_usage("u2", "summary", 999, 999, "gemini-1.5-flash", now=NOW)

    today = get_token_usage("u1", "today", now=NOW)
    assert today["requests"] == 1
    assert today["total_tokens"] == 150

    week = get_token_usage("u1", "week", now=NOW)
    assert week["requests"] == 2
    assert week["input_tokens"] == 140
    assert week["by_operation"]["tags"] == {"requests": 1, "total_tokens": 50}
    assert [d["day"] for d in week["daily"]] == ["2024-06-07", "2024-06-10"]

    year = get_token_usage("u1", "year", now=NOW)
    assert year["requests"] == 3


def test_unknown_period_rejected():
    with pytest.raises(ValueError):
        get_token_usage("u1", "decade")


def test_daily_report_has_no_user_ids():
    record_token_usage("u1", "summary", 100, 50, "gemini-1.5-flash", now=NOW)
    record_token_usage("u2", "tags", 10, 5, "gemini-1.5-pro", now=NOW)
    record_token_usage("u2", "tags", 10, 5, "gemini-1.5-pro", now=NOW - timedelta(days=1))

    report = get_daily_usage_report(date(2024, 6, 10))
    assert report["date"] == "2024-06-10"
    assert report["requests"] == 2
    assert report["unique_users"] == 2
    assert report["total_tokens"] == 165
    assert set(report["by_model"]) == {"gemini-1.5-flash", "gemini-1.5-pro"}
    assert "u1" not in str(report)
