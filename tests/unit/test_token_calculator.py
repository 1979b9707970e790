"""Tests for token estimation and cost formatting"""

from __future__ import annotations

import pytest

from ainote.utils.token_calculator import (
    calculate_gemini_cost,
    calculate_usage_percentage,
    estimate_token_count,
    format_cost,
    format_token_count,
    get_token_usage_status,
)


def test_estimate_token_count():
    assert estimate_token_count("") == 0
    assert estimate_token_count(None) == 0
    # 4 ASCII letters -> 1 token
    assert estimate_token_count("abcd") == 1
    # 5 letters -> 2, 1 space -> 1
    assert estimate_token_count("abc de") == 3
    # 3 Hangul syllables -> ceil(3 / 1.5) = 2
    assert estimate_token_count("안녕하") == 2


def test_calculate_gemini_cost():
    assert calculate_gemini_cost(1_000_000, 0, "gemini-1.5-pro") == pytest.approx(1.25)
    assert calculate_gemini_cost(0, 1_000_000, "gemini-1.5-flash") == pytest.approx(0.30)
    # Unknown models fall back to flash pricing
    assert calculate_gemini_cost(1_000_000, 1_000_000, "gemini-unknown") == pytest.approx(0.375)


def test_format_token_count():
    assert format_token_count(999) == "999"
    assert format_token_count(1500) == "1.5K"
    assert format_token_count(2_500_000) == "2.5M"


def test_format_cost():
    assert format_cost(0.0001234) == "$0.000123"
    assert format_cost(1.5) == "$1.50"


def test_usage_status():
    assert calculate_usage_percentage(50, 0) == 0.0
    assert calculate_usage_percentage(150, 100) == 100.0

    assert get_token_usage_status(10, 100).status == "safe"
    assert get_token_usage_status(75, 100).status == "warning"
    assert get_token_usage_status(95, 100).status == "danger"

    exceeded = get_token_usage_status(120, 100)
    assert exceeded.status == "exceeded"
    assert exceeded.remaining == 0
