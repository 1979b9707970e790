"""
Token estimation and Gemini cost calculation.

Estimates are heuristic (no tokenizer call): Hangul syllables average about
1.5 characters per token, ASCII letters about 4, everything else about 3.
"""

from __future__ import annotations

import math
import re
from typing import Literal, NamedTuple

_HANGUL = re.compile(r"[가-힣]")
_ASCII_LETTER = re.compile(r"[a-zA-Z]")

DEFAULT_PRICING_MODEL = "gemini-1.5-flash"

# USD per 1M tokens
GEMINI_PRICING: dict[str, dict[str, float]] = {
    "gemini-1.5-flash": {"input": 0.075, "output": 0.30},
    "gemini-1.5-pro": {"input": 1.25, "output": 5.00},
    "gemini-1.0-pro": {"input": 0.50, "output": 1.50},
}

UsageStatus = Literal["safe", "warning", "danger", "exceeded"]


class TokenUsageStatus(NamedTuple):
    status: UsageStatus
    percentage: float
    remaining: int


def estimate_token_count(text: str | None) -> int:
    if not text:
        return 0

    hangul = len(_HANGUL.findall(text))
    ascii_letters = len(_ASCII_LETTER.findall(text))
    other = len(text) - hangul - ascii_letters

    return math.ceil(hangul / 1.5) + math.ceil(ascii_letters / 4) + math.ceil(other / 3)


def calculate_gemini_cost(
    input_tokens: int, output_tokens: int, model: str = DEFAULT_PRICING_MODEL
) -> float:
    """
    Cost in USD for one call. Models without a price entry are billed at the
    gemini-1.5-flash rate.
    """
    pricing = GEMINI_PRICING.get(model, GEMINI_PRICING[DEFAULT_PRICING_MODEL])
    return (input_tokens / 1_000_000) * pricing["input"] + (output_tokens / 1_000_000) * pricing[
        "output"
    ]


def format_token_count(tokens: int) -> str:
    if tokens < 1000:
        return str(tokens)
    if tokens < 1_000_000:
        return f"{tokens / 1000:.1f}K"
    return f"{tokens / 1_000_000:.1f}M"


def format_cost(cost: float) -> str:
    if cost < 0.01:
        return f"${cost:.6f}"
    return f"${cost:.2f}"


def calculate_usage_percentage(used: int, limit: int) -> float:
    if limit <= 0:
        return 0.0
    return min(100.0, max(0.0, used / limit * 100))


def get_token_usage_status(used: int, limit: int) -> TokenUsageStatus:
    percentage = calculate_usage_percentage(used, limit)
    remaining = max(0, limit - used)

    if used >= limit:
        return TokenUsageStatus("exceeded", 100.0, 0)
    if percentage >= 90:
        return TokenUsageStatus("danger", percentage, remaining)
    if percentage >= 75:
        return TokenUsageStatus("warning", percentage, remaining)
    return TokenUsageStatus("safe", percentage, remaining)
