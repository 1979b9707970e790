"""
AI usage quotas: regeneration limits, the confirmation gate, token accounting.
"""

from ainote.usage.regeneration_gate import GateState, GateStateError, RegenerationGate
from ainote.usage.regenerations import (
    RegenerationLimitExceeded,
    RegenerationStatus,
    can_regenerate_and_record,
    check_regeneration_limit,
    get_regeneration_history,
    record_regeneration,
)
from ainote.usage.token_usage import get_daily_usage_report, get_token_usage, record_token_usage

__all__ = [
    "GateState",
    "GateStateError",
    "RegenerationGate",
    "RegenerationLimitExceeded",
    "RegenerationStatus",
    "can_regenerate_and_record",
    "check_regeneration_limit",
    "get_daily_usage_report",
    "get_regeneration_history",
    "get_token_usage",
    "record_regeneration",
    "record_token_usage",
]
