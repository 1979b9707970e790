"""
Confirmation gate shown before an AI regeneration.

States: CLOSED -> OPEN_IDLE (open) -> OPEN_CONFIRMING (confirm) -> CLOSED.
While confirming the gate cannot be dismissed; once the operation finishes,
successfully or not, the gate closes. The gate only displays usage counts.
Enforcement lives in ainote.usage.regenerations.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

from ainote.config import REGENERATION_DAILY_LIMITS

T = TypeVar("T")

DEFAULT_LIMIT = 10


class GateState(str, Enum):
    CLOSED = "closed"
    OPEN_IDLE = "open_idle"
    OPEN_CONFIRMING = "open_confirming"


class GateStateError(RuntimeError):
    """Raised when confirm() is called outside OPEN_IDLE."""


class RegenerationGate(Generic[T]):
    def __init__(
        self,
        regeneration_type: str,
        current_count: int = 0,
        limit: int | None = None,
    ) -> None:
        self.regeneration_type = regeneration_type
        self.current_count = current_count
        self.limit = (
            limit if limit is not None else REGENERATION_DAILY_LIMITS.get(regeneration_type, DEFAULT_LIMIT)
        )
        self.state = GateState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is not GateState.CLOSED

    @property
    def is_confirming(self) -> bool:
        return self.state is GateState.OPEN_CONFIRMING

    @property
    def remaining(self) -> int:
        return self.limit - self.current_count

    @property
    def remaining_display(self) -> int | None:
        """Remaining count to show, or None when nothing is left."""
        remaining = self.remaining
        return remaining if remaining > 0 else None

    def open(self, current_count: int | None = None, limit: int | None = None) -> None:
        if current_count is not None:
            self.current_count = current_count
        if limit is not None:
            self.limit = limit
        if self.state is GateState.CLOSED:
            self.state = GateState.OPEN_IDLE

    def close(self) -> bool:
        """Dismiss the gate. Refused (returns False) while an operation is running."""
        if self.state is GateState.OPEN_CONFIRMING:
            return False
        self.state = GateState.CLOSED
        return True

    def confirm(self, operation: Callable[[], T]) -> T:
        """
        Run ``operation`` and close the gate afterwards, even when it raises.

        Raises:
            GateStateError: If the gate is not open and idle
        """
        if self.state is not GateState.OPEN_IDLE:
            raise GateStateError(f"Cannot confirm from state {self.state.value}")

        self.state = GateState.OPEN_CONFIRMING
        try:
            return operation()
        finally:
            self.state = GateState.CLOSED

    def describe(self) -> str:
        text = f"Regenerate {self.regeneration_type}? Used today: {self.current_count} / {self.limit}"
        if self.remaining_display is not None:
            text += f" ({self.remaining_display} remaining)"
        return text

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.regeneration_type,
            "state": self.state.value,
            "current_count": self.current_count,
            "limit": self.limit,
            "remaining": self.remaining_display,
            "message": self.describe(),
        }
