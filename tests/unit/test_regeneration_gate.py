"""Tests for the regeneration confirmation gate"""

from __future__ import annotations

import pytest

from ainote.usage import GateState, GateStateError, RegenerationGate


def test_gate_lifecycle():
    gate = RegenerationGate("summary")
    assert gate.state is GateState.CLOSED
    assert gate.limit == 10

    gate.open(current_count=3)
    assert gate.is_open
    assert gate.state is GateState.OPEN_IDLE
    assert gate.remaining_display == 7

    assert gate.confirm(lambda: "done") == "done"
    assert gate.state is GateState.CLOSED


def test_gate_closes_after_failed_operation():
    gate = RegenerationGate("tags")
    gate.open()

    def boom():
        raise RuntimeError("generation failed")

    with pytest.raises(RuntimeError):
        gate.confirm(boom)
    assert gate.state is GateState.CLOSED


def test_gate_cannot_be_dismissed_while_confirming():
    gate = RegenerationGate("summary")
    gate.open()
    observed = {}

    def operation():
        observed["confirming"] = gate.is_confirming
        observed["closed"] = gate.close()
        return None

    gate.confirm(operation)
    assert observed == {"confirming": True, "closed": False}


def test_confirm_requires_open_idle():
    gate = RegenerationGate("summary")
    with pytest.raises(GateStateError):
        gate.confirm(lambda: None)


def test_describe_hides_remaining_when_used_up():
    gate = RegenerationGate("summary", current_count=10, limit=10)
    assert gate.remaining_display is None
    assert gate.describe() == "Regenerate summary? Used today: 10 / 10"

    gate = RegenerationGate("tags", current_count=4, limit=10)
    assert gate.describe() == "Regenerate tags? Used today: 4 / 10 (6 remaining)"
    assert gate.to_dict()["remaining"] == 6
