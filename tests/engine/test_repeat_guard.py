"""Tests for repeated tool decision detection."""

from agentic_loop.domain.decision import ToolCallRequest
from agentic_loop.engine.repeat_guard import (
    UNSERIALIZABLE_SIGNATURE,
    RepeatedDecisionGuard,
    decision_signature,
)


def _call(call_id: str, args: object, reasoning: str = "") -> ToolCallRequest:
    return ToolCallRequest(id=call_id, tool_name="echo", args=args, reasoning=reasoning)


def test_signature_ignores_ids_and_reasoning() -> None:
    """Only tool names and arguments contribute to the fingerprint."""
    first = decision_signature([_call("a", {"text": "hi"}, "because")])
    second = decision_signature([_call("b", {"text": "hi"}, "other")])

    assert first == second


def test_signature_is_stable_across_key_order() -> None:
    """Argument key order does not change the fingerprint."""
    first = decision_signature([_call("a", {"x": 1, "y": 2})])
    second = decision_signature([_call("a", {"y": 2, "x": 1})])

    assert first == second


def test_signature_degrades_to_sentinel() -> None:
    """Unserializable arguments produce the sentinel."""
    assert decision_signature([_call("a", {"value": object()})]) == (
        UNSERIALIZABLE_SIGNATURE
    )


def test_guard_triggers_on_third_identical_decision() -> None:
    """Two repeats of the same decision reach a threshold of two."""
    guard = RepeatedDecisionGuard(threshold=2)

    assert guard.observe([_call("1", {"text": "hi"})]) is False
    assert guard.observe([_call("2", {"text": "hi"})]) is False
    assert guard.repeat_count == 1
    assert guard.observe([_call("3", {"text": "hi"})]) is True
    assert guard.repeat_count == 2


def test_guard_resets_on_different_decision() -> None:
    """A different decision resets the repeat counter."""
    guard = RepeatedDecisionGuard(threshold=2)

    guard.observe([_call("1", {"text": "hi"})])
    guard.observe([_call("2", {"text": "hi"})])
    assert guard.observe([_call("3", {"text": "bye"})]) is False
    assert guard.repeat_count == 0
