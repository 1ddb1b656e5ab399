"""Tests for decision parsing and wire rendering."""

import pytest

from agentic_loop.domain.decision import (
    AskUserDecision,
    CallToolDecision,
    RespondDecision,
    StopDecision,
    decision_to_wire,
    parse_decision,
)
from agentic_loop.domain.exceptions import SchemaError


def test_parse_call_tool_decision_from_wire_payload() -> None:
    """Parses camelCase tool calls into typed requests."""
    decision = parse_decision(
        {
            "action": "CALL_TOOL",
            "message": "Checking.",
            "toolCalls": [
                {"id": "c1", "toolName": "echo", "args": {"text": "hi"}},
            ],
        }
    )

    assert isinstance(decision, CallToolDecision)
    assert decision.message == "Checking."
    assert decision.tool_calls[0].tool_name == "echo"
    assert decision.tool_calls[0].args == {"text": "hi"}
    assert decision.tool_calls[0].reasoning is None


@pytest.mark.parametrize(
    "action, expected_type",
    [
        ("RESPOND", RespondDecision),
        ("ASK_USER", AskUserDecision),
        ("STOP", StopDecision),
    ],
)
def test_parse_message_decisions(action: str, expected_type: type) -> None:
    """Parses each message-only variant by its action tag."""
    decision = parse_decision({"action": action, "message": "text"})

    assert isinstance(decision, expected_type)
    assert decision.message == "text"


@pytest.mark.parametrize(
    "payload",
    [
        {"action": "CALL_TOOL", "toolCalls": []},
        {"action": "CALL_TOOL"},
        {"action": "RESPOND", "message": ""},
        {"action": "ASK_USER"},
        {"action": "DANCE", "message": "x"},
        {"message": "no action"},
        "RESPOND",
    ],
)
def test_parse_decision_rejects_invalid_payloads(payload: object) -> None:
    """Raises SchemaError for payloads outside the decision shape."""
    with pytest.raises(SchemaError) as exc_info:
        parse_decision(payload)

    assert exc_info.value.retryable is False
    assert exc_info.value.code == "VALIDATION_ERROR"


def test_parse_decision_rejects_tool_call_without_name() -> None:
    """Requires a non-empty tool name on every call."""
    with pytest.raises(SchemaError):
        parse_decision(
            {"action": "CALL_TOOL", "toolCalls": [{"id": "c1", "toolName": ""}]}
        )


def test_decision_to_wire_uses_aliases() -> None:
    """Renders tool calls with their wire field names."""
    decision = CallToolDecision(
        tool_calls=[{"id": "c1", "tool_name": "echo", "args": {"text": "a"}}]
    )

    wire = decision_to_wire(decision)

    assert wire == {
        "action": "CALL_TOOL",
        "toolCalls": [{"id": "c1", "toolName": "echo", "args": {"text": "a"}}],
    }
