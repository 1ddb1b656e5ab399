"""Structured decisions returned by a decision oracle for one turn."""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from agentic_loop.domain.exceptions import SchemaError


class ToolCallRequest(BaseModel):
    """A single tool invocation requested by a decision."""

    id: str = Field(min_length=1, description="Correlation id for the call.")
    tool_name: str = Field(alias="toolName", min_length=1)
    args: Any = Field(default=None, description="Opaque argument payload.")
    reasoning: Optional[str] = Field(default=None, description="Optional rationale.")

    model_config = ConfigDict(populate_by_name=True)


class CallToolDecision(BaseModel):
    """Decision to run one or more tools."""

    action: Literal["CALL_TOOL"] = "CALL_TOOL"
    message: Optional[str] = None
    tool_calls: List[ToolCallRequest] = Field(alias="toolCalls", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class RespondDecision(BaseModel):
    """Decision to answer the user and finish."""

    action: Literal["RESPOND"] = "RESPOND"
    message: str = Field(min_length=1)


class AskUserDecision(BaseModel):
    """Decision to suspend and wait for more user input."""

    action: Literal["ASK_USER"] = "ASK_USER"
    message: str = Field(min_length=1)


class StopDecision(BaseModel):
    """Decision to stop the run for policy reasons."""

    action: Literal["STOP"] = "STOP"
    message: str = Field(min_length=1)


Decision = Annotated[
    Union[CallToolDecision, RespondDecision, AskUserDecision, StopDecision],
    Field(discriminator="action"),
]

_DECISION_ADAPTER: TypeAdapter = TypeAdapter(Decision)


def parse_decision(payload: Any) -> Decision:
    """Validate a wire-level payload into a typed decision.

    Args:
        payload: Decoded JSON object keyed by ``action``.

    Returns:
        The matching decision variant.

    Raises:
        SchemaError: If the payload violates the decision shape.
    """

    try:
        return _DECISION_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise SchemaError(f"Invalid decision payload: {exc}") from exc


def decision_to_wire(decision: Decision) -> dict:
    """Render a decision into its wire-level JSON shape."""

    return decision.model_dump(by_alias=True, exclude_none=True)
