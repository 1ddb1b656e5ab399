from enum import Enum

from pydantic import BaseModel

from agentic_loop.domain.state import AgentState


class LoopReason(str, Enum):
    """Why a loop invocation returned."""

    COMPLETED = "completed"
    AWAITING_USER = "awaiting_user"
    MAX_STEPS = "max_steps"
    MAX_TOOL_CALLS = "max_tool_calls"
    TIMEOUT = "timeout"
    POLICY_STOP = "policy_stop"
    ERROR = "error"


class LoopResult(BaseModel):
    """Final state of a loop invocation plus the reason it returned."""

    state: AgentState
    reason: LoopReason
