from agentic_loop.domain.decision import (
    AskUserDecision,
    CallToolDecision,
    Decision,
    RespondDecision,
    StopDecision,
    ToolCallRequest,
    parse_decision,
)
from agentic_loop.domain.loop_config import AgentLoopOverrides, LoopConfig
from agentic_loop.domain.loop_result import LoopReason, LoopResult
from agentic_loop.domain.messages import AgentMessage, MessageRole
from agentic_loop.domain.model_target import ModelTarget
from agentic_loop.domain.policy import NO_RETRY, RetryPolicy
from agentic_loop.domain.state import AgentState
from agentic_loop.domain.tool import BaseTool, ToolCallResult, ToolContext

__all__ = [
    "AgentLoopOverrides",
    "AgentMessage",
    "AgentState",
    "AskUserDecision",
    "BaseTool",
    "CallToolDecision",
    "Decision",
    "LoopConfig",
    "LoopReason",
    "LoopResult",
    "MessageRole",
    "ModelTarget",
    "NO_RETRY",
    "RespondDecision",
    "RetryPolicy",
    "StopDecision",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolContext",
    "parse_decision",
]
