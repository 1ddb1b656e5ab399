from dataclasses import dataclass
from typing import Optional

from agentic_loop.domain.loop_config import LoopConfig
from agentic_loop.domain.loop_result import LoopReason
from agentic_loop.domain.state import AgentState, current_time_ms


@dataclass(frozen=True)
class PolicyCheck:
    """Result of a termination policy evaluation."""

    stop: bool
    reason: Optional[LoopReason] = None


CONTINUE = PolicyCheck(stop=False)


def evaluate_policy(
    state: AgentState, config: LoopConfig, now_ms: Optional[int] = None
) -> PolicyCheck:
    """Decide whether the loop must stop before the next turn.

    Checks run in priority order: completion, step ceiling, tool-call ceiling,
    then timeout. The first match determines the reported reason.

    Args:
        state: Current run state.
        config: Loop ceilings.
        now_ms: Optional wall-clock override in milliseconds.

    Returns:
        A PolicyCheck describing whether to stop and why.
    """

    if state.done:
        return PolicyCheck(stop=True, reason=LoopReason.COMPLETED)
    if state.step >= config.max_steps:
        return PolicyCheck(stop=True, reason=LoopReason.MAX_STEPS)
    if state.tool_calls_used >= config.max_tool_calls:
        return PolicyCheck(stop=True, reason=LoopReason.MAX_TOOL_CALLS)
    now = now_ms if now_ms is not None else current_time_ms()
    if now - state.started_at_ms >= config.timeout_ms:
        return PolicyCheck(stop=True, reason=LoopReason.TIMEOUT)
    return CONTINUE
