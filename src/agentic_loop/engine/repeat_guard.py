"""Detection of an oracle stuck proposing the same tool calls."""

import json
import logging
from typing import Any, Optional, Sequence

from agentic_loop.domain.decision import ToolCallRequest

logger = logging.getLogger(__name__)

UNSERIALIZABLE_SIGNATURE = "[unserializable-decision]"


def decision_signature(tool_calls: Sequence[ToolCallRequest]) -> str:
    """Return a stable fingerprint of the tool-call intent of a decision.

    Only the ordered ``(toolName, args)`` pairs contribute; correlation ids and
    reasoning are ignored.

    Args:
        tool_calls: Tool calls requested by a decision.

    Returns:
        Deterministic serialization, or a fixed sentinel when the arguments
        cannot be serialized.
    """

    payload: list[dict[str, Any]] = [
        {"toolName": call.tool_name, "args": call.args} for call in tool_calls
    ]
    try:
        return json.dumps(payload, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError):
        return UNSERIALIZABLE_SIGNATURE


class RepeatedDecisionGuard:
    """
    Tracks consecutive identical tool decisions within one loop invocation.

    Args:
        threshold: Repeat count at which the loop must stop.
    """

    def __init__(self, threshold: int) -> None:
        self.threshold = threshold
        self.repeat_count = 0
        self._last_signature: Optional[str] = None

    def observe(self, tool_calls: Sequence[ToolCallRequest]) -> bool:
        """
        Records a tool decision and reports whether the threshold is reached.

        Args:
            tool_calls: Tool calls of the current decision.

        Returns:
            True when the loop must stop.
        """
        signature = decision_signature(tool_calls)
        if signature == self._last_signature:
            self.repeat_count += 1
        else:
            self.repeat_count = 0
            self._last_signature = signature
        if self.repeat_count >= self.threshold:
            logger.debug(
                "repeat_guard.triggered",
                extra={"repeat_count": self.repeat_count, "threshold": self.threshold},
            )
            return True
        return False
