import time
from typing import List, Optional

from pydantic import BaseModel, Field

from agentic_loop.domain.messages import AgentMessage


def current_time_ms() -> int:
    """Return the wall-clock time in milliseconds."""

    return int(time.time() * 1000)


class AgentState(BaseModel):
    """Mutable record of one agent run.

    The transcript is append-only. Windowing for the oracle happens on a
    transient copy, never on ``messages`` itself.
    """

    session_id: str = Field(description="Caller-supplied stable session identifier.")
    agent_id: Optional[str] = Field(default=None, description="Informational label.")
    step: int = Field(default=0, ge=0, description="Completed decision turns.")
    tool_calls_used: int = Field(
        default=0, ge=0, description="Tool invocations across the run."
    )
    started_at_ms: int = Field(
        default_factory=current_time_ms,
        description="Wall-clock anchor for timeout computation.",
    )
    done: bool = Field(default=False, description="Terminal flag.")
    final_answer: Optional[str] = Field(
        default=None, description="Answer recorded when the run finished."
    )
    messages: List[AgentMessage] = Field(default_factory=list)

    @classmethod
    def initial(
        cls,
        session_id: str,
        system_prompt: str,
        user_input: str,
        agent_id: Optional[str] = None,
        started_at_ms: Optional[int] = None,
    ) -> "AgentState":
        """Create the state for a fresh run.

        Args:
            session_id: Stable session identifier.
            system_prompt: Leading system message content.
            user_input: First user message content.
            agent_id: Optional agent label.
            started_at_ms: Optional time anchor override.

        Returns:
            A new AgentState holding the system and user messages.
        """

        return cls(
            session_id=session_id,
            agent_id=agent_id,
            started_at_ms=(
                started_at_ms if started_at_ms is not None else current_time_ms()
            ),
            messages=[AgentMessage.system(system_prompt), AgentMessage.user(user_input)],
        )

    def append_message(self, message: AgentMessage) -> None:
        """Append a turn to the transcript."""

        self.messages.append(message)

    def mark_done(self, answer: str) -> None:
        """Mark the run finished with the given final answer."""

        self.done = True
        self.final_answer = answer

    def reset_clock(self, now_ms: Optional[int] = None) -> None:
        """Reset the timeout anchor, used when a paused run resumes."""

        self.started_at_ms = now_ms if now_ms is not None else current_time_ms()

    def last_message(self, role: Optional[str] = None) -> Optional[AgentMessage]:
        """Return the most recent message, optionally filtered by role."""

        for message in reversed(self.messages):
            if role is None or message.role.value == role:
                return message
        return None
