from typing import Any, Protocol, Sequence

from agentic_loop.domain.messages import AgentMessage


class ProviderAdapter(Protocol):
    """Protocol for a decision provider integration."""

    name: str

    async def generate_decision(
        self, model: str, messages: Sequence[AgentMessage]
    ) -> Any:
        """Generate one structured decision.

        Args:
            model: Model identifier understood by the provider.
            messages: Windowed transcript, oldest first.

        Returns:
            A Decision, or a wire-level payload that validates into one.
        """

        ...
