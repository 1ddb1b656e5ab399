import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from pydantic import BaseModel

from agentic_loop.config import Config
from agentic_loop.domain.decision import (
    AskUserDecision,
    CallToolDecision,
    Decision,
    RespondDecision,
    StopDecision,
    parse_decision,
)
from agentic_loop.domain.exceptions import ConfigurationError
from agentic_loop.domain.messages import AgentMessage
from agentic_loop.domain.model_target import ModelTarget
from agentic_loop.llm.providers.base import ProviderAdapter
from agentic_loop.llm.providers.litellm_provider import LiteLLMProviderAdapter
from agentic_loop.llm.providers.rule_provider import RuleBasedProviderAdapter

logger = logging.getLogger(__name__)

_DECISION_TYPES = (CallToolDecision, RespondDecision, AskUserDecision, StopDecision)


class DecisionClient(Protocol):
    """Protocol for obtaining one decision from a target per call."""

    async def decide_next_action(
        self, target: ModelTarget, messages: Sequence[AgentMessage]
    ) -> Decision:
        """Return the next decision for the given target.

        Args:
            target: Provider and model to consult.
            messages: Windowed transcript.

        Returns:
            A validated decision.
        """

        ...


class ProviderBackedDecisionClient:
    """Decision client dispatching to registered provider adapters.

    Retries are not performed here; callers compose retry around
    ``decide_next_action``.

    Args:
        adapters: Provider adapters keyed by their ``name``.

    Raises:
        ConfigurationError: If two adapters share a name.
    """

    def __init__(self, adapters: Iterable[ProviderAdapter]) -> None:
        self._adapters: Dict[str, ProviderAdapter] = {}
        for adapter in adapters:
            if adapter.name in self._adapters:
                raise ConfigurationError(
                    f"Duplicate provider adapter: {adapter.name}"
                )
            self._adapters[adapter.name] = adapter

    def list_providers(self) -> List[str]:
        """Return registered provider names in registration order."""

        return list(self._adapters)

    async def decide_next_action(
        self, target: ModelTarget, messages: Sequence[AgentMessage]
    ) -> Decision:
        """Delegate to the adapter registered for ``target.provider``.

        Raises:
            ConfigurationError: If no adapter is registered for the provider.
            SchemaError: If the adapter output is not a valid decision.
        """

        adapter = self._adapters.get(target.provider)
        if adapter is None:
            raise ConfigurationError(
                f"No provider adapter registered for '{target.provider}'."
            )
        logger.debug(
            "llm.request",
            extra={"provider": target.provider, "model": target.model},
        )
        output = await adapter.generate_decision(target.model, list(messages))
        return _ensure_decision(output)


def _ensure_decision(output: Any) -> Decision:
    """Validate adapter output into a decision variant."""

    if isinstance(output, _DECISION_TYPES):
        return output
    if isinstance(output, BaseModel):
        output = output.model_dump(by_alias=True)
    return parse_decision(output)


class RuleBasedDecisionClient(ProviderBackedDecisionClient):
    """Decision client backed only by the offline rule provider."""

    def __init__(self) -> None:
        super().__init__([RuleBasedProviderAdapter()])


def create_default_decision_client(
    config: Optional[Config] = None,
) -> ProviderBackedDecisionClient:
    """Build the client with the rule, OpenAI and Anthropic adapters.

    Args:
        config: Optional configuration supplying provider API keys.

    Returns:
        A ProviderBackedDecisionClient.
    """

    config = config or Config()
    return ProviderBackedDecisionClient(
        [
            RuleBasedProviderAdapter(),
            LiteLLMProviderAdapter(
                name="openai",
                model_prefix="openai",
                api_key=config.get_openai_api_key(),
                api_key_env="OPENAI_API_KEY",
            ),
            LiteLLMProviderAdapter(
                name="anthropic",
                model_prefix="anthropic",
                api_key=config.get_anthropic_api_key(),
                api_key_env="ANTHROPIC_API_KEY",
            ),
        ]
    )
