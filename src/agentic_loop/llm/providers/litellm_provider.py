"""Decision provider backed by LiteLLM chat completions."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import litellm
from pydantic import SecretStr

from agentic_loop.domain.decision import Decision, parse_decision
from agentic_loop.domain.exceptions import ApiKeyError, ProviderError, SchemaError
from agentic_loop.domain.messages import AgentMessage
from agentic_loop.llm.llm_error_mapper import map_provider_error

logger = logging.getLogger(__name__)

DECISION_SYSTEM_PROMPT = (
    "You are a deterministic agent-loop decision engine. Output strict JSON only."
)

DECISION_INSTRUCTIONS = "\n".join(
    [
        "Return only valid JSON with one action.",
        "Allowed actions: CALL_TOOL, ASK_USER, RESPOND, STOP.",
        'CALL_TOOL JSON: {"action":"CALL_TOOL","message":"...","toolCalls":'
        '[{"id":"...","toolName":"...","args":{},"reasoning":"..."}]}',
        'ASK_USER JSON: {"action":"ASK_USER","message":"..."}',
        'RESPOND JSON: {"action":"RESPOND","message":"..."}',
        'STOP JSON: {"action":"STOP","message":"..."}',
    ]
)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

CompletionFn = Callable[..., Awaitable[Any]]


def extract_json(text: str) -> Any:
    """Decode a JSON payload that may be wrapped in a Markdown fence.

    Raises:
        json.JSONDecodeError: If no valid JSON can be decoded.
    """

    trimmed = text.strip()
    if trimmed.startswith("{") or trimmed.startswith("["):
        return json.loads(trimmed)
    fenced = _FENCED_JSON.search(trimmed)
    if fenced:
        return json.loads(fenced.group(1))
    return json.loads(trimmed)


def render_transcript(messages: Sequence[AgentMessage]) -> str:
    """Render messages as ``ROLE: content`` lines."""

    return "\n".join(
        f"{message.role.value.upper()}: {message.content}" for message in messages
    )


class LiteLLMProviderAdapter:
    """Provider adapter that asks a chat model for a JSON decision.

    Args:
        name: Provider name the adapter is registered under.
        model_prefix: Optional LiteLLM provider prefix (``openai``, ``anthropic``).
        api_key: API key for the provider.
        api_key_env: Environment variable named in the missing-key error.
        api_base: Optional OpenAI-compatible base URL (e.g. a LiteLLM proxy).
        completion: Optional override for ``litellm.acompletion``.
    """

    def __init__(
        self,
        name: str,
        model_prefix: Optional[str] = None,
        api_key: Optional[str | SecretStr] = None,
        api_key_env: Optional[str] = None,
        api_base: Optional[str] = None,
        completion: Optional[CompletionFn] = None,
    ) -> None:
        self.name = name
        self._model_prefix = model_prefix
        self._api_key = self._resolve_api_key(api_key)
        self._api_key_env = api_key_env or f"{name.upper()}_API_KEY"
        self._api_base = api_base
        self._completion = completion or litellm.acompletion

    async def generate_decision(
        self, model: str, messages: Sequence[AgentMessage]
    ) -> Decision:
        """Request a decision and validate the JSON reply.

        Raises:
            ApiKeyError: If no API key is configured.
            ProviderError: If the provider call fails or returns nothing.
            SchemaError: If the reply is not a valid decision.
        """

        if not self._api_key:
            raise ApiKeyError(
                f"{self._api_key_env} is not configured for {self.name} provider."
            )

        qualified_model = self._qualify(model)
        logger.info(
            "LLM request start",
            extra={"provider": self.name, "model": qualified_model},
        )
        try:
            response = await self._completion(**self._build_call_args(qualified_model, messages))
            raw = response.choices[0].message.content
        except Exception as exc:
            raise map_provider_error(exc, self.name) from exc
        logger.info(
            "LLM request complete",
            extra={"provider": self.name, "model": qualified_model},
        )

        if not raw:
            raise ProviderError(
                f"{self.name} returned an empty completion.", retryable=True
            )
        try:
            payload = extract_json(raw)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"{self.name} returned non-JSON output: {exc}") from exc
        return parse_decision(payload)

    def _build_call_args(
        self, model: str, messages: Sequence[AgentMessage]
    ) -> Dict[str, Any]:
        """Build keyword arguments for the completion call."""

        prompt_messages: List[Dict[str, str]] = [
            {"role": "system", "content": DECISION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": "\n".join(
                    [
                        DECISION_INSTRUCTIONS,
                        "",
                        "Conversation transcript:",
                        render_transcript(messages),
                    ]
                ),
            },
        ]
        call_args: Dict[str, Any] = {
            "model": model,
            "messages": prompt_messages,
            "temperature": 0,
            "response_format": {"type": "json_object"},
            "drop_params": True,
            "api_key": self._api_key,
        }
        if self._api_base:
            call_args["api_base"] = self._api_base
        return call_args

    def _qualify(self, model: str) -> str:
        """Prefix the model with the LiteLLM provider when missing."""

        if not self._model_prefix or model.startswith(f"{self._model_prefix}/"):
            return model
        return f"{self._model_prefix}/{model}"

    @staticmethod
    def _resolve_api_key(api_key: Optional[str | SecretStr]) -> Optional[str]:
        """Resolve a secret or plain API key to a string."""

        if api_key is None:
            return None
        if isinstance(api_key, SecretStr):
            return api_key.get_secret_value()
        return api_key
