"""Deterministic offline decision provider for demos and tests."""

import re
from typing import Optional, Sequence, Tuple
from uuid import uuid4

from agentic_loop.domain.decision import (
    AskUserDecision,
    CallToolDecision,
    Decision,
    RespondDecision,
    ToolCallRequest,
)
from agentic_loop.domain.exceptions import ProviderError
from agentic_loop.domain.messages import AgentMessage, MessageRole

FAILING_MODEL = "fail-primary"

INTERVIEWER_QUESTION = (
    "What kind of vacation spot do you like most: beach, city, mountains, "
    "or something else?"
)
COUNTRY_QUESTION = (
    "Which travel vibe feels most like you right now: beach, culture, "
    "mountains, city, or food?"
)

_COUNTRY_RULES: Tuple[Tuple[re.Pattern, str, str], ...] = (
    (
        re.compile(r"anime|manga|tokyo|sushi|tech|japan|onsen|neon|bullet train"),
        "Japan",
        "こんにちは",
    ),
    (
        re.compile(r"beach|tropical|island|carnival|rio|surf|warm water"),
        "Brazil",
        "Olá do Brasil",
    ),
    (
        re.compile(r"romance|cafe|wine|museum|paris|art|fashion|france"),
        "France",
        "Bonjour de France",
    ),
    (
        re.compile(r"mountain|northern lights|volcano|glacier|cold|hiking|iceland"),
        "Iceland",
        "Halló frá Íslandi",
    ),
    (
        re.compile(r"history|ruins|pasta|rome|italy|mediterranean"),
        "Italy",
        "Ciao dall'Italia",
    ),
)
_DEFAULT_COUNTRY = ("Spain", "Hola desde España")

_ECHO_PATTERN = re.compile(r"echo:\s*(.+)$", re.IGNORECASE)
_INTERVIEWER_PATTERN = re.compile(r"interactive interviewer", re.IGNORECASE)
_COUNTRY_PATTERN = re.compile(r"favorite country greeter", re.IGNORECASE)


def guess_country(preference: str) -> Tuple[str, str]:
    """Return ``(country, greeting)`` for a free-text travel preference."""

    text = preference.lower()
    for pattern, country, greeting in _COUNTRY_RULES:
        if pattern.search(text):
            return country, greeting
    return _DEFAULT_COUNTRY


class RuleBasedProviderAdapter:
    """Rule engine standing in for a language model.

    The model ``fail-primary`` always raises a retryable ProviderError so
    fallback routing can be exercised offline.
    """

    name = "rule"

    async def generate_decision(
        self, model: str, messages: Sequence[AgentMessage]
    ) -> Decision:
        """Return a decision derived from the transcript.

        Args:
            model: Model identifier; only ``fail-primary`` changes behavior.
            messages: Windowed transcript.

        Returns:
            A decision variant.
        """

        if model == FAILING_MODEL:
            raise ProviderError("Primary model unavailable", retryable=True)

        last_message: Optional[AgentMessage] = messages[-1] if messages else None
        content = last_message.content if last_message else ""
        system_prompt = next(
            (m.content for m in messages if m.role == MessageRole.SYSTEM), ""
        )

        if last_message is not None and last_message.role == MessageRole.TOOL:
            return RespondDecision(
                message=f"Tool completed successfully. Result: {content}"
            )

        from_user = last_message is not None and last_message.role == MessageRole.USER
        if from_user and _INTERVIEWER_PATTERN.search(system_prompt):
            if not _already_asked(messages, "What kind of vacation spot do you like most"):
                return AskUserDecision(message=INTERVIEWER_QUESTION)
            return RespondDecision(
                message=(
                    f'Thanks, that helps. You said "{content}". I can now continue '
                    "with a destination-guessing workflow."
                )
            )

        if from_user and _COUNTRY_PATTERN.search(system_prompt):
            if not _already_asked(
                messages, "Which travel vibe feels most like you right now"
            ):
                return AskUserDecision(message=COUNTRY_QUESTION)
            country, greeting = guess_country(content)
            return RespondDecision(
                message=(
                    f"I guess your favorite country is {country}. "
                    f"Hello from {country}: {greeting}"
                )
            )

        match = _ECHO_PATTERN.search(content)
        if match:
            return CallToolDecision(
                message="Using the echo tool to verify tool-calling flow.",
                tool_calls=[
                    ToolCallRequest(
                        id=str(uuid4()),
                        tool_name="echo",
                        args={"text": match.group(1)},
                        reasoning="User requested an echo operation.",
                    )
                ],
            )

        return RespondDecision(
            message=(
                f"Agent loop foundation is initialized on rule/{model}. "
                "Use input like `echo: hello` to trigger a tool call."
            )
        )


def _already_asked(messages: Sequence[AgentMessage], marker: str) -> bool:
    """Return True when an assistant turn already contains ``marker``."""

    return any(
        m.role == MessageRole.ASSISTANT and marker in m.content for m in messages
    )
