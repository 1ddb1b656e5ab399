"""Tests for agent plugins and the agent registry."""

from unittest.mock import AsyncMock

import pytest

from agentic_loop.agents.registry import AgentRegistry, create_default_agent_registry
from agentic_loop.agents.builtins import CountryHelloAgent, EchoAgent, FilesAgent
from agentic_loop.domain.exceptions import ConfigurationError
from agentic_loop.domain.loop_config import LoopConfig
from agentic_loop.domain.loop_result import LoopReason
from agentic_loop.domain.model_target import ModelTarget
from agentic_loop.engine.loop import LoopDependencies, LoopEngine
from agentic_loop.engine.tool_registry import ToolRegistry
from agentic_loop.llm.decision_client import RuleBasedDecisionClient


def _base_config() -> LoopConfig:
    return LoopConfig(
        max_steps=6,
        max_tool_calls=4,
        timeout_ms=30_000,
        max_messages=30,
        max_repeated_decision_signatures=2,
        primary_model=ModelTarget(provider="rule", model="default"),
    )


def test_default_registry_lists_agents_sorted() -> None:
    """Registers every built-in agent sorted by id."""
    registry = create_default_agent_registry()

    assert [agent.id for agent in registry.list()] == [
        "country-hello",
        "echo",
        "files",
        "interviewer",
    ]
    assert registry.get("unknown") is None


def test_registry_rejects_duplicates() -> None:
    """Agent ids are unique."""
    registry = AgentRegistry()
    registry.register(EchoAgent())

    with pytest.raises(ConfigurationError, match="Agent already registered: echo"):
        registry.register(EchoAgent())


def test_country_hello_overrides_loop_limits() -> None:
    """The country agent raises the step and message ceilings."""
    config = _base_config().with_overrides(CountryHelloAgent().loop_overrides)

    assert config.max_steps == 24
    assert config.max_messages == 80
    assert config.max_tool_calls == 4


def test_agents_register_their_tools(tmp_path) -> None:
    """Each agent registers only the tools it needs."""
    echo_tools = ToolRegistry()
    EchoAgent().register_tools(echo_tools)
    file_tools = ToolRegistry()
    FilesAgent(root=tmp_path).register_tools(file_tools)
    country_tools = ToolRegistry()
    CountryHelloAgent().register_tools(country_tools)

    assert echo_tools.list() == ["echo"]
    assert file_tools.list() == ["read_file", "write_file"]
    assert country_tools.list() == []


@pytest.mark.asyncio
async def test_country_hello_conversation() -> None:
    """Asks for a preference, then greets from the guessed country."""
    agent = create_default_agent_registry().get("country-hello")
    tools = ToolRegistry()
    agent.register_tools(tools)
    engine = LoopEngine(
        LoopDependencies(
            decision_client=RuleBasedDecisionClient(),
            tool_registry=tools,
            sleep=AsyncMock(),
        )
    )
    config = _base_config().with_overrides(agent.loop_overrides)

    first = await engine.run(
        session_id="s1",
        config=config,
        user_input="Alex",
        system_prompt=agent.system_prompt,
        agent_id=agent.id,
    )
    second = await engine.run(
        session_id="s1", config=config, user_input="beach and surf", state=first.state
    )

    assert first.reason == LoopReason.AWAITING_USER
    assert second.reason == LoopReason.COMPLETED
    assert second.state.final_answer == (
        "I guess your favorite country is Brazil. Hello from Brazil: Olá do Brasil"
    )
