"""In-memory registry of agent plugins."""

from typing import Dict, List, Optional

from agentic_loop.agents.agent_plugin import AgentPlugin
from agentic_loop.domain.exceptions import ConfigurationError


class AgentRegistry:
    """
    Central registry for agent plugins keyed by id.
    """

    def __init__(self) -> None:
        self._agents: Dict[str, AgentPlugin] = {}

    def register(self, agent: AgentPlugin) -> None:
        """
        Registers an agent plugin.

        Raises:
            ConfigurationError: If an agent with the same id exists.
        """
        if agent.id in self._agents:
            raise ConfigurationError(f"Agent already registered: {agent.id}")
        self._agents[agent.id] = agent

    def get(self, agent_id: str) -> Optional[AgentPlugin]:
        return self._agents.get(agent_id)

    def list(self) -> List[AgentPlugin]:
        """Return agents sorted by id."""

        return [self._agents[key] for key in sorted(self._agents)]


def create_default_agent_registry() -> AgentRegistry:
    """Build a registry holding every built-in agent."""

    from agentic_loop.agents.builtins import (
        CountryHelloAgent,
        EchoAgent,
        FilesAgent,
        InterviewerAgent,
    )

    registry = AgentRegistry()
    registry.register(CountryHelloAgent())
    registry.register(EchoAgent())
    registry.register(FilesAgent())
    registry.register(InterviewerAgent())
    return registry
