from agentic_loop.agents.agent_plugin import AgentPlugin
from agentic_loop.agents.registry import AgentRegistry, create_default_agent_registry

__all__ = ["AgentPlugin", "AgentRegistry", "create_default_agent_registry"]
