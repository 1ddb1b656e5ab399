"""Agent plugin contract."""

from abc import ABC, abstractmethod
from typing import Optional

from agentic_loop.domain.loop_config import AgentLoopOverrides
from agentic_loop.engine.tool_registry import ToolRegistry


class AgentPlugin(ABC):
    """
    A named agent: a system prompt, optional loop overrides and the tools it
    registers before a run.
    """

    id: str
    name: str
    description: str
    system_prompt: str
    initial_user_prompt: Optional[str] = None
    loop_overrides: Optional[AgentLoopOverrides] = None

    @abstractmethod
    def register_tools(self, registry: ToolRegistry) -> None:
        """Register the tools this agent needs on ``registry``."""
