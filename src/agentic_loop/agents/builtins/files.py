from pathlib import Path
from typing import Optional

from agentic_loop.agents.agent_plugin import AgentPlugin
from agentic_loop.agents.builtins.echo import BASE_SYSTEM_PROMPT
from agentic_loop.engine.tool_registry import ToolRegistry
from agentic_loop.infra.file_read_tool import FileReadTool
from agentic_loop.infra.file_write_tool import FileWriteTool


class FilesAgent(AgentPlugin):
    """Reads and writes files below a working directory."""

    id = "files"
    name = "Files Agent"
    description = "Reads and writes files below the current working directory."
    system_prompt = (
        BASE_SYSTEM_PROMPT
        + " Use read_file and write_file with paths relative to the working directory."
    )

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = root

    def register_tools(self, registry: ToolRegistry) -> None:
        root = self.root or Path.cwd()
        registry.register(FileReadTool(root=root))
        registry.register(FileWriteTool(root=root))
