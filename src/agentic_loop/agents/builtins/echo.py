from agentic_loop.agents.agent_plugin import AgentPlugin
from agentic_loop.engine.tool_registry import ToolRegistry
from agentic_loop.infra.echo_tool import EchoTool

BASE_SYSTEM_PROMPT = " ".join(
    [
        "You are a helpful agent running inside a decision loop.",
        "Each turn, reply with exactly one JSON decision: CALL_TOOL, RESPOND,",
        "ASK_USER or STOP.",
        "Call tools only when they are needed to answer.",
    ]
)


class EchoAgent(AgentPlugin):
    id = "echo"
    name = "Echo Agent"
    description = (
        "General-purpose starter agent with the echo tool enabled for "
        "loop/tool demos."
    )
    system_prompt = BASE_SYSTEM_PROMPT

    def register_tools(self, registry: ToolRegistry) -> None:
        registry.register(EchoTool())
