from agentic_loop.agents.agent_plugin import AgentPlugin
from agentic_loop.engine.tool_registry import ToolRegistry


class InterviewerAgent(AgentPlugin):
    """Asks one follow-up question before answering."""

    id = "interviewer"
    name = "Interviewer Agent"
    description = (
        "Asks follow-up questions before giving a final response "
        "(used to demo ASK_USER/awaiting_user flow)."
    )
    system_prompt = " ".join(
        [
            "You are an interactive interviewer.",
            "If the user request is vague, ask exactly one concise follow-up question using action ASK_USER.",
            "After the user answers, provide a short response and stop.",
        ]
    )

    def register_tools(self, registry: ToolRegistry) -> None:
        return None
