from agentic_loop.agents.agent_plugin import AgentPlugin
from agentic_loop.domain.loop_config import AgentLoopOverrides
from agentic_loop.engine.tool_registry import ToolRegistry


class CountryHelloAgent(AgentPlugin):
    """Guesses a favorite country and greets the user in its language."""

    id = "country-hello"
    name = "Country Hello Agent"
    description = (
        "Guesses a favorite country from one preference question, then says "
        "hello from that country in the native language."
    )
    initial_user_prompt = "What is your name?"
    system_prompt = " ".join(
        [
            "You are the Favorite Country Greeter agent.",
            "Ask up to 10 follow-up questions using action ASK_USER when confidence is low.",
            "After the user answers, guess one country and respond with this format:",
            '"I guess your favorite country is <country>. Hello from <country>: <native greeting>"',
            "Do not call tools for this workflow.",
        ]
    )
    # Room for up to ten question rounds.
    loop_overrides = AgentLoopOverrides(max_steps=24, max_messages=80)

    def register_tools(self, registry: ToolRegistry) -> None:
        return None
