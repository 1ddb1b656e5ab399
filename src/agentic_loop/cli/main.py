import asyncio
import json
import logging
import uuid
from typing import List, Optional

import typer
from rich.console import Console

from agentic_loop.agents.agent_plugin import AgentPlugin
from agentic_loop.agents.registry import create_default_agent_registry
from agentic_loop.config_provider import ConfigProvider
from agentic_loop.domain.loop_result import LoopReason, LoopResult
from agentic_loop.domain.messages import MessageRole
from agentic_loop.domain.state import AgentState
from agentic_loop.engine.loop import LoopDependencies, LoopEngine
from agentic_loop.engine.tool_registry import ToolRegistry
from agentic_loop.llm.decision_client import create_default_decision_client
from agentic_loop.observability.log_setup import setup_logging
from agentic_loop.observability.metrics import InMemoryMetricsCollector

app = typer.Typer()
console = Console()
logger = logging.getLogger(__name__)


@app.command()
def agents() -> None:
    """
    List the registered agents and decision providers.
    """
    for agent in create_default_agent_registry().list():
        console.print(f"- [bold]{agent.id}[/bold]: {agent.description}")
    client = create_default_decision_client(ConfigProvider().load())
    console.print(f"Providers: {', '.join(client.list_providers())}")


@app.command()
def tools(
    agent: str = typer.Option(
        "echo",
        "--agent",
        "-a",
        help="Id of the agent whose tools to describe.",
    ),
):
    """
    Print the tool schemas an agent exposes to the model.
    """
    selected = _select_agent(agent)
    tool_registry = ToolRegistry()
    selected.register_tools(tool_registry)
    schemas = [tool_registry.get(name).as_openai_tool() for name in tool_registry.list()]
    console.print_json(json.dumps(schemas))


@app.command()
def run(
    message: Optional[List[str]] = typer.Argument(
        None, help="Initial user message. Prompted for when omitted."
    ),
    agent: str = typer.Option(
        "echo",
        "--agent",
        "-a",
        help="Id of the agent to run (see `agents`).",
    ),
):
    """
    Run an agent conversation until it finishes.
    """
    selected = _select_agent(agent)

    config_provider = ConfigProvider()
    config = config_provider.load()
    setup_logging(config.log_level)
    metrics = InMemoryMetricsCollector()
    tool_registry = ToolRegistry()
    selected.register_tools(tool_registry)
    engine = LoopEngine(
        LoopDependencies(
            decision_client=create_default_decision_client(config),
            tool_registry=tool_registry,
            metrics=metrics,
        )
    )
    loop_config = config_provider.loop_config(selected.loop_overrides)

    initial = " ".join(message or []).strip()
    next_input = initial or typer.prompt(selected.initial_user_prompt or "You")
    session_id = str(uuid.uuid4())
    state: Optional[AgentState] = None

    while True:
        if state is None:
            result = asyncio.run(
                engine.run(
                    session_id=session_id,
                    config=loop_config,
                    user_input=next_input,
                    system_prompt=selected.system_prompt,
                    agent_id=selected.id,
                )
            )
        else:
            result = asyncio.run(
                engine.run(
                    session_id=session_id,
                    config=loop_config,
                    user_input=next_input,
                    state=state,
                )
            )
        state = result.state

        if result.reason == LoopReason.AWAITING_USER:
            _print_question(selected, result)
            next_input = typer.prompt("You")
            continue

        logger.info(
            "run.summary",
            extra={
                "agent_id": selected.id,
                "reason": result.reason.value,
                "steps": state.step,
                "tool_calls_used": state.tool_calls_used,
                "tool_calls": dict(metrics.counters_by_name("tool_calls_total")),
            },
        )
        console.print(f"[green]{state.final_answer or 'No final answer'}[/green]")
        console.print(
            f"[dim]reason={result.reason.value} steps={state.step} "
            f"tool_calls={state.tool_calls_used}[/dim]"
        )
        break


def _select_agent(agent_id: str) -> AgentPlugin:
    """Return the named agent or exit listing the available ones."""

    registry = create_default_agent_registry()
    selected = registry.get(agent_id)
    if selected is None:
        available = ", ".join(item.id for item in registry.list())
        console.print(f"[red]Unknown agent '{agent_id}'.[/red]")
        console.print(f"Available agents: {available}")
        raise typer.Exit(code=1)
    return selected


def _print_question(agent: AgentPlugin, result: LoopResult) -> None:
    """Print the assistant question that paused the run."""

    question = result.state.last_message(MessageRole.ASSISTANT)
    if question is not None:
        console.print(f"[bold blue]{agent.name}:[/bold blue] {question.content}")


if __name__ == "__main__":
    app()
