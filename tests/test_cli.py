import json
import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from agentic_loop.cli.main import app
from agentic_loop.config import Config

runner = CliRunner()


@pytest.fixture(autouse=True)
def _offline_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in ("LLM_PROVIDER", "LLM_MODEL", "LLM_FALLBACK_MODELS", "LOOP_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "SILENT")
    monkeypatch.chdir(tmp_path)
    yield
    logging.getLogger("agentic_loop").disabled = False


def test_agents_lists_builtin_agents() -> None:
    result = runner.invoke(app, ["agents"])
    assert result.exit_code == 0
    for agent_id in ("country-hello", "echo", "files", "interviewer"):
        assert agent_id in result.stdout
    assert "Providers: rule, openai, anthropic" in result.stdout


def test_tools_prints_agent_tool_schemas() -> None:
    result = runner.invoke(app, ["tools", "--agent", "files"])
    assert result.exit_code == 0
    schemas = json.loads(result.stdout)
    assert [schema["function"]["name"] for schema in schemas] == [
        "read_file",
        "write_file",
    ]
    assert schemas[0]["type"] == "function"


def test_tools_for_agent_without_tools_prints_empty_list() -> None:
    result = runner.invoke(app, ["tools", "-a", "country-hello"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == []


def test_tools_unknown_agent_exits_with_error() -> None:
    result = runner.invoke(app, ["tools", "-a", "nope"])
    assert result.exit_code == 1
    assert "Unknown agent 'nope'" in result.stdout


def test_run_unknown_agent_exits_with_error() -> None:
    result = runner.invoke(app, ["run", "hi", "--agent", "nope"])
    assert result.exit_code == 1
    assert "Unknown agent 'nope'" in result.stdout
    assert "country-hello, echo, files, interviewer" in result.stdout


def test_run_echo_agent_prints_final_answer() -> None:
    result = runner.invoke(app, ["run", "echo:", "hi"])
    assert result.exit_code == 0
    assert "Tool completed successfully. Result: hi" in result.stdout
    assert "reason=completed" in result.stdout
    assert "tool_calls=1" in result.stdout


def test_run_prompts_and_resumes_after_question() -> None:
    result = runner.invoke(app, ["run", "-a", "interviewer"], input="help\nbeach\n")
    assert result.exit_code == 0
    assert "What kind of vacation spot" in result.stdout
    assert "Thanks, that helps." in result.stdout
    assert "reason=completed" in result.stdout


@patch("agentic_loop.cli.main.ConfigProvider")
def test_run_reports_missing_final_answer(mock_config_provider) -> None:
    config = Config(log_level="SILENT", loop_max_steps=1)
    mock_config_provider.return_value.load.return_value = config
    mock_config_provider.return_value.loop_config.return_value = (
        config.to_loop_config()
    )
    result = runner.invoke(app, ["run", "echo:", "loop"])
    assert result.exit_code == 0
    assert "No final answer" in result.stdout
    assert "reason=max_steps" in result.stdout
