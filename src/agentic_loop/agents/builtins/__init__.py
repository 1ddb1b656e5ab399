from agentic_loop.agents.builtins.country_hello import CountryHelloAgent
from agentic_loop.agents.builtins.echo import EchoAgent
from agentic_loop.agents.builtins.files import FilesAgent
from agentic_loop.agents.builtins.interviewer import InterviewerAgent

__all__ = ["CountryHelloAgent", "EchoAgent", "FilesAgent", "InterviewerAgent"]
