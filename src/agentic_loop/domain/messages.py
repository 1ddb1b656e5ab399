from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Roles a conversation turn can carry."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class AgentMessage(BaseModel):
    """One turn record in the conversation transcript."""

    role: MessageRole = Field(description="Author role of the turn.")
    content: str = Field(description="Text content of the turn.")
    name: Optional[str] = Field(
        default=None, description="Tool name for tool-role messages."
    )
    tool_call_id: Optional[str] = Field(
        default=None, description="Correlation id of the originating tool call."
    )

    @classmethod
    def system(cls, content: str) -> "AgentMessage":
        """Build a system message."""

        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "AgentMessage":
        """Build a user message."""

        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "AgentMessage":
        """Build an assistant message."""

        return cls(role=MessageRole.ASSISTANT, content=content)

    @classmethod
    def tool(cls, content: str, name: str, tool_call_id: str) -> "AgentMessage":
        """Build a tool result message."""

        return cls(
            role=MessageRole.TOOL, content=content, name=name, tool_call_id=tool_call_id
        )
