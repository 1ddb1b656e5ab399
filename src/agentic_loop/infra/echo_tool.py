"""Echo tool used to exercise the tool-calling flow."""

from dataclasses import dataclass, field
from typing import Optional, Type

from pydantic import BaseModel, Field

from agentic_loop.domain.policy import RetryPolicy
from agentic_loop.domain.side_effect_class import SideEffectClass
from agentic_loop.domain.tool import BaseTool, ToolContext


class EchoArgs(BaseModel):
    text: str = Field(min_length=1, description="Text to return unchanged.")


@dataclass
class EchoTool(BaseTool):
    """
    Returns the provided text input unchanged.
    """

    name: str = "echo"
    description: str = "Returns the provided text input unchanged."
    args_model: Type[BaseModel] = EchoArgs
    side_effect_class: SideEffectClass = SideEffectClass.IDEMPOTENT
    retry_policy: Optional[RetryPolicy] = field(
        default_factory=lambda: RetryPolicy(
            attempts=2, base_delay_ms=50, max_delay_ms=200
        )
    )

    async def execute(self, args: EchoArgs, context: ToolContext) -> str:
        return args.text
