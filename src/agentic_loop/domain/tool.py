from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel, Field, ValidationError

from agentic_loop.domain.exceptions import SchemaError
from agentic_loop.domain.policy import RetryPolicy
from agentic_loop.domain.side_effect_class import SideEffectClass


@dataclass(frozen=True)
class ToolContext:
    """Run context passed to every tool execution."""

    session_id: str = "unknown"
    step: int = 0


class ToolCallResult(BaseModel):
    """Outcome of one tool call. Failures are values, never raised."""

    tool_call_id: str
    tool_name: str
    ok: bool
    content: Optional[str] = Field(default=None, description="Output on success.")
    error: Optional[str] = Field(default=None, description="Error text on failure.")
    attempts: int = Field(ge=0, description="Execution attempts actually made.")

    @classmethod
    def success(
        cls, tool_call_id: str, tool_name: str, content: str, attempts: int
    ) -> "ToolCallResult":
        """Build a successful tool result."""

        return cls(
            tool_call_id=tool_call_id,
            tool_name=tool_name,
            ok=True,
            content=content,
            attempts=attempts,
        )

    @classmethod
    def failure(
        cls, tool_call_id: str, tool_name: str, error: str, attempts: int
    ) -> "ToolCallResult":
        """Build a failed tool result."""

        return cls(
            tool_call_id=tool_call_id,
            tool_name=tool_name,
            ok=False,
            error=error,
            attempts=attempts,
        )


@dataclass
class BaseTool(ABC):
    """
    Abstract base class for all tools callable by the agent loop.
    """

    name: str
    description: str
    args_model: Type[BaseModel]
    side_effect_class: SideEffectClass = SideEffectClass.NON_IDEMPOTENT
    retry_policy: Optional[RetryPolicy] = None
    retry_predicate: Optional[Callable[[BaseException], bool]] = field(
        default=None, repr=False
    )

    def __post_init__(self) -> None:
        self.side_effect_class = SideEffectClass.normalize(self.side_effect_class)

    @property
    def idempotent(self) -> bool:
        """Return True when the tool is safe to retry."""

        return self.side_effect_class.retry_safe

    def validate_args(self, payload: Any) -> BaseModel:
        """
        Validates a raw argument payload against the tool schema.

        Args:
            payload: Opaque arguments emitted by the oracle.

        Returns:
            The validated argument model.

        Raises:
            SchemaError: If the payload does not match the schema.
        """
        try:
            return self.args_model.model_validate(payload)
        except ValidationError as exc:
            raise SchemaError(f"Invalid arguments for {self.name}: {exc}") from exc

    @abstractmethod
    async def execute(self, args: BaseModel, context: ToolContext) -> str:
        """
        Executes the tool with validated arguments.

        Args:
            args: Validated arguments for the tool execution.
            context: Session and step of the calling run.

        Returns:
            The text output of the tool.
        """
        raise NotImplementedError

    def as_openai_tool(self) -> Dict[str, Any]:
        """
        Returns an OpenAI-compatible tool schema definition.

        Returns:
            A dictionary describing the tool for LLM binding.
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.args_model.model_json_schema(),
            },
        }
