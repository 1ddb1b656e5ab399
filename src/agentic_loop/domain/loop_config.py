from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from agentic_loop.domain.model_target import ModelTarget


class AgentLoopOverrides(BaseModel):
    """Per-agent overrides for the numeric loop ceilings."""

    max_steps: Optional[int] = Field(default=None, gt=0)
    max_tool_calls: Optional[int] = Field(default=None, gt=0)
    timeout_ms: Optional[int] = Field(default=None, gt=0)
    max_messages: Optional[int] = Field(default=None, gt=0)
    max_repeated_decision_signatures: Optional[int] = Field(default=None, gt=0)

    model_config = ConfigDict(frozen=True)


class LoopConfig(BaseModel):
    """Read-only ceilings and oracle targets for one run."""

    max_steps: int = Field(ge=0, description="Maximum decision turns.")
    max_tool_calls: int = Field(ge=0, description="Maximum tool invocations.")
    timeout_ms: int = Field(ge=0, description="Wall-clock budget per invocation.")
    max_messages: int = Field(ge=0, description="Context window size.")
    max_repeated_decision_signatures: int = Field(
        ge=0, description="Identical tool decisions tolerated before stopping."
    )
    primary_model: ModelTarget
    fallback_models: List[ModelTarget] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def with_overrides(self, overrides: Optional[AgentLoopOverrides]) -> "LoopConfig":
        """Return a copy with any set override applied.

        Args:
            overrides: Optional per-agent overrides.

        Returns:
            A new LoopConfig, or this one when nothing is overridden.
        """

        if overrides is None:
            return self
        update = overrides.model_dump(exclude_none=True)
        if not update:
            return self
        return self.model_copy(update=update)
