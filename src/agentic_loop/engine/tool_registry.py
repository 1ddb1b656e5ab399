"""Tool registration and retry-aware execution for agent loops."""

import logging
from typing import Dict, List, Optional

from agentic_loop.domain.decision import ToolCallRequest
from agentic_loop.domain.error_sanitizer import describe_error
from agentic_loop.domain.exceptions import ConfigurationError, SchemaError
from agentic_loop.domain.policy import NO_RETRY, RetryPolicy
from agentic_loop.domain.tool import BaseTool, ToolCallResult, ToolContext
from agentic_loop.engine.retry import RetryPredicate, SleepFn, retry_async
from agentic_loop.llm.llm_retry_policy import is_retryable_error

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Central registry that validates and executes tool calls.

    Holds no run-specific state, so one registry may be shared by runs for
    different sessions.

    Args:
        sleep: Optional async sleep override used between retries.
    """

    def __init__(self, sleep: Optional[SleepFn] = None) -> None:
        self._registry: Dict[str, BaseTool] = {}
        self._sleep = sleep

    def register(self, tool: BaseTool) -> None:
        """
        Registers a tool with the registry.

        Args:
            tool: The tool instance to register.

        Raises:
            ConfigurationError: If a tool with the same name is registered.
        """
        if tool.name in self._registry:
            raise ConfigurationError(f"Tool already registered: {tool.name}")
        self._registry[tool.name] = tool

    def get(self, name: str) -> Optional[BaseTool]:
        """
        Retrieves a tool by name.

        Args:
            name: The tool name to fetch.

        Returns:
            The matching tool instance or None.
        """
        return self._registry.get(name)

    def list(self) -> List[str]:
        """Returns the registered tool names in sorted order."""
        return sorted(self._registry)

    async def execute(
        self, request: ToolCallRequest, context: Optional[ToolContext] = None
    ) -> ToolCallResult:
        """
        Executes one tool call and reports the outcome as a value.

        Unknown tools and invalid arguments are failures with a single attempt
        and no execution. Only idempotent tools are retried.

        Args:
            request: Tool call requested by the oracle.
            context: Session and step of the calling run.

        Returns:
            ToolCallResult describing success or failure.
        """
        context = context or ToolContext()
        tool = self._registry.get(request.tool_name)
        if tool is None:
            return ToolCallResult.failure(
                tool_call_id=request.id,
                tool_name=request.tool_name,
                error=f"Tool not found: {request.tool_name}",
                attempts=1,
            )

        try:
            args = tool.validate_args(request.args)
        except SchemaError as exc:
            return ToolCallResult.failure(
                tool_call_id=request.id,
                tool_name=request.tool_name,
                error=str(exc),
                attempts=1,
            )
        except Exception as exc:
            return ToolCallResult.failure(
                tool_call_id=request.id,
                tool_name=request.tool_name,
                error=f"Invalid arguments for {tool.name}: {describe_error(exc)}",
                attempts=1,
            )

        attempts = 0

        async def run_once() -> str:
            nonlocal attempts
            attempts += 1
            return await tool.execute(args, context)

        try:
            output = await retry_async(
                run_once,
                policy=self._resolve_policy(tool),
                should_retry=self._resolve_predicate(tool),
                sleep=self._sleep,
            )
        except Exception as exc:
            logger.warning(
                "tool.failed",
                extra={
                    "tool_name": tool.name,
                    "tool_call_id": request.id,
                    "session_id": context.session_id,
                    "step": context.step,
                    "attempts": attempts,
                    "error_class": exc.__class__.__name__,
                },
            )
            return ToolCallResult.failure(
                tool_call_id=request.id,
                tool_name=request.tool_name,
                error=describe_error(exc),
                attempts=attempts,
            )

        if not isinstance(output, str):
            logger.warning(
                "tool.invalid_output",
                extra={
                    "tool_name": tool.name,
                    "tool_call_id": request.id,
                    "session_id": context.session_id,
                    "step": context.step,
                    "output_type": type(output).__name__,
                },
            )
            return ToolCallResult.failure(
                tool_call_id=request.id,
                tool_name=request.tool_name,
                error="Tool returned non-text output",
                attempts=attempts,
            )

        return ToolCallResult.success(
            tool_call_id=request.id,
            tool_name=request.tool_name,
            content=output,
            attempts=attempts,
        )

    @staticmethod
    def _resolve_policy(tool: BaseTool) -> RetryPolicy:
        """Return the retry policy, forcing one attempt for unsafe tools."""

        if not tool.idempotent:
            return NO_RETRY
        return tool.retry_policy or NO_RETRY

    @staticmethod
    def _resolve_predicate(tool: BaseTool) -> RetryPredicate:
        """Return the retryability predicate for a tool."""

        predicate = tool.retry_predicate or is_retryable_error

        def should_retry(error: BaseException) -> bool:
            return tool.idempotent and predicate(error)

        return should_retry
