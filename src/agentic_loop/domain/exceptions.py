class AgentLoopError(Exception):
    """Base exception for the agent loop system.

    Args:
        message: Human-readable error message.
        code: Stable machine-readable error code.
        retryable: Whether a retry may succeed for this failure.
    """

    def __init__(
        self, message: str, code: str = "AGENT_LOOP_ERROR", retryable: bool = False
    ) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable


class ConfigurationError(AgentLoopError):
    """Missing input or invalid registration. Never retried."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIG_ERROR", retryable=False)


class ProviderError(AgentLoopError):
    """Decision provider failure."""

    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__(message, code="PROVIDER_ERROR", retryable=retryable)


class RateLimitError(ProviderError):
    """Provider returned 429 Rate Limit Exceeded."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=True)


class ApiKeyError(ProviderError):
    """Provider credentials are missing or rejected."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class SchemaError(AgentLoopError):
    """Payload could not be parsed into the required schema."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="VALIDATION_ERROR", retryable=False)


class ToolExecutionError(AgentLoopError):
    """Tool execution failure."""

    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__(message, code="TOOL_EXECUTION_ERROR", retryable=retryable)
