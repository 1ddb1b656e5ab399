from pydantic import BaseModel, ConfigDict, Field


class RetryPolicy(BaseModel):
    """Bounded retry with exponential backoff.

    ``attempts`` includes the initial call, so ``attempts=1`` means no retry.
    """

    attempts: int = Field(default=1, ge=1, description="Maximum attempts.")
    base_delay_ms: int = Field(default=0, ge=0, description="Initial backoff delay.")
    max_delay_ms: int = Field(default=0, ge=0, description="Backoff delay ceiling.")

    model_config = ConfigDict(frozen=True)


NO_RETRY = RetryPolicy()
