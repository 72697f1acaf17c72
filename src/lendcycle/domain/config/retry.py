"""Retry policy model."""

from pydantic import BaseModel, ConfigDict, Field


class RetryPolicy(BaseModel):
    """Configuration for retry logic.

    The delay after failed attempt ``k`` (1-indexed) is ``base_delay_ms * 2**k``.

    Attributes:
        max_attempts: Maximum number of attempts, including the first one
        base_delay_ms: Base backoff delay in milliseconds
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(3, ge=1, le=10)
    base_delay_ms: int = Field(1000, gt=0)

    def delay_for_attempt(self, attempt: int) -> float:
        """Backoff in seconds after the given failed attempt."""
        return self.base_delay_ms * 2**attempt / 1000
