"""Scheduling delay model."""

import random
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DelayRange(BaseModel):
    """Bounds for randomized waits between actions and cycles.

    Attributes:
        min_ms: Lower bound in milliseconds (inclusive)
        max_ms: Upper bound in milliseconds (inclusive)
    """

    model_config = ConfigDict(frozen=True)

    min_ms: int = Field(60_000, ge=0)
    max_ms: int = Field(180_000, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "DelayRange":
        if self.max_ms < self.min_ms:
            raise ValueError(f"max_ms ({self.max_ms}) must be >= min_ms ({self.min_ms})")
        return self

    def sample_ms(self, rng: Optional[random.Random] = None) -> int:
        """Draw a uniformly distributed delay in milliseconds."""
        return (rng or random).randint(self.min_ms, self.max_ms)
