"""Stake amount configuration model."""

from pydantic import BaseModel, Field, model_validator


class StakeConfig(BaseModel):
    """Configuration for deposit sizing.

    Attributes:
        min_amount: Smallest deposit, in token units
        max_amount: Largest deposit, in token units
        decimals: Decimal places kept when randomizing the amount
        approval_threshold: Re-approve when allowance drops below this, in token units
    """

    min_amount: float = Field(0.01, gt=0)
    max_amount: float = Field(0.05, gt=0)
    decimals: int = Field(4, ge=0, le=18)
    approval_threshold: float = Field(1.0, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "StakeConfig":
        if self.max_amount < self.min_amount:
            raise ValueError("max_amount must be >= min_amount")
        return self
