"""Gas configuration model."""

from pydantic import BaseModel, Field


class GasConfig(BaseModel):
    """Configuration for transaction fees.

    Attributes:
        gas_limit: Gas limit for every transaction
        fee_bump_percent: Percentage applied to the network fee suggestion
        default_max_fee_gwei: Fallback max fee when fee lookup fails
        default_priority_fee_gwei: Fallback priority fee when fee lookup fails
        min_native_balance: Minimum native balance (in ether units) required to stake
    """

    gas_limit: int = Field(350_000, gt=21_000)
    fee_bump_percent: int = Field(130, ge=100, le=500)
    default_max_fee_gwei: float = Field(25.0, gt=0)
    default_priority_fee_gwei: float = Field(3.0, ge=0)
    min_native_balance: float = Field(0.01, ge=0)
