"""Contract addresses configuration model."""

from pydantic import BaseModel, ConfigDict, field_validator
from web3 import Web3


class ContractsConfig(BaseModel):
    """Addresses of the staked token and the lending pool.

    Attributes:
        token_address: ERC-20 token that is deposited
        lending_pool_address: Lending pool receiving deposits
    """

    model_config = ConfigDict(validate_default=True)

    token_address: str = "0x039e2fb66102314ce7b64ce5ce3e5183bc94ad38"
    lending_pool_address: str = "0x5362dbb1e601abf3a4c14c22ffeda64042e5eaa3"

    @field_validator("token_address", "lending_pool_address")
    @classmethod
    def _checksum(cls, value: str) -> str:
        if not Web3.is_address(value):
            raise ValueError(f"not a valid address: {value}")
        return Web3.to_checksum_address(value)
