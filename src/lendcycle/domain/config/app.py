"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from lendcycle.domain.config.contracts import ContractsConfig
from lendcycle.domain.config.gas import GasConfig
from lendcycle.domain.config.network import NetworkConfig
from lendcycle.domain.config.retry import RetryPolicy
from lendcycle.domain.config.schedule import DelayRange
from lendcycle.domain.config.stake import StakeConfig


class AppConfig(BaseModel):
    """Main application configuration.

    This is the root configuration model that aggregates all configuration sections.
    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        network: RPC endpoint configuration
        contracts: Token and lending pool addresses
        gas: Transaction fee configuration
        stake: Deposit sizing configuration
        retry: Retry policy for stake/unstake actions
        delays: Randomized wait bounds between actions and cycles
    """

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    contracts: ContractsConfig = Field(default_factory=ContractsConfig)
    gas: GasConfig = Field(default_factory=GasConfig)
    stake: StakeConfig = Field(default_factory=StakeConfig)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    delays: DelayRange = Field(default_factory=DelayRange)

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "network": {
                    "rpc_url": "https://rpc.soniclabs.com",
                    "explorer_url": "https://sonicscan.org/tx/",
                },
                "contracts": {
                    "token_address": "0x039e2fb66102314ce7b64ce5ce3e5183bc94ad38",
                    "lending_pool_address": "0x5362dbb1e601abf3a4c14c22ffeda64042e5eaa3",
                },
                "gas": {"gas_limit": 350000, "fee_bump_percent": 130},
                "stake": {"min_amount": 0.01, "max_amount": 0.05},
                "retry": {"max_attempts": 3, "base_delay_ms": 1000},
                "delays": {"min_ms": 60000, "max_ms": 180000},
            }
        },
    )
