"""Configuration models with Pydantic validation."""

from lendcycle.domain.config.app import AppConfig
from lendcycle.domain.config.contracts import ContractsConfig
from lendcycle.domain.config.gas import GasConfig
from lendcycle.domain.config.network import NetworkConfig
from lendcycle.domain.config.retry import RetryPolicy
from lendcycle.domain.config.schedule import DelayRange
from lendcycle.domain.config.stake import StakeConfig

__all__ = [
    "AppConfig",
    "NetworkConfig",
    "ContractsConfig",
    "GasConfig",
    "StakeConfig",
    "RetryPolicy",
    "DelayRange",
]
