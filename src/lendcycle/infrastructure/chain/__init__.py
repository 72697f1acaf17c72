"""Staking collaborators"""

from lendcycle.infrastructure.chain.base import StakingActions
from lendcycle.infrastructure.chain.lending_pool import LendingPoolClient
from lendcycle.infrastructure.chain.mock import MockStakingClient

__all__ = ["StakingActions", "LendingPoolClient", "MockStakingClient"]
