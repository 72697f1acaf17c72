"""Mock staking client for dry runs and testing"""

import time
from typing import Any, Dict, List

from lendcycle.domain.errors import TransactionReverted
from lendcycle.domain.models.transaction import StakeResult, UnstakeResult
from lendcycle.infrastructure.chain.base import StakingActions


class MockStakingClient(StakingActions):
    """Staking client that records calls instead of sending transactions"""

    def __init__(self, config: Dict[str, Any] = None):
        """Initialize mock client

        Args:
            config: Optional configuration with:
                - delay: Simulated confirmation delay in seconds (default: 0.0)
                - amount_wei: Amount reported for every stake (default: 10**16)
                - fail_stake: Dict mapping cycle index to number of failures
                  before success (-1 = always fail)
                - fail_unstake: Same as fail_stake, for unstake
        """
        if config is None:
            config = {}
        self._validate_config(config)
        self.delay = config.get("delay", 0.0)
        self.amount_wei = config.get("amount_wei", 10**16)
        self._failures = {
            "stake": dict(config.get("fail_stake", {})),
            "unstake": dict(config.get("fail_unstake", {})),
        }
        self.calls: List[tuple] = []
        self._block = 0

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate mock client configuration"""
        if "delay" in config and not isinstance(config["delay"], (int, float)):
            raise ValueError("delay must be a number")
        if "delay" in config and config["delay"] < 0:
            raise ValueError("delay must be non-negative")

    def _maybe_fail(self, action: str, cycle: int) -> None:
        remaining = self._failures[action].get(cycle, 0)
        if remaining == 0:
            return
        if remaining > 0:
            self._failures[action][cycle] = remaining - 1
        raise TransactionReverted(f"Simulated {action} failure in cycle {cycle}")

    def _mine(self) -> tuple:
        time.sleep(self.delay)
        self._block += 1
        return f"0x{self._block:064x}", self._block

    def stake(self, cycle: int) -> StakeResult:
        self.calls.append(("stake", cycle))
        self._maybe_fail("stake", cycle)
        tx_hash, block = self._mine()
        return StakeResult(tx_hash=tx_hash, block_number=block, amount_wei=self.amount_wei)

    def unstake(self, cycle: int) -> UnstakeResult:
        self.calls.append(("unstake", cycle))
        self._maybe_fail("unstake", cycle)
        tx_hash, block = self._mine()
        return UnstakeResult(tx_hash=tx_hash, block_number=block)
