"""Cycle models - plan and per-cycle outcome"""

from dataclasses import dataclass
from typing import Optional

from lendcycle.domain.models.transaction import StakeResult, UnstakeResult


@dataclass(frozen=True)
class CyclePlan:
    """How many stake/unstake cycles to run.

    A non-positive count is a valid, empty plan.
    """

    total_cycles: int

    @property
    def is_empty(self) -> bool:
        return self.total_cycles <= 0


@dataclass(frozen=True)
class CycleOutcome:
    """Result of one stake/unstake cycle"""

    cycle: int
    reason: Optional[str] = None  # Failure message, None on success
    stage: Optional[str] = None  # "stake" or "unstake" when failed
    error: Optional[BaseException] = None
    stake: Optional[StakeResult] = None
    unstake: Optional[UnstakeResult] = None

    @classmethod
    def success(
        cls, cycle: int, stake: Optional[StakeResult] = None, unstake: Optional[UnstakeResult] = None
    ) -> "CycleOutcome":
        return cls(cycle=cycle, stake=stake, unstake=unstake)

    @classmethod
    def failed(cls, cycle: int, stage: str, error: BaseException) -> "CycleOutcome":
        return cls(cycle=cycle, reason=str(error) or type(error).__name__, stage=stage, error=error)

    @property
    def is_success(self) -> bool:
        """Check if both actions of the cycle succeeded"""
        return self.reason is None
