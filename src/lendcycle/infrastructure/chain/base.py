"""Base staking actions interface"""

from abc import ABC, abstractmethod

from lendcycle.domain.models.transaction import StakeResult, UnstakeResult


class StakingActions(ABC):
    """Abstract base class for stake/unstake collaborators"""

    @abstractmethod
    def stake(self, cycle: int) -> StakeResult:
        """Deposit tokens into the lending pool

        Args:
            cycle: Cycle index, used for logging only

        Returns:
            StakeResult for the mined deposit

        Raises:
            TransientActionFailure: If the deposit could not be completed
        """
        pass

    @abstractmethod
    def unstake(self, cycle: int) -> UnstakeResult:
        """Withdraw the deposited tokens from the lending pool

        Args:
            cycle: Cycle index, used for logging only

        Returns:
            UnstakeResult for the mined withdrawal

        Raises:
            TransientActionFailure: If the withdrawal could not be completed
        """
        pass
