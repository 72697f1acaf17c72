"""Service that runs stake/unstake cycles"""

import logging
import random
from typing import Callable, Iterator, Optional

from lendcycle.domain.config.schedule import DelayRange
from lendcycle.domain.errors import CycleCancelled
from lendcycle.domain.models.cycle import CycleOutcome, CyclePlan
from lendcycle.infrastructure.cancellation import CancellationToken
from lendcycle.infrastructure.chain.base import StakingActions
from lendcycle.infrastructure.retry import RetryExecutor

logger = logging.getLogger(__name__)


class CycleScheduler:
    """Runs a fixed number of stake, wait, unstake cycles with random pauses"""

    def __init__(
        self,
        executor: RetryExecutor,
        delay_range: DelayRange,
        cancel_token: Optional[CancellationToken] = None,
        sleep: Optional[Callable[[float], None]] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize cycle scheduler

        Args:
            executor: Retry executor every action goes through
            delay_range: Bounds for the pause between actions and between cycles
            cancel_token: Token checked before every action and after every pause
                (defaults to the executor's token)
            sleep: Wait function in seconds (defaults to the token's interruptible sleep)
            rng: Random source for delay sampling
        """
        self.executor = executor
        self.delay_range = delay_range
        self.cancel_token = cancel_token or executor.cancel_token
        self._sleep = sleep or self.cancel_token.sleep
        self._rng = rng or random.Random()

    def _pause(self, message: str) -> None:
        self.cancel_token.raise_if_stopped()
        delay_ms = self.delay_range.sample_ms(self._rng)
        logger.info(message.format(seconds=delay_ms / 1000))
        self._sleep(delay_ms / 1000)
        self.cancel_token.raise_if_stopped()

    def _run_cycle(self, cycle: int, actions: StakingActions) -> CycleOutcome:
        stage = "stake"
        try:
            self.cancel_token.raise_if_stopped()
            stake_result = self.executor.execute(
                lambda: actions.stake(cycle), description=f"[Cycle {cycle}] Stake"
            )
            self._pause("Waiting {seconds:g}s before unstaking...")

            stage = "unstake"
            self.cancel_token.raise_if_stopped()
            unstake_result = self.executor.execute(
                lambda: actions.unstake(cycle), description=f"[Cycle {cycle}] Unstake"
            )
        except CycleCancelled:
            raise
        except Exception as e:
            logger.error(f"Cycle {cycle} failed during {stage}: {e}")
            return CycleOutcome.failed(cycle, stage, e)

        logger.info(f"=== Cycle {cycle} completed ===")
        return CycleOutcome.success(cycle, stake=stake_result, unstake=unstake_result)

    def run(self, plan: CyclePlan, actions: StakingActions) -> Iterator[CycleOutcome]:
        """Run every cycle of the plan, yielding one outcome per cycle

        A failed cycle is recorded and the next one still runs. A stop request
        ends the sequence at the next pause or before the next action.

        Args:
            plan: Number of cycles to run
            actions: Stake/unstake collaborator

        Yields:
            CycleOutcome per completed cycle, in cycle order
        """
        if plan.is_empty:
            logger.warning(f"Cycle count is {plan.total_cycles}, nothing to run")
            return

        try:
            for cycle in range(1, plan.total_cycles + 1):
                logger.info(f"=== Cycle {cycle}/{plan.total_cycles} ===")
                yield self._run_cycle(cycle, actions)

                if cycle < plan.total_cycles:
                    self._pause("Waiting {seconds:g}s between cycles...")
        except CycleCancelled:
            logger.warning("Stop requested, no further cycles will run")
