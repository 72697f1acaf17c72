"""Tests for CycleScheduler"""

from __future__ import annotations

import random

import pytest

from lendcycle.application.cycle_scheduler import CycleScheduler
from lendcycle.domain.config.retry import RetryPolicy
from lendcycle.domain.config.schedule import DelayRange
from lendcycle.domain.errors import InsufficientBalance
from lendcycle.domain.models.cycle import CyclePlan
from lendcycle.infrastructure.cancellation import CancellationToken
from lendcycle.infrastructure.chain.mock import MockStakingClient
from lendcycle.infrastructure.retry import RetryExecutor


class RecordingSleep:
    """Records waits and optionally requests a stop on the n-th one"""

    def __init__(self, token: CancellationToken, stop_on_call: int | None = None):
        self.token = token
        self.stop_on_call = stop_on_call
        self.calls = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.stop_on_call is not None and len(self.calls) == self.stop_on_call:
            self.token.request_stop()


def _scheduler(
    delay_range: DelayRange = DelayRange(min_ms=1500, max_ms=1500),
    max_attempts: int = 2,
    stop_on_call: int | None = None,
):
    token = CancellationToken()
    sleep = RecordingSleep(token, stop_on_call)
    executor = RetryExecutor(
        RetryPolicy(max_attempts=max_attempts, base_delay_ms=100),
        cancel_token=token,
        notify=lambda _: None,
        sleep=sleep,
    )
    scheduler = CycleScheduler(executor, delay_range, sleep=sleep, rng=random.Random(7))
    return scheduler, sleep


class TestCycleScheduler:
    """Tests for cycle sequencing"""

    def test_all_cycles_succeed(self):
        """Test every cycle stakes then unstakes in order"""
        scheduler, sleep = _scheduler()
        client = MockStakingClient()

        outcomes = list(scheduler.run(CyclePlan(total_cycles=2), client))

        assert [o.is_success for o in outcomes] == [True, True]
        assert [o.cycle for o in outcomes] == [1, 2]
        assert client.calls == [("stake", 1), ("unstake", 1), ("stake", 2), ("unstake", 2)]
        # stake-to-unstake, between cycles, stake-to-unstake; no wait after the last cycle
        assert sleep.calls == [1.5, 1.5, 1.5]

    def test_success_outcome_carries_results(self):
        """Test successful outcomes expose the action results"""
        scheduler, _ = _scheduler()

        outcome = next(scheduler.run(CyclePlan(total_cycles=1), MockStakingClient({"amount_wei": 5})))

        assert outcome.stake.amount_wei == 5
        assert outcome.unstake.block_number == outcome.stake.block_number + 1
        assert outcome.reason is None

    def test_failed_cycle_does_not_abort_others(self):
        """Test cycle 2 failing leaves cycles 1 and 3 untouched"""
        scheduler, _ = _scheduler()
        client = MockStakingClient({"fail_stake": {2: -1}})

        outcomes = list(scheduler.run(CyclePlan(total_cycles=3), client))

        assert [o.is_success for o in outcomes] == [True, False, True]
        assert outcomes[1].stage == "stake"
        assert "Simulated stake failure in cycle 2" in outcomes[1].reason
        # Stake retried max_attempts times, unstake skipped for the failed cycle
        assert client.calls.count(("stake", 2)) == 2
        assert ("unstake", 2) not in client.calls

    def test_unstake_failure_recorded(self):
        """Test a failing unstake is reported with its stage"""
        scheduler, _ = _scheduler()
        client = MockStakingClient({"fail_unstake": {1: -1}})

        outcomes = list(scheduler.run(CyclePlan(total_cycles=1), client))

        assert len(outcomes) == 1
        assert outcomes[0].stage == "unstake"
        assert outcomes[0].stake is None

    def test_transient_failure_recovers_within_cycle(self):
        """Test a stake that fails once succeeds on retry"""
        scheduler, sleep = _scheduler(max_attempts=3)
        client = MockStakingClient({"fail_stake": {1: 1}})

        outcomes = list(scheduler.run(CyclePlan(total_cycles=1), client))

        assert outcomes[0].is_success
        assert client.calls == [("stake", 1), ("stake", 1), ("unstake", 1)]
        # backoff of 100ms * 2, then the stake-to-unstake wait
        assert sleep.calls == [0.2, 1.5]

    def test_unexpected_error_becomes_failed_outcome(self):
        """Test non-retriable errors are recorded without retrying"""

        class Exploding(MockStakingClient):
            def stake(self, cycle):
                self.calls.append(("stake", cycle))
                if cycle == 1:
                    raise RuntimeError("unexpected")
                return super().stake(cycle)

        scheduler, _ = _scheduler()
        client = Exploding()

        outcomes = list(scheduler.run(CyclePlan(total_cycles=2), client))

        assert [o.is_success for o in outcomes] == [False, True]
        assert isinstance(outcomes[0].error, RuntimeError)
        assert client.calls.count(("stake", 1)) == 1

    @pytest.mark.parametrize("total", [0, -1, -5])
    def test_non_positive_plan_is_empty(self, total):
        """Test zero or negative cycle counts run nothing"""
        scheduler, sleep = _scheduler()
        client = MockStakingClient()

        assert list(scheduler.run(CyclePlan(total_cycles=total), client)) == []
        assert client.calls == []
        assert sleep.calls == []

    def test_stop_before_cycle_three(self):
        """Test a stop during the wait before cycle 3 of 5 ends the run"""
        # waits: c1 stake->unstake, c1->c2, c2 stake->unstake, c2->c3
        scheduler, _ = _scheduler(stop_on_call=4)
        client = MockStakingClient()

        outcomes = list(scheduler.run(CyclePlan(total_cycles=5), client))

        assert [o.cycle for o in outcomes] == [1, 2]
        assert ("stake", 3) not in client.calls

    def test_stop_between_stake_and_unstake(self):
        """Test a stop after staking skips the unstake and records nothing"""
        scheduler, _ = _scheduler(stop_on_call=1)
        client = MockStakingClient()

        outcomes = list(scheduler.run(CyclePlan(total_cycles=3), client))

        assert outcomes == []
        assert client.calls == [("stake", 1)]

    def test_outcomes_are_lazy(self):
        """Test cycles only run as the outcome sequence is consumed"""
        scheduler, _ = _scheduler()
        client = MockStakingClient()

        outcomes = scheduler.run(CyclePlan(total_cycles=3), client)
        assert client.calls == []

        next(outcomes)
        assert client.calls == [("stake", 1), ("unstake", 1)]

    def test_delays_sampled_from_range(self):
        """Test each wait is drawn from the configured bounds"""
        scheduler, sleep = _scheduler(delay_range=DelayRange(min_ms=60_000, max_ms=120_000))

        list(scheduler.run(CyclePlan(total_cycles=4), MockStakingClient()))

        assert len(sleep.calls) == 7
        assert all(60.0 <= s <= 120.0 for s in sleep.calls)

    def test_action_failure_kind_preserved(self):
        """Test the recorded error is the action's own exception"""

        class Broke(MockStakingClient):
            def stake(self, cycle):
                raise InsufficientBalance("Insufficient token balance")

        scheduler, _ = _scheduler(max_attempts=1)

        outcome = next(scheduler.run(CyclePlan(total_cycles=1), Broke()))

        assert isinstance(outcome.error, InsufficientBalance)
        assert outcome.reason == "Insufficient token balance"
