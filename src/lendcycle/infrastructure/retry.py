"""Retry executor for staking actions using tenacity.

Only ``TransientActionFailure`` errors are retried. Anything else is a bug or a
fatal condition and propagates on its first occurrence.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt

from lendcycle.domain.config.retry import RetryPolicy
from lendcycle.domain.errors import TransientActionFailure
from lendcycle.infrastructure.cancellation import CancellationToken

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExecutor:
    """Run an operation with exponential backoff between failed attempts"""

    def __init__(
        self,
        policy: RetryPolicy,
        cancel_token: Optional[CancellationToken] = None,
        notify: Optional[Callable[[str], None]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize retry executor

        Args:
            policy: Attempt count and base delay
            cancel_token: Token checked after every backoff wait
            notify: Observer for progress messages (defaults to logger.warning)
            sleep: Wait function in seconds (defaults to the token's interruptible sleep)
        """
        self.policy = policy
        self.cancel_token = cancel_token or CancellationToken()
        self.notify = notify or logger.warning
        self._sleep = sleep or self.cancel_token.sleep

    def _wait(self, retry_state: RetryCallState) -> float:
        return self.policy.delay_for_attempt(retry_state.attempt_number)

    def _pause(self, seconds: float) -> None:
        self._sleep(seconds)
        self.cancel_token.raise_if_stopped()

    def execute(self, operation: Callable[[], T], description: str = "Operation") -> T:
        """Call ``operation`` until it succeeds or attempts run out

        Args:
            operation: Zero-argument callable
            description: Label used in progress messages

        Returns:
            Whatever ``operation`` returns

        Raises:
            TransientActionFailure: The last attempt's error, unchanged
            CycleCancelled: A stop was requested during a backoff wait
        """
        max_attempts = self.policy.max_attempts

        def _before_sleep(retry_state: RetryCallState) -> None:
            if retry_state.outcome is None:
                return
            exception = retry_state.outcome.exception()
            attempt = retry_state.attempt_number
            wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
            self.notify(
                f"{description} failed (attempt {attempt}/{max_attempts}): {exception}. "
                f"Retrying in {wait:g}s..."
            )

        retrying = Retrying(
            stop=stop_after_attempt(max_attempts),
            wait=self._wait,
            retry=retry_if_exception_type(TransientActionFailure),
            reraise=True,
            before_sleep=_before_sleep,
            sleep=self._pause,
        )
        try:
            return retrying(operation)
        except TransientActionFailure as e:
            logger.error(f"{description} failed after {max_attempts} attempts: {e}")
            raise
