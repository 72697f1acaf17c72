"""Cooperative cancellation for waits between staking actions."""

from __future__ import annotations

import logging
import signal
import threading
from contextlib import contextmanager
from typing import Iterator

from lendcycle.domain.errors import CycleCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Stop flag shared by the retry executor and the cycle scheduler.

    Waits are done on an event so a stop request ends them early. Code that is
    already inside a network call is never interrupted; it only observes the
    flag at its next wait or before its next action.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def request_stop(self) -> None:
        """Request a graceful stop."""
        self._event.set()

    @property
    def stop_requested(self) -> bool:
        return self._event.is_set()

    def sleep(self, seconds: float) -> None:
        """Block for ``seconds`` or until a stop is requested."""
        self._event.wait(max(0.0, seconds))

    def raise_if_stopped(self) -> None:
        if self._event.is_set():
            raise CycleCancelled("Stop requested")

    @contextmanager
    def stop_on_signal(self, signum: int = signal.SIGINT) -> Iterator["CancellationToken"]:
        """Turn the first ``signum`` into a stop request.

        The previous handler is restored after the first signal, so a second
        Ctrl+C aborts immediately.
        """
        previous = signal.getsignal(signum)

        def _handler(received, frame):
            logger.warning("Shutting down after the current action completes (press Ctrl+C again to abort)")
            self.request_stop()
            signal.signal(signum, previous)

        signal.signal(signum, _handler)
        try:
            yield self
        finally:
            signal.signal(signum, previous)
