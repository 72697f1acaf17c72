"""Error taxonomy for staking cycles"""


class TransientActionFailure(Exception):
    """A stake/unstake action failed in a way that may succeed on retry."""

    pass


class InsufficientBalance(TransientActionFailure):
    """Token balance is below the amount to stake."""

    pass


class InsufficientGasFunds(TransientActionFailure):
    """Native balance is too low to pay for gas."""

    pass


class TransactionReverted(TransientActionFailure):
    """Transaction was mined with a failed status or rejected by the contract."""

    pass


class NetworkError(TransientActionFailure):
    """RPC transport failure or receipt timeout."""

    pass


class FatalStartupFailure(Exception):
    """Missing credential or unusable configuration. Never retried."""

    pass


class CycleCancelled(Exception):
    """Raised when a wait is interrupted by a cancellation request."""

    pass
