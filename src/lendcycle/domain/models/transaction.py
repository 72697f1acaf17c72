"""Transaction result models returned by staking actions"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StakeResult:
    """A mined deposit"""

    tx_hash: str
    block_number: int
    amount_wei: int


@dataclass(frozen=True)
class UnstakeResult:
    """A mined withdrawal"""

    tx_hash: str
    block_number: int


@dataclass(frozen=True)
class Balances:
    """Wallet balances in wei"""

    native_wei: int
    token_wei: int


@dataclass(frozen=True)
class FeeQuote:
    """EIP-1559 fee parameters in wei"""

    max_fee_per_gas: int
    max_priority_fee_per_gas: int
