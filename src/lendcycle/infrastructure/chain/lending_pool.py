"""Lending pool client built on web3.py"""

import logging
import random
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, Iterator, Optional

import requests
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from lendcycle.domain.config.app import AppConfig
from lendcycle.domain.errors import (
    FatalStartupFailure,
    InsufficientBalance,
    InsufficientGasFunds,
    NetworkError,
    TransactionReverted,
    TransientActionFailure,
)
from lendcycle.domain.models.transaction import Balances, FeeQuote, StakeResult, UnstakeResult
from lendcycle.infrastructure.chain.abi import ERC20_ABI, LENDING_POOL_ABI, MAX_UINT256
from lendcycle.infrastructure.chain.base import StakingActions

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(what: str) -> Iterator[None]:
    """Map web3/transport exceptions onto the retriable failure kinds."""
    try:
        yield
    except TransientActionFailure:
        raise
    except ContractLogicError as e:
        raise TransactionReverted(f"{what} reverted: {e}") from e
    except TimeExhausted as e:
        raise NetworkError(f"{what} was not mined in time: {e}") from e
    except (requests.exceptions.RequestException, Web3Exception, ConnectionError, TimeoutError) as e:
        raise NetworkError(f"{what} failed: {e}") from e


class LendingPoolClient(StakingActions):
    """Deposits into and withdraws from a lending pool with a local signing key"""

    def __init__(
        self,
        config: AppConfig,
        private_key: str,
        web3: Optional[Web3] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize lending pool client

        Args:
            config: Application configuration
            private_key: Hex-encoded signing key
            web3: Pre-built Web3 instance (built from config.network if None)
            rng: Random source for deposit amounts

        Raises:
            FatalStartupFailure: If the key is invalid or the RPC is unreachable
        """
        self.config = config
        self._rng = rng or random.Random()
        self.w3 = web3 or Web3(
            Web3.HTTPProvider(
                config.network.rpc_url,
                request_kwargs={"timeout": config.network.request_timeout},
            )
        )
        if not self.w3.is_connected():
            raise FatalStartupFailure(f"Cannot connect to RPC at {config.network.rpc_url}")

        try:
            self.account = self.w3.eth.account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise FatalStartupFailure(f"Invalid private key: {e}") from e

        self.token_address = config.contracts.token_address
        self.pool_address = config.contracts.lending_pool_address
        self.token = self.w3.eth.contract(address=self.token_address, abi=ERC20_ABI)
        self.pool = self.w3.eth.contract(address=self.pool_address, abi=LENDING_POOL_ABI)

        logger.info(f"Lending pool client initialized, wallet: {self.account.address}")

    @property
    def address(self) -> str:
        return self.account.address

    def get_fee_quote(self) -> FeeQuote:
        """Suggested EIP-1559 fees, bumped by the configured percentage.

        Falls back to the configured defaults if the node cannot be queried.
        """
        gas = self.config.gas
        try:
            base_fee = self.w3.eth.get_block("latest")["baseFeePerGas"]
            priority_fee = self.w3.eth.max_priority_fee
        except Exception as e:
            logger.warning(f"Gas fee estimation failed, using defaults: {e}")
            return FeeQuote(
                max_fee_per_gas=Web3.to_wei(gas.default_max_fee_gwei, "gwei"),
                max_priority_fee_per_gas=Web3.to_wei(gas.default_priority_fee_gwei, "gwei"),
            )

        max_fee = base_fee * 2 + priority_fee
        return FeeQuote(
            max_fee_per_gas=max_fee * gas.fee_bump_percent // 100,
            max_priority_fee_per_gas=priority_fee * gas.fee_bump_percent // 100,
        )

    def get_balances(self) -> Balances:
        """Read native and token balances of the signing account"""
        with _translate_errors("Balance check"):
            native = self.w3.eth.get_balance(self.address)
            token = self.token.functions.balanceOf(self.address).call()

        logger.info(
            f"Current balances: native={Web3.from_wei(native, 'ether')} "
            f"token={Web3.from_wei(token, 'ether')}"
        )
        return Balances(native_wei=native, token_wei=token)

    def ensure_approval(self) -> None:
        """Approve the pool for unlimited spending when the allowance runs low"""
        threshold = Web3.to_wei(Decimal(str(self.config.stake.approval_threshold)), "ether")
        with _translate_errors("Allowance check"):
            allowance = self.token.functions.allowance(self.address, self.pool_address).call()
        if allowance >= threshold:
            return

        logger.info("Approving token spending for the lending pool...")
        self._transact(self.token.functions.approve(self.pool_address, MAX_UINT256), "Approval")
        logger.info("Approval successful")

    def random_amount(self) -> int:
        """Pick a deposit amount in wei within the configured bounds"""
        stake = self.config.stake
        amount = round(self._rng.uniform(stake.min_amount, stake.max_amount), stake.decimals)
        return Web3.to_wei(Decimal(str(amount)), "ether")

    def _transact(self, call: Any, what: str) -> Dict[str, Any]:
        """Sign, send and wait for a contract call

        Returns:
            Transaction receipt

        Raises:
            TransactionReverted: If the receipt reports failure
            NetworkError: On transport errors or receipt timeout
        """
        fees = self.get_fee_quote()
        with _translate_errors(what):
            tx = call.build_transaction(
                {
                    "from": self.address,
                    "nonce": self.w3.eth.get_transaction_count(self.address, "pending"),
                    "gas": self.config.gas.gas_limit,
                    "maxFeePerGas": fees.max_fee_per_gas,
                    "maxPriorityFeePerGas": fees.max_priority_fee_per_gas,
                }
            )
            signed = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
            logger.info(f"Tx sent: {self.config.network.explorer_url}{Web3.to_hex(tx_hash)}")
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.config.network.receipt_timeout
            )

        if receipt["status"] == 0:
            raise TransactionReverted(f"{what} transaction reverted: {Web3.to_hex(tx_hash)}")
        return receipt

    def stake(self, cycle: int) -> StakeResult:
        logger.info(f"[Cycle {cycle}] Preparing to stake...")

        self.ensure_approval()
        balances = self.get_balances()
        amount = self.random_amount()
        logger.info(f"Amount: {Web3.from_wei(amount, 'ether')}")

        if balances.token_wei < amount:
            raise InsufficientBalance(
                f"Insufficient token balance: have {balances.token_wei}, need {amount}"
            )
        min_native = Web3.to_wei(Decimal(str(self.config.gas.min_native_balance)), "ether")
        if balances.native_wei < min_native:
            raise InsufficientGasFunds(
                f"Insufficient native balance for gas: have {balances.native_wei}, need {min_native}"
            )

        receipt = self._transact(
            self.pool.functions.deposit(self.token_address, amount, self.address, 0), "Deposit"
        )
        logger.info(f"Staked in block {receipt['blockNumber']}")
        return StakeResult(
            tx_hash=Web3.to_hex(receipt["transactionHash"]),
            block_number=receipt["blockNumber"],
            amount_wei=amount,
        )

    def unstake(self, cycle: int) -> UnstakeResult:
        logger.info(f"[Cycle {cycle}] Preparing to unstake...")

        # MAX_UINT256 withdraws the whole position
        receipt = self._transact(
            self.pool.functions.withdraw(self.token_address, MAX_UINT256, self.address), "Withdrawal"
        )
        logger.info(f"Unstaked in block {receipt['blockNumber']}")
        return UnstakeResult(
            tx_hash=Web3.to_hex(receipt["transactionHash"]),
            block_number=receipt["blockNumber"],
        )
