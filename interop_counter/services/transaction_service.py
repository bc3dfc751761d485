"""
Submits counter increments on the source chain
"""

import asyncio
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import Web3Exception

from ..abi import (
    CROSS_CHAIN_COUNTER_ABI,
    CROSS_CHAIN_COUNTER_INCREMENTER_ABI,
    L2_TO_L2_CROSS_DOMAIN_MESSENGER_ABI,
)
from ..models import TransactionMethod, TransactionRecord
from ..utils.clock import current_millis
from ..utils.parsers import parse_hex_string

if TYPE_CHECKING:
    from ..config import Config
    from ..managers.ledger_manager import EventLedger
    from .logging_service import LoggingService

# Node or transport failures while talking to the source chain
TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError, aiohttp.ClientError, Web3Exception)


class TransactionSubmissionError(RuntimeError):
    """Raised when the source chain node rejects a transaction"""

    def __init__(self, method: TransactionMethod, message: str):
        super().__init__(f"{method.value} submission failed: {message}")
        self.method = method


class ReceiptError(RuntimeError):
    """Raised when no receipt could be obtained for a submitted transaction"""

    def __init__(self, tx_hash: str, message: str):
        super().__init__(f"No receipt for {tx_hash}: {message}")
        self.tx_hash = tx_hash


class TransactionService:
    """Sends increments through the incrementer contract or the messenger directly.

    Every dispatch is recorded in the ledger straight away, before any
    receipt exists: ``success`` reflects the submission attempt and
    ``block_number`` stays at the 0 sentinel.
    """

    def __init__(
        self,
        config: "Config",
        ledger: "EventLedger",
        logging_service: "LoggingService",
        web3: Optional[AsyncWeb3] = None,
        clock: Callable[[], int] = current_millis,
    ):
        self.config = config
        self.ledger = ledger
        self.logger = logging_service
        self.clock = clock
        self.w3 = web3 or AsyncWeb3(AsyncHTTPProvider(config.source_rpc_url))

    async def increment_via_incrementer(self) -> str:
        """CrossChainCounterIncrementer.increment(destinationChainId, counterAddress)"""
        incrementer = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(self.config.incrementer_address),
            abi=CROSS_CHAIN_COUNTER_INCREMENTER_ABI,
        )
        call = incrementer.functions.increment(
            self.config.destination_chain_id,
            AsyncWeb3.to_checksum_address(self.config.counter_address),
        )
        return await self.submit(TransactionMethod.INCREMENTER, call)

    async def send_direct_message(self) -> str:
        """L2ToL2CrossDomainMessenger.sendMessage(destinationChainId, counter, increment())"""
        messenger = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(self.config.messenger_address),
            abi=L2_TO_L2_CROSS_DOMAIN_MESSENGER_ABI,
        )
        call = messenger.functions.sendMessage(
            self.config.destination_chain_id,
            AsyncWeb3.to_checksum_address(self.config.counter_address),
            self.increment_calldata(),
        )
        return await self.submit(TransactionMethod.DIRECT, call)

    def increment_calldata(self) -> bytes:
        """ABI-encoded CrossChainCounter.increment() call"""
        counter = self.w3.eth.contract(abi=CROSS_CHAIN_COUNTER_ABI)
        return AsyncWeb3.to_bytes(hexstr=counter.encode_abi("increment"))

    async def submit(self, method: TransactionMethod, call: Any) -> str:
        """Dispatch a prepared contract call and record the attempt"""
        tx_params = {"from": self.config.dev_account, "chainId": self.config.source_chain_id}
        try:
            tx_hash = await call.transact(tx_params)
        except (ValueError,) + TRANSPORT_ERRORS as e:
            self._record(method, success=False)
            self.logger.error(f"{method.display_name} submission rejected: {e}")
            raise TransactionSubmissionError(method, str(e)) from e

        tx_hash_hex = parse_hex_string(tx_hash)
        self._record(method, success=True, transaction_hash=tx_hash_hex)
        self.logger.info(f"{method.display_name} transaction sent: {tx_hash_hex}")
        return tx_hash_hex

    async def wait_for_receipt(self, tx_hash: str) -> Mapping[str, Any]:
        """Poll the source chain until the transaction is mined"""
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.config.receipt_timeout,
                poll_latency=self.config.receipt_poll_interval,
            )
        except TRANSPORT_ERRORS as e:
            self.logger.error(f"Waiting for receipt of {tx_hash} failed: {e}")
            raise ReceiptError(tx_hash, str(e)) from e
        self.logger.info(
            f"Transaction {tx_hash} mined in block {receipt['blockNumber']} "
            f"(status {receipt['status']}, gas {receipt['gasUsed']})"
        )
        return receipt

    def _record(self, method: TransactionMethod, success: bool, transaction_hash: Optional[str] = None):
        self.ledger.append(
            TransactionRecord(
                timestamp=self.clock(),
                chain_id=self.config.source_chain_id,
                method=method,
                success=success,
                block_number=0,
                transaction_hash=transaction_hash,
            )
        )
