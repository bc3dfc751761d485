"""
WebSocket connection management for the destination chain
"""

import asyncio
import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

from web3 import AsyncWeb3, WebSocketProvider
from web3.exceptions import Web3Exception

from ..abi import COUNTER_INCREMENTED_EVENT, CROSS_CHAIN_COUNTER_ABI
from ..config import Config

logger = logging.getLogger(__name__)


class ChainConnectionError(ConnectionError):
    """Raised when the destination chain cannot be reached"""


class WebSocketManager:
    """Owns the destination chain connection and the counter log subscription"""

    def __init__(self, config: Config, retry_delay: float = 5.0):
        self.config = config
        self.w3: Optional[AsyncWeb3] = None
        self._lock = asyncio.Lock()
        self._subscription_id: Optional[str] = None
        self._wants_logs = False
        self._message_handlers: List[Callable] = []
        self._connection_retries = 0
        self._max_retries = 5
        self._retry_delay = retry_delay
        self._connected = False
        self._listener: Optional[asyncio.Task] = None
        self._reconnect_task: Optional[asyncio.Task] = None
        self._connection_handlers: List[Callable] = []

    async def connect(self) -> AsyncWeb3:
        """Get or create the WebSocket connection with retry logic"""
        async with self._lock:
            if self.w3 is not None and self._connected:
                return self.w3

            self._connection_retries = 0

            while True:
                try:
                    logger.info(f"Connecting to {self.config.destination_rpc_url}")
                    w3 = AsyncWeb3(WebSocketProvider(self.config.destination_rpc_url))
                    await w3.provider.connect()
                    self.w3 = w3
                    self._connected = True
                    logger.info("WebSocket connection established")
                    break
                except (OSError, Web3Exception, asyncio.TimeoutError) as e:
                    self._connection_retries += 1
                    logger.warning(
                        f"WebSocket connection attempt {self._connection_retries} failed: {e}"
                    )
                    if self._connection_retries >= self._max_retries:
                        raise ChainConnectionError(
                            f"Failed to connect after {self._max_retries} attempts"
                        ) from e
                    await asyncio.sleep(self._retry_delay)

        # Re-subscribe after a reconnect
        if self._wants_logs and self._subscription_id is None:
            await self.subscribe_to_counter_logs()
        return self.w3

    async def disconnect(self):
        """Close the WebSocket connection"""
        async with self._lock:
            for task in (self._listener, self._reconnect_task):
                if task is not None and task is not asyncio.current_task():
                    task.cancel()
            self._listener = None
            self._reconnect_task = None
            if self.w3 is not None and self._connected:
                logger.info("Closing WebSocket connection")
                await self.w3.provider.disconnect()
            self.w3 = None
            self._connected = False
            self._subscription_id = None
            # Keep _wants_logs so a later connect() resubscribes

    async def subscribe_to_counter_logs(self) -> bool:
        """Subscribe to logs emitted by the counter contract"""
        self._wants_logs = True
        w3 = await self.connect()
        if self._subscription_id is not None:
            return True

        try:
            address = AsyncWeb3.to_checksum_address(self.config.counter_address)
            self._subscription_id = await w3.eth.subscribe("logs", {"address": address})
        except (OSError, Web3Exception) as e:
            logger.error(f"Error subscribing to counter logs: {e}")
            return False

        logger.info(f"Subscribed to logs of {address}")
        if self._listener is None or self._listener.done():
            self._listener = asyncio.create_task(self._message_loop())
        return True

    async def unsubscribe_from_counter_logs(self) -> bool:
        """Drop the counter log subscription"""
        self._wants_logs = False
        if self._subscription_id is None:
            return True
        if self.w3 is None or not self._connected:
            self._subscription_id = None
            return True

        try:
            await self.w3.eth.unsubscribe(self._subscription_id)
        except (OSError, Web3Exception) as e:
            logger.error(f"Error unsubscribing from counter logs: {e}")
            return False
        self._subscription_id = None
        return True

    async def get_counter_state(self) -> Optional[Tuple[int, int, str]]:
        """Read (number, lastIncrementer chain id, lastIncrementer sender)"""
        w3 = await self.connect()
        contract = self._counter_contract(w3)
        try:
            number, (chain_id, sender) = await asyncio.gather(
                contract.functions.number().call(),
                contract.functions.lastIncrementer().call(),
            )
        except (OSError, Web3Exception) as e:
            logger.error(f"Error reading counter state: {e}")
            return None
        return number, chain_id, sender

    def add_message_handler(self, handler: Callable):
        """Add a handler for decoded CounterIncremented events"""
        self._message_handlers.append(handler)

    def remove_message_handler(self, handler: Callable):
        """Remove a message handler"""
        if handler in self._message_handlers:
            self._message_handlers.remove(handler)

    def add_connection_handler(self, handler: Callable):
        """Add a handler called with (is_connected, status) when the link drops or recovers"""
        self._connection_handlers.append(handler)

    def remove_connection_handler(self, handler: Callable):
        """Remove a connection handler"""
        if handler in self._connection_handlers:
            self._connection_handlers.remove(handler)

    def decode_log(self, log: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
        """Decode a raw log into event data, None if it is not a CounterIncremented log"""
        if self.w3 is None:
            return None
        event = getattr(self._counter_contract(self.w3).events, COUNTER_INCREMENTED_EVENT)()
        try:
            return event.process_log(log)
        except Web3Exception as e:
            logger.debug(f"Skipping undecodable log: {e}")
            return None

    async def dispatch(self, event: Mapping[str, Any]):
        """Hand a decoded event to every handler"""
        for handler in self._message_handlers:
            try:
                if asyncio.iscoroutinefunction(handler):
                    await handler(event)
                else:
                    handler(event)
            except Exception as e:
                logger.error(f"Message handler error: {e}")

    async def _message_loop(self):
        """Process incoming subscription messages"""
        try:
            async for response in self.w3.socket.process_subscriptions():
                log = response.get("result") if isinstance(response, Mapping) else None
                if log is None:
                    continue
                event = self.decode_log(log)
                if event is not None:
                    await self.dispatch(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Message loop error: {e}")
            await self._drop_connection()
            await self._notify_connection(False, "Reconnecting...")
            self._listener = None
            self._reconnect_task = asyncio.create_task(self._reconnect())

    async def _drop_connection(self):
        """Forget the dead provider, closing it if it still can be"""
        dead, self.w3 = self.w3, None
        self._connected = False
        self._subscription_id = None
        if dead is None:
            return
        try:
            await dead.provider.disconnect()
        except (OSError, Web3Exception, asyncio.TimeoutError) as e:
            logger.debug(f"Closing dead provider failed: {e}")

    async def _reconnect(self):
        """Reconnect (resubscribing if needed) and report the outcome"""
        try:
            await self.connect()
        except ChainConnectionError as e:
            logger.error(f"Reconnect failed: {e}")
            await self._notify_connection(False, "Unreachable")
            return
        await self._notify_connection(True, "Connected")

    async def _notify_connection(self, is_connected: bool, status: str):
        for handler in list(self._connection_handlers):
            try:
                if asyncio.iscoroutinefunction(handler):
                    await handler(is_connected, status)
                else:
                    handler(is_connected, status)
            except Exception as e:
                logger.error(f"Connection handler error: {e}")

    def _counter_contract(self, w3: AsyncWeb3):
        return w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(self.config.counter_address),
            abi=CROSS_CHAIN_COUNTER_ABI,
        )

    def is_connected(self) -> bool:
        """Check if the WebSocket is connected"""
        return self.w3 is not None and self._connected
