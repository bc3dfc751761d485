"""
Bridges destination chain events into the ledger and application state
"""

from collections import OrderedDict
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from ..models import CounterIncrementedLog, TransactionMethod, TransactionRecord
from ..utils.clock import current_millis
from ..utils.parsers import parse_block_number, parse_hex_string, parse_quantity

# Type hints only - these are injected via DI
if TYPE_CHECKING:
    from ..config import Config
    from ..managers.ledger_manager import EventLedger
    from ..managers.state_manager import StateManager
    from ..managers.websocket_manager import WebSocketManager
    from .logging_service import LoggingService

# Remembered (transaction hash, log index) pairs for redelivery detection
SEEN_EVENTS_LIMIT = 1000


def counter_log_from_event(event: Mapping[str, Any], observed_at: int) -> CounterIncrementedLog:
    """Map decoded CounterIncremented event data onto a CounterIncrementedLog"""
    args = event.get("args") or {}
    log_index = event.get("logIndex")
    return CounterIncrementedLog(
        sender_chain_id=parse_quantity(args.get("senderChainId")),
        sender=str(args.get("sender", "")),
        new_value=parse_quantity(args.get("newValue")),
        transaction_hash=parse_hex_string(event.get("transactionHash")),
        log_index=parse_quantity(log_index) if log_index is not None else None,
        block_number=parse_block_number(event.get("blockNumber")),
        observed_at=observed_at,
    )


def record_from_counter_log(log: CounterIncrementedLog, chain_id: int) -> TransactionRecord:
    """Ledger record for an observed increment on ``chain_id``"""
    return TransactionRecord(
        timestamp=log.observed_at,
        chain_id=chain_id,
        method=TransactionMethod.EVENT,
        success=True,
        block_number=log.block_number,
        transaction_hash=log.transaction_hash,
        log_index=log.log_index,
    )


class EventService:
    """Consumes CounterIncremented events from the websocket manager"""

    def __init__(
        self,
        config: "Config",
        ledger: "EventLedger",
        state_manager: "StateManager",
        websocket_manager: "WebSocketManager",
        logging_service: "LoggingService",
        clock: Callable[[], int] = current_millis,
    ):
        self.config = config
        self.ledger = ledger
        self.state_manager = state_manager
        self.websocket_manager = websocket_manager
        self.logger = logging_service
        self.clock = clock
        self._seen: "OrderedDict[tuple, None]" = OrderedDict()
        self._increment_callbacks = []

    def on_increment(self, callback: Callable[[CounterIncrementedLog], None]):
        """Register a callback for each accepted increment"""
        self._increment_callbacks.append(callback)

    async def start(self):
        """Read the initial counter state and start listening for events"""
        self.websocket_manager.add_message_handler(self.handle_event)
        self.websocket_manager.add_connection_handler(self.handle_connection_change)
        await self.state_manager.update_connection(False, "Connecting...")
        try:
            await self.websocket_manager.connect()
        except ConnectionError as e:
            self.logger.error(f"Destination chain unreachable: {e}")
            await self.state_manager.update_connection(False, "Unreachable")
            raise

        await self.state_manager.update_connection(True, "Connected")
        await self.refresh_counter_state()
        if await self.websocket_manager.subscribe_to_counter_logs():
            self.logger.info(
                f"Listening for CounterIncremented events on {self.config.destination_chain_name}"
            )
        else:
            await self.state_manager.update_connection(True, "Subscription failed")

    async def stop(self):
        """Stop listening"""
        self.websocket_manager.remove_message_handler(self.handle_event)
        self.websocket_manager.remove_connection_handler(self.handle_connection_change)
        await self.websocket_manager.unsubscribe_from_counter_logs()
        await self.websocket_manager.disconnect()
        await self.state_manager.update_connection(False, "Disconnected")

    async def handle_event(self, event: Mapping[str, Any]) -> Optional[TransactionRecord]:
        """Append one decoded event to the ledger, skipping redeliveries"""
        log = counter_log_from_event(event, self.clock())

        if self.config.dedupe_events and self._is_duplicate(log):
            self.logger.debug(
                f"Ignoring redelivered event {log.transaction_hash} #{log.log_index}"
            )
            return None

        record = self.ledger.append(
            record_from_counter_log(log, self.config.destination_chain_id)
        )
        self.logger.info(
            f"Counter incremented to {log.new_value} from chain {log.sender_chain_id} "
            f"(block {log.block_number})"
        )

        await self.state_manager.add_event_logs([log])
        for callback in self._increment_callbacks:
            callback(log)
        await self.refresh_counter_state()
        return record

    async def handle_connection_change(self, is_connected: bool, status: str):
        """Mirror a dropped or recovered destination link into the application state"""
        if is_connected:
            self.logger.info(f"Reconnected to {self.config.destination_chain_name}")
        else:
            self.logger.warning(f"Destination chain connection: {status}")
        await self.state_manager.update_connection(is_connected, status)
        if is_connected:
            await self.refresh_counter_state()

    async def refresh_counter_state(self):
        """Re-read the counter's value and last incrementer"""
        state = await self.websocket_manager.get_counter_state()
        if state is None:
            return
        number, chain_id, sender = state
        await self.state_manager.update_counter_state(number, chain_id, sender)

    def _is_duplicate(self, log: CounterIncrementedLog) -> bool:
        key = log.dedupe_key
        if key is None:
            return False
        if key in self._seen:
            return True
        self._seen[key] = None
        while len(self._seen) > SEEN_EVENTS_LIMIT:
            self._seen.popitem(last=False)
        return False
