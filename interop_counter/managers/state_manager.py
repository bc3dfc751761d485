"""
Centralized state management for the dashboard
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

from ..models import CounterIncrementedLog, TimeWindow, TransactionMethod

logger = logging.getLogger(__name__)

DEFAULT_MAX_EVENT_LOGS = 100


@dataclass
class ApplicationState:
    """Current application state"""

    # Destination chain connection
    connection_status: str = "Disconnected"
    is_connected: bool = False

    # Counter contract state
    counter_value: Optional[int] = None
    last_incrementer_chain_id: Optional[int] = None
    last_incrementer_sender: Optional[str] = None

    # Observed CounterIncremented logs, highest block first
    event_logs: List[CounterIncrementedLog] = field(default_factory=list)

    # Source chain submissions awaiting a receipt
    pending_methods: Set[TransactionMethod] = field(default_factory=set)

    # Analytics view
    selected_window: TimeWindow = TimeWindow.LAST_HOUR
    is_live: bool = True


class StateManager:
    """Manages shared application state with observer pattern"""

    def __init__(
        self,
        default_window: TimeWindow = TimeWindow.LAST_HOUR,
        max_event_logs: int = DEFAULT_MAX_EVENT_LOGS,
    ):
        self.state = ApplicationState(selected_window=default_window)
        self.max_event_logs = max_event_logs
        self._lock = asyncio.Lock()
        self._observers: List[Callable] = []

    def subscribe(self, callback: Callable) -> Callable:
        """Subscribe to state changes"""
        self._observers.append(callback)
        return callback

    def unsubscribe(self, callback: Callable):
        """Unsubscribe from state changes"""
        if callback in self._observers:
            self._observers.remove(callback)

    async def update_connection(self, is_connected: bool, status: str):
        """Update destination chain connection status"""
        async with self._lock:
            self.state.is_connected = is_connected
            self.state.connection_status = status
            await self._notify_observers()

    async def update_counter_state(
        self,
        counter_value: Optional[int],
        last_incrementer_chain_id: Optional[int],
        last_incrementer_sender: Optional[str],
    ):
        """Update the counter contract's current value and last incrementer"""
        async with self._lock:
            self.state.counter_value = counter_value
            self.state.last_incrementer_chain_id = last_incrementer_chain_id
            self.state.last_incrementer_sender = last_incrementer_sender
            await self._notify_observers()

    async def add_event_logs(self, logs: List[CounterIncrementedLog]):
        """Record observed logs, keeping the newest blocks first"""
        if not logs:
            return
        async with self._lock:
            merged = self.state.event_logs + list(logs)
            merged.sort(key=lambda log: log.block_number, reverse=True)
            self.state.event_logs = merged[: self.max_event_logs]
            await self._notify_observers()

    def claim_pending(self, method: TransactionMethod) -> bool:
        """Mark a method pending at once, False if a submission is already in flight.

        Synchronous so two key presses in the same event loop tick cannot both
        claim it; call set_pending afterwards to notify observers.
        """
        if method in self.state.pending_methods:
            return False
        self.state.pending_methods.add(method)
        return True

    async def set_pending(self, method: TransactionMethod, is_pending: bool):
        """Mark a submission method as awaiting confirmation"""
        async with self._lock:
            if is_pending:
                self.state.pending_methods.add(method)
            else:
                self.state.pending_methods.discard(method)
            await self._notify_observers()

    async def set_window(self, window: TimeWindow):
        """Select the analytics window"""
        async with self._lock:
            self.state.selected_window = window
            await self._notify_observers()

    async def toggle_live(self) -> bool:
        """Toggle live analytics updates and return the new state"""
        async with self._lock:
            self.state.is_live = not self.state.is_live
            await self._notify_observers()
            return self.state.is_live

    def get_state(self) -> ApplicationState:
        """Get current state"""
        return self.state

    async def _notify_observers(self):
        """Notify all observers of state change"""
        for callback in self._observers:
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback(self.state)
                else:
                    callback(self.state)
            except Exception as e:
                # Log but don't crash on observer errors
                logger.error(f"Observer callback error: {e}")
