"""
Manager components for the counter dashboard
"""

from .ledger_manager import MAX_CAPACITY, EventLedger, InvalidRecord
from .state_manager import ApplicationState, StateManager
from .websocket_manager import ChainConnectionError, WebSocketManager

__all__ = [
    'MAX_CAPACITY',
    'EventLedger',
    'InvalidRecord',
    'StateManager',
    'ApplicationState',
    'ChainConnectionError',
    'WebSocketManager',
]
