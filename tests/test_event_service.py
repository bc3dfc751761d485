"""
Pytest tests for the event service: decoding, redelivery handling and connection lifecycle.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from interop_counter.config import Config
from interop_counter.managers.state_manager import StateManager
from interop_counter.managers.websocket_manager import ChainConnectionError
from interop_counter.models import TransactionMethod
from interop_counter.services.event_service import (
    EventService,
    counter_log_from_event,
    record_from_counter_log,
)

from .conftest import NOW

SENDER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


def make_event(tx_hash="0xabc123", log_index=0, block_number=42, new_value=6):
    return {
        "event": "CounterIncremented",
        "args": {"senderChainId": 901, "sender": SENDER, "newValue": new_value},
        "transactionHash": bytes.fromhex(tx_hash[2:].rjust(6, "0")),
        "logIndex": log_index,
        "blockNumber": block_number,
    }


@pytest.fixture
def websocket_manager():
    manager = MagicMock()
    manager.connect = AsyncMock()
    manager.disconnect = AsyncMock()
    manager.subscribe_to_counter_logs = AsyncMock(return_value=True)
    manager.unsubscribe_from_counter_logs = AsyncMock(return_value=True)
    manager.get_counter_state = AsyncMock(return_value=(5, 901, SENDER))
    return manager


@pytest.fixture
def state_manager():
    return StateManager()


@pytest.fixture
def make_service(ledger, state_manager, websocket_manager):
    def _make(**config_values):
        return EventService(
            config=Config(**config_values),
            ledger=ledger,
            state_manager=state_manager,
            websocket_manager=websocket_manager,
            logging_service=MagicMock(),
            clock=lambda: NOW,
        )

    return _make


# --- Decoding ---


def test_counter_log_from_event():
    log = counter_log_from_event(make_event(), NOW)

    assert log.sender_chain_id == 901
    assert log.sender == SENDER
    assert log.new_value == 6
    assert log.transaction_hash == "0xabc123"
    assert log.log_index == 0
    assert log.block_number == 42
    assert log.observed_at == NOW


def test_counter_log_without_block_uses_zero_sentinel():
    event = make_event()
    event["blockNumber"] = None
    assert counter_log_from_event(event, NOW).block_number == 0


def test_record_from_counter_log_is_an_event_on_destination():
    record = record_from_counter_log(counter_log_from_event(make_event(), NOW), 902)

    assert record.method is TransactionMethod.EVENT
    assert record.chain_id == 902
    assert record.success is True
    assert record.timestamp == NOW
    assert record.block_number == 42


# --- Event handling ---


def test_handle_event_appends_and_updates_state(make_service, ledger, state_manager):
    service = make_service()
    seen = []
    service.on_increment(seen.append)

    record = asyncio.run(service.handle_event(make_event()))

    assert ledger.snapshot() == (record,)
    assert record.chain_id == 902
    state = state_manager.get_state()
    assert state.counter_value == 5
    assert state.last_incrementer_chain_id == 901
    assert [log.block_number for log in state.event_logs] == [42]
    assert len(seen) == 1


def test_redelivered_event_is_skipped(make_service, ledger):
    service = make_service()

    async def deliver():
        first = await service.handle_event(make_event())
        again = await service.handle_event(make_event())
        other_index = await service.handle_event(make_event(log_index=1))
        return first, again, other_index

    first, again, other_index = asyncio.run(deliver())

    assert first is not None
    assert again is None
    assert other_index is not None
    assert len(ledger) == 2


def test_redelivery_counted_when_dedupe_disabled(make_service, ledger):
    service = make_service(dedupe_events=False)

    async def deliver():
        await service.handle_event(make_event())
        await service.handle_event(make_event())

    asyncio.run(deliver())
    assert len(ledger) == 2


def test_missing_counter_state_leaves_state_untouched(make_service, state_manager, websocket_manager):
    websocket_manager.get_counter_state.return_value = None
    service = make_service()

    asyncio.run(service.handle_event(make_event()))

    assert state_manager.get_state().counter_value is None


# --- Lifecycle ---


def test_start_connects_and_subscribes(make_service, state_manager, websocket_manager):
    service = make_service()

    asyncio.run(service.start())

    websocket_manager.add_message_handler.assert_called_once_with(service.handle_event)
    websocket_manager.add_connection_handler.assert_called_once_with(
        service.handle_connection_change
    )
    websocket_manager.connect.assert_awaited_once()
    websocket_manager.subscribe_to_counter_logs.assert_awaited_once()
    state = state_manager.get_state()
    assert state.is_connected is True
    assert state.connection_status == "Connected"
    assert state.counter_value == 5


def test_start_reports_unreachable_chain(make_service, state_manager, websocket_manager):
    websocket_manager.connect.side_effect = ChainConnectionError("down")
    service = make_service()

    with pytest.raises(ChainConnectionError):
        asyncio.run(service.start())

    state = state_manager.get_state()
    assert state.is_connected is False
    assert state.connection_status == "Unreachable"
    websocket_manager.subscribe_to_counter_logs.assert_not_awaited()


def test_start_reports_failed_subscription(make_service, state_manager, websocket_manager):
    websocket_manager.subscribe_to_counter_logs.return_value = False
    service = make_service()

    asyncio.run(service.start())

    assert state_manager.get_state().connection_status == "Subscription failed"


def test_stop_disconnects(make_service, state_manager, websocket_manager):
    service = make_service()

    asyncio.run(service.stop())

    websocket_manager.remove_message_handler.assert_called_once_with(service.handle_event)
    websocket_manager.remove_connection_handler.assert_called_once_with(
        service.handle_connection_change
    )
    websocket_manager.unsubscribe_from_counter_logs.assert_awaited_once()
    websocket_manager.disconnect.assert_awaited_once()
    assert state_manager.get_state().connection_status == "Disconnected"


# --- Connection changes ---


def test_lost_connection_is_reflected_in_state(make_service, state_manager, websocket_manager):
    service = make_service()

    async def run():
        await state_manager.update_connection(True, "Connected")
        await service.handle_connection_change(False, "Reconnecting...")

    asyncio.run(run())

    state = state_manager.get_state()
    assert state.is_connected is False
    assert state.connection_status == "Reconnecting..."
    websocket_manager.get_counter_state.assert_not_awaited()


def test_recovered_connection_refreshes_counter(make_service, state_manager, websocket_manager):
    service = make_service()

    asyncio.run(service.handle_connection_change(True, "Connected"))

    state = state_manager.get_state()
    assert state.is_connected is True
    assert state.connection_status == "Connected"
    assert state.counter_value == 5
    websocket_manager.get_counter_state.assert_awaited_once()
