"""
Pytest tests for the shared application state and its observers.
"""

from __future__ import annotations

import asyncio

import pytest

from interop_counter.managers.state_manager import StateManager
from interop_counter.models import CounterIncrementedLog, TimeWindow, TransactionMethod

from .conftest import NOW


def make_log(block_number, tx_hash=None):
    return CounterIncrementedLog(
        sender_chain_id=901,
        sender="0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        new_value=block_number,
        transaction_hash=tx_hash,
        block_number=block_number,
        observed_at=NOW,
    )


@pytest.fixture
def manager():
    return StateManager()


# --- Defaults ---


def test_initial_state(manager):
    state = manager.get_state()
    assert state.connection_status == "Disconnected"
    assert state.is_connected is False
    assert state.counter_value is None
    assert state.event_logs == []
    assert state.pending_methods == set()
    assert state.selected_window is TimeWindow.LAST_HOUR
    assert state.is_live is True


def test_default_window_is_configurable():
    assert StateManager(TimeWindow.LAST_WEEK).get_state().selected_window is TimeWindow.LAST_WEEK


# --- Updates ---


def test_event_logs_sorted_by_block_and_capped():
    manager = StateManager(max_event_logs=3)

    async def add():
        await manager.add_event_logs([make_log(5), make_log(9)])
        await manager.add_event_logs([make_log(7), make_log(1)])
        await manager.add_event_logs([])

    asyncio.run(add())

    assert [log.block_number for log in manager.get_state().event_logs] == [9, 7, 5]


def test_pending_methods(manager):
    async def run():
        await manager.set_pending(TransactionMethod.DIRECT, True)
        await manager.set_pending(TransactionMethod.INCREMENTER, True)
        await manager.set_pending(TransactionMethod.DIRECT, False)
        await manager.set_pending(TransactionMethod.DIRECT, False)

    asyncio.run(run())

    assert manager.get_state().pending_methods == {TransactionMethod.INCREMENTER}


def test_window_and_live_toggle(manager):
    async def run():
        await manager.set_window(TimeWindow.LAST_DAY)
        first = await manager.toggle_live()
        second = await manager.toggle_live()
        return first, second

    assert asyncio.run(run()) == (False, True)
    assert manager.get_state().selected_window is TimeWindow.LAST_DAY


def test_connection_and_counter_state(manager):
    async def run():
        await manager.update_connection(True, "Connected")
        await manager.update_counter_state(3, 901, "0xabc")

    asyncio.run(run())

    state = manager.get_state()
    assert state.is_connected is True
    assert state.connection_status == "Connected"
    assert (state.counter_value, state.last_incrementer_chain_id) == (3, 901)
    assert state.last_incrementer_sender == "0xabc"


# --- Observers ---


def test_sync_and_async_observers_are_notified(manager):
    seen = []

    async def async_observer(state):
        seen.append(("async", state.connection_status))

    manager.subscribe(lambda state: seen.append(("sync", state.connection_status)))
    manager.subscribe(async_observer)

    asyncio.run(manager.update_connection(False, "Connecting..."))

    assert seen == [("sync", "Connecting..."), ("async", "Connecting...")]


def test_failing_observer_does_not_block_others(manager):
    seen = []

    def broken(_):
        raise RuntimeError("boom")

    manager.subscribe(broken)
    manager.subscribe(lambda state: seen.append(state.selected_window))

    asyncio.run(manager.set_window(TimeWindow.LAST_WEEK))

    assert seen == [TimeWindow.LAST_WEEK]


def test_unsubscribed_observer_is_not_called(manager):
    seen = []
    callback = manager.subscribe(seen.append)
    manager.unsubscribe(callback)

    asyncio.run(manager.toggle_live())

    assert seen == []


# --- Submission guard ---


def test_claim_pending_allows_one_submission_per_method(manager):
    assert manager.claim_pending(TransactionMethod.INCREMENTER) is True
    assert manager.claim_pending(TransactionMethod.INCREMENTER) is False
    assert manager.claim_pending(TransactionMethod.DIRECT) is True

    asyncio.run(manager.set_pending(TransactionMethod.INCREMENTER, False))

    assert manager.claim_pending(TransactionMethod.INCREMENTER) is True
