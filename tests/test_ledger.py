"""
Pytest tests for the bounded event ledger (capacity, FIFO eviction, immutability, observers).
"""

from __future__ import annotations

import threading

import pytest
from pydantic import ValidationError

from interop_counter.managers.ledger_manager import MAX_CAPACITY, EventLedger, InvalidRecord
from interop_counter.models import TransactionMethod, TransactionRecord

from .conftest import NOW


# --- Capacity and eviction ---


def test_default_capacity_is_100(ledger):
    assert ledger.max_capacity == MAX_CAPACITY == 100


def test_length_never_exceeds_capacity(make_record):
    ledger = EventLedger(max_capacity=10)
    for i in range(35):
        ledger.append(make_record(timestamp=NOW + i))
        assert len(ledger) <= 10
    assert len(ledger) == 10


def test_101st_append_evicts_first_record(ledger, make_record):
    records = [make_record(timestamp=NOW + i, block_number=i) for i in range(101)]
    for record in records:
        ledger.append(record)

    snapshot = ledger.snapshot()
    assert len(snapshot) == 100
    assert snapshot[0] == records[1]
    assert snapshot[-1] == records[100]


def test_eviction_follows_insertion_order_not_timestamps(make_record):
    ledger = EventLedger(max_capacity=3)
    # Newest timestamp inserted first, oldest last
    first = make_record(timestamp=NOW + 1000)
    second = make_record(timestamp=NOW - 5000)
    third = make_record(timestamp=NOW)
    fourth = make_record(timestamp=NOW - 90_000)
    for record in (first, second, third, fourth):
        ledger.append(record)

    assert ledger.snapshot() == (second, third, fourth)


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        EventLedger(max_capacity=0)


# --- Reads ---


def test_snapshot_is_immutable(ledger, make_record):
    ledger.append(make_record())
    snapshot = ledger.snapshot()

    assert isinstance(snapshot, tuple)
    with pytest.raises(ValidationError):
        snapshot[0].success = False
    # Later appends do not leak into an earlier snapshot
    ledger.append(make_record())
    assert len(snapshot) == 1


def test_recent_returns_newest_first(ledger, make_record):
    records = [make_record(timestamp=NOW + i) for i in range(8)]
    for record in records:
        ledger.append(record)

    assert ledger.recent(5) == list(reversed(records[-5:]))
    assert ledger.recent(0) == []
    assert EventLedger().recent() == []


def test_no_deduplication_by_transaction_hash(ledger, make_record):
    ledger.append(make_record(transaction_hash="0xaa"))
    ledger.append(make_record(transaction_hash="0xaa"))
    assert len(ledger) == 2


# --- Clear ---


def test_clear_is_idempotent(ledger, make_record):
    ledger.append(make_record())
    ledger.clear()
    ledger.clear()
    assert len(ledger) == 0
    assert ledger.snapshot() == ()


# --- Validation ---


def test_append_accepts_mapping(ledger):
    record = ledger.append(
        {"timestamp": NOW, "chain_id": 902, "method": "event", "success": True}
    )
    assert isinstance(record, TransactionRecord)
    assert record.method is TransactionMethod.EVENT
    assert record.block_number == 0
    assert ledger.snapshot() == (record,)


def test_append_rejects_missing_required_field(ledger):
    with pytest.raises(InvalidRecord):
        ledger.append({"timestamp": NOW, "method": "direct", "success": True})
    assert len(ledger) == 0


def test_append_rejects_unknown_method(ledger):
    with pytest.raises(InvalidRecord):
        ledger.append({"timestamp": NOW, "chain_id": 901, "method": "bridge", "success": True})


# --- Observers ---


def test_observers_notified_on_append_and_clear(ledger, make_record):
    calls = []
    ledger.subscribe(lambda l: calls.append(len(l)))

    ledger.append(make_record())
    ledger.append(make_record())
    ledger.clear()

    assert calls == [1, 2, 0]


def test_failing_observer_does_not_break_append(ledger, make_record):
    def broken(_):
        raise RuntimeError("boom")

    seen = []
    ledger.subscribe(broken)
    ledger.subscribe(lambda l: seen.append(len(l)))

    ledger.append(make_record())

    assert len(ledger) == 1
    assert seen == [1]


def test_unsubscribe(ledger, make_record):
    calls = []
    callback = ledger.subscribe(lambda l: calls.append(1))
    ledger.unsubscribe(callback)
    ledger.unsubscribe(callback)
    ledger.append(make_record())
    assert calls == []


def test_independent_ledgers(make_record):
    a, b = EventLedger(), EventLedger()
    a.append(make_record())
    assert len(a) == 1
    assert len(b) == 0


# --- Concurrency ---


def test_concurrent_appends_snapshots_and_clears(make_record):
    ledger = EventLedger(max_capacity=20)
    errors = []
    start = threading.Barrier(6)

    def writer(offset):
        start.wait()
        for i in range(500):
            ledger.append(make_record(timestamp=NOW + offset * 1000 + i))

    def reader():
        start.wait()
        for _ in range(500):
            snapshot = ledger.snapshot()
            if len(snapshot) > ledger.max_capacity:
                errors.append(len(snapshot))
            if len(ledger) > ledger.max_capacity:
                errors.append(len(ledger))

    def clearer():
        start.wait()
        for _ in range(50):
            ledger.clear()

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(3)]
    threads += [threading.Thread(target=reader) for _ in range(2)]
    threads.append(threading.Thread(target=clearer))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(ledger) <= 20
    ledger.append(make_record())
    assert 1 <= len(ledger) <= 20
