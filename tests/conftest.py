"""
Pytest fixtures for the counter dashboard tests. Time is fixed so windowed metrics are deterministic.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from interop_counter.managers.ledger_manager import EventLedger
from interop_counter.models import TransactionMethod, TransactionRecord

# Monday 2024-01-15 12:00:00 UTC
NOW = int(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc).timestamp() * 1000)


@pytest.fixture
def now() -> int:
    return NOW


@pytest.fixture
def make_record():
    """Factory for records; defaults to a successful incrementer submission at NOW."""

    def _make(
        timestamp: int = NOW,
        chain_id: int = 901,
        method: TransactionMethod = TransactionMethod.INCREMENTER,
        success: bool = True,
        **extra,
    ) -> TransactionRecord:
        return TransactionRecord(
            timestamp=timestamp, chain_id=chain_id, method=method, success=success, **extra
        )

    return _make


@pytest.fixture
def ledger() -> EventLedger:
    """Fresh ledger per test."""
    return EventLedger()
