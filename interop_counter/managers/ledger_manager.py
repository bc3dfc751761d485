"""
Bounded in-memory ledger of transaction and event records
"""

import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, List, Mapping, Tuple, Union

from pydantic import ValidationError

from ..models import TransactionRecord

logger = logging.getLogger(__name__)

MAX_CAPACITY = 100


class InvalidRecord(ValueError):
    """Raised when a record handed to the ledger is missing required fields"""


class EventLedger:
    """Append-only record store with FIFO eviction.

    Holds at most ``max_capacity`` records. Once full, each append drops the
    oldest inserted record regardless of its timestamp. Readers get an
    immutable tuple of frozen records, never the live sequence.
    """

    def __init__(self, max_capacity: int = MAX_CAPACITY):
        if max_capacity < 1:
            raise ValueError(f"max_capacity must be positive, got {max_capacity}")
        self.max_capacity = max_capacity
        self._records: Deque[TransactionRecord] = deque()
        self._lock = threading.RLock()
        self._observers: List[Callable[["EventLedger"], None]] = []

    def subscribe(self, callback: Callable[["EventLedger"], None]) -> Callable:
        """Subscribe to ledger changes"""
        self._observers.append(callback)
        return callback

    def unsubscribe(self, callback: Callable[["EventLedger"], None]):
        """Unsubscribe from ledger changes"""
        if callback in self._observers:
            self._observers.remove(callback)

    def append(self, record: Union[TransactionRecord, Mapping[str, Any]]) -> TransactionRecord:
        """Append a record, evicting the oldest ones while over capacity"""
        if not isinstance(record, TransactionRecord):
            try:
                record = TransactionRecord.model_validate(record)
            except ValidationError as e:
                raise InvalidRecord(str(e)) from e

        with self._lock:
            self._records.append(record)
            evicted = 0
            while len(self._records) > self.max_capacity:
                self._records.popleft()
                evicted += 1

        if evicted:
            logger.debug(f"Ledger at capacity {self.max_capacity}, evicted {evicted} record(s)")
        self._notify_observers()
        return record

    def snapshot(self) -> Tuple[TransactionRecord, ...]:
        """Current records in insertion order"""
        with self._lock:
            return tuple(self._records)

    def recent(self, limit: int = 5) -> List[TransactionRecord]:
        """Last ``limit`` appended records, newest first"""
        if limit <= 0:
            return []
        with self._lock:
            tail = list(self._records)[-limit:]
        tail.reverse()
        return tail

    def clear(self):
        """Drop every record"""
        with self._lock:
            self._records.clear()
        self._notify_observers()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _notify_observers(self):
        """Notify all observers of a ledger change"""
        for callback in list(self._observers):
            try:
                callback(self)
            except Exception as e:
                # Producers must never fail because a consumer did
                logger.error(f"Ledger observer error: {e}")
