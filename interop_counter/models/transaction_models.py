"""
Data models for transaction analytics
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR


class TransactionMethod(str, Enum):
    """Code path that produced a record"""

    INCREMENTER = "incrementer"  # CrossChainCounterIncrementer.increment
    DIRECT = "direct"  # L2ToL2CrossDomainMessenger.sendMessage
    EVENT = "event"  # CounterIncremented observed on the destination chain

    @property
    def display_name(self) -> str:
        return _METHOD_NAMES[self]


_METHOD_NAMES = {
    TransactionMethod.INCREMENTER: "Counter Incrementer",
    TransactionMethod.DIRECT: "Direct Messenger",
    TransactionMethod.EVENT: "Observed Event",
}


class TimeWindow(str, Enum):
    """Look-back windows available to the analytics view"""

    LAST_HOUR = "1h"
    LAST_DAY = "24h"
    LAST_WEEK = "7d"

    @property
    def duration_ms(self) -> int:
        return _WINDOW_DURATIONS[self]

    @property
    def bucket_ms(self) -> int:
        return _WINDOW_BUCKETS[self]

    @property
    def bucket_count(self) -> int:
        return self.duration_ms // self.bucket_ms

    @property
    def label(self) -> str:
        return _WINDOW_LABELS[self]

    def next(self) -> "TimeWindow":
        """Return the following window, wrapping around"""
        members = list(TimeWindow)
        return members[(members.index(self) + 1) % len(members)]


_WINDOW_DURATIONS = {
    TimeWindow.LAST_HOUR: MS_PER_HOUR,
    TimeWindow.LAST_DAY: 24 * MS_PER_HOUR,
    TimeWindow.LAST_WEEK: 7 * MS_PER_DAY,
}

_WINDOW_BUCKETS = {
    TimeWindow.LAST_HOUR: 5 * MS_PER_MINUTE,
    TimeWindow.LAST_DAY: MS_PER_HOUR,
    TimeWindow.LAST_WEEK: MS_PER_DAY,
}

_WINDOW_LABELS = {
    TimeWindow.LAST_HOUR: "Last Hour",
    TimeWindow.LAST_DAY: "Last 24 Hours",
    TimeWindow.LAST_WEEK: "Last 7 Days",
}


class TransactionRecord(BaseModel):
    """Single transaction or event observation held by the ledger"""

    model_config = ConfigDict(frozen=True)

    timestamp: int  # Milliseconds since epoch, set by the producer
    chain_id: int
    method: TransactionMethod
    success: bool
    block_number: int = Field(default=0, ge=0)  # 0 until the block is known
    transaction_hash: Optional[str] = None
    log_index: Optional[int] = None
    gas_used: Optional[int] = None


class HistogramBucket(BaseModel):
    """Half-open time interval [start, end) and the records counted in it"""

    start: int
    end: int
    label: str
    count: int = 0


class MetricsSnapshot(BaseModel):
    """Metrics derived from the ledger for one window at one instant"""

    window: TimeWindow
    now: int
    total_count: int = 0
    success_count: int = 0
    success_rate: float = 0.0  # Percent, unrounded
    avg_per_hour: float = 0.0
    method_counts: Dict[TransactionMethod, int] = {}
    chain_counts: Dict[int, int] = {}
    histogram: List[HistogramBucket] = []
    last_activity_at: Optional[int] = None  # Most recently appended record, any window


class CounterIncrementedLog(BaseModel):
    """Decoded CounterIncremented event from the destination chain"""

    sender_chain_id: int
    sender: str
    new_value: int
    transaction_hash: Optional[str] = None
    log_index: Optional[int] = None
    block_number: int = 0
    observed_at: int  # Milliseconds since epoch when the log was received

    @property
    def dedupe_key(self) -> Optional[tuple]:
        if self.transaction_hash is None:
            return None
        return (self.transaction_hash.lower(), self.log_index)
