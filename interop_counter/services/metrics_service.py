"""
Windowed metrics derived from the event ledger
"""

from datetime import tzinfo
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence

from ..models import (
    HistogramBucket,
    MetricsSnapshot,
    TimeWindow,
    TransactionMethod,
    TransactionRecord,
)
from ..models.transaction_models import MS_PER_HOUR
from ..utils.formatters import format_bucket_label

if TYPE_CHECKING:
    from ..managers.ledger_manager import EventLedger


def filter_window(
    records: Iterable[TransactionRecord], window: TimeWindow, now: int
) -> List[TransactionRecord]:
    """Records younger than the window.

    A record exactly ``window.duration_ms`` old is outside. Records stamped
    after ``now`` stay in, producer clocks may run ahead of ours.
    """
    return [r for r in records if now - r.timestamp < window.duration_ms]


def build_histogram(
    records: Sequence[TransactionRecord],
    window: TimeWindow,
    now: int,
    tz: Optional[tzinfo] = None,
) -> List[HistogramBucket]:
    """Bucket already-filtered records over [now - duration, now).

    Buckets are contiguous and the first one starts exactly at
    ``now - duration``. Records at or after ``now`` land in the final bucket
    so the counts always add up to ``len(records)``.
    """
    start = now - window.duration_ms
    width = window.bucket_ms
    buckets = [
        HistogramBucket(
            start=start + i * width,
            end=start + (i + 1) * width,
            label=format_bucket_label(start + i * width, window, tz=tz),
        )
        for i in range(window.bucket_count)
    ]

    last = len(buckets) - 1
    for record in records:
        offset = record.timestamp - start
        if offset < 0:
            # Not part of the window; callers pass filtered records
            continue
        buckets[min(offset // width, last)].count += 1

    return buckets


def compute_metrics(
    records: Sequence[TransactionRecord],
    window: TimeWindow,
    now: int,
    methods: Iterable[TransactionMethod] = tuple(TransactionMethod),
    tz: Optional[tzinfo] = None,
) -> MetricsSnapshot:
    """Compute a MetricsSnapshot from a ledger snapshot.

    Pure function of its arguments, ``now`` is never read from a clock here.
    """
    filtered = filter_window(records, window, now)

    total = len(filtered)
    successful = sum(1 for r in filtered if r.success)
    success_rate = successful / total * 100 if total > 0 else 0.0
    avg_per_hour = total / (window.duration_ms / MS_PER_HOUR)

    method_counts: Dict[TransactionMethod, int] = {method: 0 for method in methods}
    chain_counts: Dict[int, int] = {}
    for record in filtered:
        method_counts[record.method] = method_counts.get(record.method, 0) + 1
        chain_counts[record.chain_id] = chain_counts.get(record.chain_id, 0) + 1

    return MetricsSnapshot(
        window=window,
        now=now,
        total_count=total,
        success_count=successful,
        success_rate=success_rate,
        avg_per_hour=avg_per_hour,
        method_counts=method_counts,
        chain_counts=chain_counts,
        histogram=build_histogram(filtered, window, now, tz=tz),
        last_activity_at=records[-1].timestamp if records else None,
    )


class MetricsService:
    """Query interface over an injected ledger"""

    def __init__(self, ledger: "EventLedger", tz: Optional[tzinfo] = None):
        self.ledger = ledger
        self.tz = tz

    def query(self, window: TimeWindow, now: int) -> MetricsSnapshot:
        """Metrics for ``window`` as seen at ``now`` (ms since epoch)"""
        return compute_metrics(self.ledger.snapshot(), window, now, tz=self.tz)
