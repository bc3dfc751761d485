"""
Data models for the cross-chain counter dashboard
"""

from .transaction_models import (
    CounterIncrementedLog,
    HistogramBucket,
    MetricsSnapshot,
    TimeWindow,
    TransactionMethod,
    TransactionRecord,
)

__all__ = [
    'CounterIncrementedLog',
    'HistogramBucket',
    'MetricsSnapshot',
    'TimeWindow',
    'TransactionMethod',
    'TransactionRecord',
]
