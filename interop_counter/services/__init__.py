"""
Service layer for the counter dashboard
"""

from .event_service import EventService
from .logging_service import LoggingService
from .metrics_service import MetricsService, compute_metrics
from .transaction_service import ReceiptError, TransactionService, TransactionSubmissionError

__all__ = [
    'EventService',
    'LoggingService',
    'MetricsService',
    'compute_metrics',
    'ReceiptError',
    'TransactionService',
    'TransactionSubmissionError',
]
