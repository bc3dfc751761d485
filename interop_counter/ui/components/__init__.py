"""
UI components for the dashboard
"""

from .activity_graph import ActivityGraph, render_histogram
from .counter_display import CounterDisplay
from .distribution_display import DistributionDisplay
from .log_viewer import ActivityLogViewer
from .metrics_cards import MetricsCards
from .recent_transactions import RecentTransactions
from .source_panel import SourceChainPanel
from .status_bar import StatusBar, StatusItem

__all__ = [
    "ActivityGraph",
    "ActivityLogViewer",
    "CounterDisplay",
    "DistributionDisplay",
    "MetricsCards",
    "RecentTransactions",
    "SourceChainPanel",
    "StatusBar",
    "StatusItem",
    "render_histogram",
]
