"""
Formatting utilities for the dashboard
"""

from datetime import datetime, tzinfo
from typing import Optional

from ..models import TimeWindow, TransactionMethod


def format_bucket_label(start_ms: int, window: TimeWindow, tz: Optional[tzinfo] = None) -> str:
    """Short label for a histogram bucket starting at start_ms.

    Hour and minute for the hourly and daily windows (bucket starts follow
    "now", so they are rarely on the hour) and weekday plus day of month for
    the weekly window, e.g. "14:35", "Mon 12".
    """
    moment = datetime.fromtimestamp(start_ms / 1000, tz=tz)
    if window in (TimeWindow.LAST_HOUR, TimeWindow.LAST_DAY):
        return moment.strftime("%H:%M")
    return moment.strftime("%a %d")


def format_clock_time(timestamp_ms: int, tz: Optional[tzinfo] = None) -> str:
    """Format a millisecond timestamp as HH:MM:SS"""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).strftime("%H:%M:%S")


def format_age(timestamp_ms: Optional[int], now_ms: int) -> str:
    """Format how long ago a timestamp was, e.g. "42s ago"

    Future timestamps (clock skew between producers) read as "0s ago".
    """
    if timestamp_ms is None:
        return "No recent activity"
    elapsed = max(0, now_ms - timestamp_ms) // 1000
    return f"{elapsed}s ago"


def format_rate(per_hour: float) -> str:
    """Format a per-hour rate with one decimal"""
    return f"{per_hour:.1f} per hour"


def format_percent(value: float) -> str:
    """Format a percentage with one decimal"""
    return f"{value:.1f}%"


def format_address(address: Optional[str], head: int = 6, tail: int = 4) -> str:
    """Shorten a hex address like 0x1b68f7...41d3"""
    if not address:
        return "—"
    if len(address) <= head + tail + 3:
        return address
    return f"{address[:head]}...{address[-tail:]}"


def format_method(method: TransactionMethod) -> str:
    """Short method name for tables"""
    return {
        TransactionMethod.INCREMENTER: "Incrementer",
        TransactionMethod.DIRECT: "Direct",
        TransactionMethod.EVENT: "Event",
    }[method]


def format_chain(chain_id: int, name: Optional[str] = None) -> str:
    """Format a chain for display, e.g. "Supersim L2A (901)" or "Chain 901"."""
    if name:
        return f"{name} ({chain_id})"
    return f"Chain {chain_id}"
