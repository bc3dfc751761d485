"""
Utility functions for the cross-chain counter dashboard
"""

from .formatters import (
    format_address,
    format_age,
    format_bucket_label,
    format_chain,
    format_clock_time,
    format_method,
    format_percent,
    format_rate,
)
from .clock import current_millis
from .parsers import parse_block_number, parse_hex_string, parse_quantity, parse_time_window

__all__ = [
    # Clock
    'current_millis',
    # Parsers
    'parse_time_window',
    'parse_quantity',
    'parse_block_number',
    'parse_hex_string',
    # Formatters
    'format_address',
    'format_age',
    'format_bucket_label',
    'format_chain',
    'format_clock_time',
    'format_method',
    'format_percent',
    'format_rate',
]
