"""
Parsing utilities for raw chain data and user input
"""

from typing import Any, Optional

from ..models import TimeWindow


def parse_time_window(value: Any) -> TimeWindow:
    """Parse a window key such as "1h", "24h" or "7d".

    Accepts TimeWindow members unchanged. Raises ValueError for unknown keys.
    """
    if isinstance(value, TimeWindow):
        return value
    key = str(value).strip().lower()
    try:
        return TimeWindow(key)
    except ValueError:
        valid = ", ".join(w.value for w in TimeWindow)
        raise ValueError(f"Invalid time window: {value!r} (expected one of {valid})")


def parse_quantity(value: Any, default: int = 0) -> int:
    """Parse a JSON-RPC quantity into an int.

    Handles formats like:
    - None -> default
    - 17 -> 17
    - "0x11" -> 17
    - "17" -> 17
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"Invalid quantity: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return default
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


def parse_block_number(value: Any) -> int:
    """Parse a block number, mapping absent or pending values to the 0 sentinel"""
    number = parse_quantity(value, default=0)
    return number if number > 0 else 0


def parse_hex_string(value: Any) -> Optional[str]:
    """Normalize hashes that may arrive as bytes, HexBytes or str into 0x-prefixed hex"""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    text = str(value)
    if text and not text.startswith("0x"):
        text = "0x" + text
    return text or None
