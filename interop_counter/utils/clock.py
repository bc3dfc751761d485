"""
Wall clock helpers
"""

import time


def current_millis() -> int:
    """Milliseconds since epoch"""
    return int(time.time() * 1000)
