"""
Cross-chain counter dashboard with transaction analytics
"""

__version__ = "0.1.0"
