"""
In-memory caching layer for upstream market data.

Reduces API calls and absorbs transient upstream failures.
"""

from .retrying_cache import RetryingCache

__all__ = ["RetryingCache"]
