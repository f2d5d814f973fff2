"""
Data module for market data with providers and caching.

Integrates the stock API provider with the in-memory retrying cache.
"""

from .cache import RetryingCache
from .errors import DataFetchFailure, MatrixBuildFailure
from .models import CacheEntry, CorrelationMatrix, HistoryStats, Instrument, PricePoint
from .providers import DataProviderBase, StockAPIProvider

__all__ = [
    "RetryingCache",
    "DataFetchFailure",
    "MatrixBuildFailure",
    "CacheEntry",
    "CorrelationMatrix",
    "HistoryStats",
    "Instrument",
    "PricePoint",
    "DataProviderBase",
    "StockAPIProvider",
]
