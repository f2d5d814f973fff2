"""
Data provider adapters.

Providers perform raw upstream requests; retry and caching sit above them.
"""

from .base import DataProviderBase
from .stock_api import StockAPIProvider

__all__ = [
    "DataProviderBase",
    "StockAPIProvider",
]
