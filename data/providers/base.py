"""
Base data provider interface.

A provider performs one blocking upstream request per call and returns the
decoded JSON untouched. Caching, retry and parsing live above it.
"""

from abc import ABC, abstractmethod
from typing import Any


class DataProviderBase(ABC):
    """
    Abstract base class for stock price providers.

    Implementations raise ``utils.net.TransportError`` subclasses on failure.
    """

    @abstractmethod
    def fetch_stocks(self) -> Any:
        """
        Fetch the instrument catalog.

        Returns:
            Raw payload, expected shape ``{"stocks": {display_name: symbol}}``
        """
        pass

    @abstractmethod
    def fetch_price(self, symbol: str) -> Any:
        """
        Fetch the latest price of a symbol.

        Args:
            symbol: Ticker symbol

        Returns:
            Raw payload, expected shape ``{"price": ..., "lastUpdatedAt": ...}``
        """
        pass

    @abstractmethod
    def fetch_history(self, symbol: str, minutes: int) -> Any:
        """
        Fetch price points over a trailing window.

        Args:
            symbol: Ticker symbol
            minutes: Window length in minutes

        Returns:
            Raw payload, expected to be a list of price points
        """
        pass
