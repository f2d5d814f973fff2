"""
Typed async access to the stock API through the retrying cache.

Every operation has its own cache key prefix so entries never collide across
operation types. Raw JSON is cached; parsing into models happens on the way out.
"""

import asyncio
from typing import Any, Optional

from loguru import logger
from pydantic import ValidationError

from algos.core.stats import calculate_statistics
from data.cache import RetryingCache
from data.models import HistoryStats, Instrument, PricePoint
from data.providers.base import DataProviderBase
from utils.net import UnexpectedTransportError

ALL_STOCKS_KEY = "all_stocks"


def price_key(symbol: str) -> str:
    return f"stock_price_{symbol}"


def history_key(symbol: str, minutes: int) -> str:
    return f"stock_history_{symbol}_{minutes}"


def parse_instruments(payload: Any) -> list[Instrument]:
    """
    Turn ``{"stocks": {display_name: symbol}}`` into instruments, keeping mapping order.

    Args:
        payload: Raw catalog response

    Returns:
        List of instruments (empty if the payload has no stock mapping)
    """
    stocks = payload.get("stocks") if isinstance(payload, dict) else None
    if not isinstance(stocks, dict):
        logger.warning("Stock catalog response has no 'stocks' mapping")
        return []

    return [
        Instrument(symbol=str(symbol), display_name=str(name))
        for name, symbol in stocks.items()
    ]


def parse_history(payload: Any, symbol: str = "") -> list[PricePoint]:
    """
    Parse a list of raw price points, skipping malformed items.

    Args:
        payload: Raw history response
        symbol: Symbol, for log messages only

    Returns:
        Price points in the order received
    """
    if not isinstance(payload, list):
        return []

    points = []
    skipped = 0
    for item in payload:
        try:
            points.append(PricePoint.model_validate(item))
        except ValidationError:
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} malformed price points for {symbol}")

    return points


class MarketDataGateway:
    """
    Market data operations for the correlation engine.

    The blocking provider call runs in a worker thread so the event loop
    stays free while requests and backoff delays are pending.
    """

    def __init__(self, provider: DataProviderBase, cache: Optional[RetryingCache] = None):
        """
        Initialize the gateway.

        Args:
            provider: Upstream provider performing the actual requests
            cache: Cache owning retry and TTL (a default one is created if omitted)
        """
        self.provider = provider
        self.cache = cache or RetryingCache()

    async def list_instruments(self) -> list[Instrument]:
        """Fetch the instrument catalog."""
        async def fetch() -> Any:
            return await asyncio.to_thread(self.provider.fetch_stocks)

        payload = await self.cache.resolve(ALL_STOCKS_KEY, fetch)
        return parse_instruments(payload)

    async def get_latest_price(self, symbol: str) -> PricePoint:
        """
        Fetch the most recent price point for a symbol.

        Args:
            symbol: Ticker symbol

        Returns:
            Latest price point

        Raises:
            DataFetchFailure: If every attempt failed
            UnexpectedTransportError: If the response is not a price point
        """
        async def fetch() -> Any:
            return await asyncio.to_thread(self.provider.fetch_price, symbol)

        payload = await self.cache.resolve(price_key(symbol), fetch)

        # Some deployments wrap the point as {"stock": {...}}
        if isinstance(payload, dict) and isinstance(payload.get("stock"), dict):
            payload = payload["stock"]

        try:
            return PricePoint.model_validate(payload)
        except ValidationError as e:
            raise UnexpectedTransportError(f"malformed price for {symbol}") from e

    async def get_history(self, symbol: str, minutes: int) -> list[PricePoint]:
        """
        Fetch price points covering the trailing window.

        A response that is not a list resolves to an empty history.

        Args:
            symbol: Ticker symbol
            minutes: Window length in minutes

        Returns:
            Price points in the order received
        """
        async def fetch() -> Any:
            payload = await asyncio.to_thread(self.provider.fetch_history, symbol, minutes)
            return payload if isinstance(payload, list) else []

        payload = await self.cache.resolve(history_key(symbol, minutes), fetch)
        return parse_history(payload, symbol)

    async def get_statistics(self, symbol: str, minutes: int) -> HistoryStats:
        """Average and population standard deviation of a symbol's history."""
        history = await self.get_history(symbol, minutes)
        return calculate_statistics(history)
