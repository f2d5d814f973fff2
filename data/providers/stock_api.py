"""
HTTP provider for the stock price evaluation service.

Endpoints:
- GET /stocks                      -> {"stocks": {name: symbol}}
- GET /stocks/{symbol}             -> latest price point
- GET /stocks/{symbol}?minutes=N   -> price points over the last N minutes
"""

from typing import Any, Optional

import requests
from loguru import logger

from utils.net import NetworkClient

from .base import DataProviderBase


class StockAPIProvider(DataProviderBase):
    """Stock API provider backed by a ``requests`` session."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the provider.

        Args:
            base_url: Service base URL
            api_key: Optional bearer token
            timeout: Request timeout in seconds
            verify_ssl: Whether TLS certificates are verified
            session: Pre-built session
        """
        if not api_key:
            logger.debug("STOCK_API_TOKEN not configured, sending unauthenticated requests")

        self.client = NetworkClient(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            verify_ssl=verify_ssl,
            session=session,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "StockAPIProvider":
        """Build a provider from a ``config.settings.Settings`` instance."""
        return cls(
            base_url=settings.STOCK_API_BASE_URL,
            api_key=settings.STOCK_API_TOKEN,
            timeout=settings.REQUEST_TIMEOUT,
            verify_ssl=settings.VERIFY_SSL,
        )

    def fetch_stocks(self) -> Any:
        return self.client.get("/stocks")

    def fetch_price(self, symbol: str) -> Any:
        return self.client.get(f"/stocks/{symbol}")

    def fetch_history(self, symbol: str, minutes: int) -> Any:
        return self.client.get(f"/stocks/{symbol}", params={"minutes": minutes})
