"""
Tests for the HTTP stock API provider.
"""

import asyncio
import json
from unittest.mock import MagicMock

import pytest
import requests

from config.settings import Settings
from data.cache import RetryingCache
from data.errors import DataFetchFailure
from data.gateway import MarketDataGateway
from data.providers import StockAPIProvider


def json_response(payload, status_code: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload).encode()
    response.url = "https://stocks.test/stocks"
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def stock_api(session):
    return StockAPIProvider("https://stocks.test/evaluation-service", api_key="tok", session=session)


def requested(session):
    call = session.request.call_args
    return call.args[1], call.kwargs.get("params")


def test_fetch_stocks(stock_api, session):
    """Test the catalog endpoint."""
    session.request.return_value = json_response({"stocks": {"Apple Inc.": "AAPL"}})

    assert stock_api.fetch_stocks() == {"stocks": {"Apple Inc.": "AAPL"}}
    assert requested(session) == ("https://stocks.test/evaluation-service/stocks", None)


def test_fetch_price(stock_api, session):
    """Test the latest price endpoint."""
    session.request.return_value = json_response({"price": 1.5, "lastUpdatedAt": "t"})

    stock_api.fetch_price("AAPL")

    assert requested(session) == ("https://stocks.test/evaluation-service/stocks/AAPL", None)


def test_fetch_history(stock_api, session):
    """Test the history endpoint passes the window as a query parameter."""
    session.request.return_value = json_response([{"price": 1.5, "lastUpdatedAt": "t"}])

    stock_api.fetch_history("AAPL", 50)

    assert requested(session) == (
        "https://stocks.test/evaluation-service/stocks/AAPL",
        {"minutes": 50},
    )


def test_from_settings():
    """Test the provider picks up connection settings."""
    provider = StockAPIProvider.from_settings(
        Settings(
            STOCK_API_BASE_URL="http://localhost:9000/",
            STOCK_API_TOKEN="abc",
            REQUEST_TIMEOUT=3,
            VERIFY_SSL=False,
        )
    )

    assert provider.client.base_url == "http://localhost:9000"
    assert provider.client.api_key == "abc"
    assert provider.client.timeout == 3
    assert provider.client.session.verify is False


def test_gateway_over_http_retries_then_fails(stock_api, session):
    """Test a persistent 404 is retried and then reported with its message."""
    session.request.return_value = json_response({"message": "missing"}, status_code=404)

    delays = []

    async def no_sleep(delay):
        delays.append(delay)

    gateway = MarketDataGateway(stock_api, RetryingCache(sleep=no_sleep))

    with pytest.raises(DataFetchFailure, match="The requested resource was not found"):
        asyncio.run(gateway.get_history("ZZZZ", 30))

    assert session.request.call_count == 4
    assert delays == [1.0, 2.0, 4.0]


def test_gateway_over_http_success(stock_api, session):
    """Test the full path from HTTP payload to parsed history."""
    session.request.return_value = json_response([
        {"price": 100.0, "lastUpdatedAt": "2024-01-01T14:30:00Z"},
        {"price": 101.0, "lastUpdatedAt": "2024-01-01T14:31:00Z"},
    ])

    gateway = MarketDataGateway(stock_api, RetryingCache())
    history = asyncio.run(gateway.get_history("AAPL", 30))

    assert [p.price for p in history] == [100.0, 101.0]
