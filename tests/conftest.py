"""
Shared fixtures: a scripted in-memory provider and a cache that never really sleeps.
"""

import pytest

from data.cache import RetryingCache
from data.gateway import MarketDataGateway
from fixtures.fakes import FakeClock, FakeProvider, RecordingSleep


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeper(clock):
    return RecordingSleep(clock)


@pytest.fixture
def cache(clock, sleeper):
    """Cache with default TTL/retry settings, fake clock and sleep."""
    return RetryingCache(clock=clock, sleep=sleeper)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def gateway(provider, cache):
    return MarketDataGateway(provider, cache)
