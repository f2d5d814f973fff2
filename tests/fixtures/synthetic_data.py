"""
Synthetic data generators for testing.
"""
from datetime import datetime, timedelta, timezone
import numpy as np

from data.models import PricePoint


def timestamps(periods: int, start: datetime | None = None) -> list[str]:
    """ISO timestamps one minute apart, formatted like the stock API."""
    start = start or datetime(2024, 1, 1, 14, 30, tzinfo=timezone.utc)
    return [
        (start + timedelta(minutes=i)).isoformat().replace("+00:00", "Z")
        for i in range(periods)
    ]


def generate_history(
    periods: int = 30,
    base_price: float = 100.0,
    seed: int = 42,
) -> list[PricePoint]:
    """Generate a random-walk price history."""
    rng = np.random.default_rng(seed)
    returns = rng.normal(0.0, 0.01, periods)
    prices = base_price * np.exp(np.cumsum(returns))

    return [
        PricePoint(timestamp=ts, price=float(price))
        for ts, price in zip(timestamps(periods), prices)
    ]


def raw_history(history: list[PricePoint]) -> list[dict]:
    """History in the upstream JSON shape."""
    return [{"price": p.price, "lastUpdatedAt": p.timestamp} for p in history]


def make_points(pairs: list[tuple]) -> list[PricePoint]:
    """Build price points from (timestamp, price) pairs."""
    return [PricePoint(timestamp=ts, price=price) for ts, price in pairs]
