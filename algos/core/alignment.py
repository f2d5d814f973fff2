"""
Time-series alignment for pairwise statistics.

Two price histories are joined on exact timestamp equality. There is no
interpolation and no tolerance window.
"""

from typing import Hashable, Iterable

import pandas as pd

from data.models import AlignedPoint, PricePoint


def price_map(series: Iterable[PricePoint]) -> dict[Hashable, float]:
    """
    Map timestamp to price; a repeated timestamp keeps the last price seen.

    Args:
        series: Price points in iteration order

    Returns:
        Dict ordered by first occurrence of each timestamp
    """
    prices: dict[Hashable, float] = {}
    for point in series:
        prices[point.timestamp] = point.price
    return prices


def align(series_a: Iterable[PricePoint], series_b: Iterable[PricePoint]) -> list[AlignedPoint]:
    """
    Inner-join two histories on timestamp.

    Output follows the timestamp order of ``series_a``. That order is only
    chronological if ``series_a`` was.

    Args:
        series_a: First history
        series_b: Second history

    Returns:
        One aligned point per timestamp present in both histories
    """
    prices_a = price_map(series_a)
    prices_b = price_map(series_b)

    return [
        AlignedPoint(timestamp=ts, value_a=price_a, value_b=prices_b[ts])
        for ts, price_a in prices_a.items()
        if ts in prices_b
    ]


def aligned_frame(series_a: Iterable[PricePoint], series_b: Iterable[PricePoint]) -> pd.DataFrame:
    """
    Same join as :func:`align`, as a DataFrame with columns
    ``timestamp``, ``value_a`` and ``value_b``.
    """
    rows = align(series_a, series_b)
    return pd.DataFrame(
        {
            "timestamp": [row.timestamp for row in rows],
            "value_a": [row.value_a for row in rows],
            "value_b": [row.value_b for row in rows],
        }
    )
