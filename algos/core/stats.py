"""
Price statistics and Pearson correlation over aligned histories.

Two normalizations coexist on purpose:
- ``instrument_stats`` (heatmap hover) uses the sample standard deviation
- ``calculate_statistics`` (price chart summary) uses the population one
Correlation divides covariance and both variances by ``n - 1``.
"""

from typing import Sequence

import numpy as np

from algos.core.alignment import align
from data.models import HistoryStats, PricePoint

SELF_CORRELATION = 1.0


def mean_and_std(prices: Sequence[float], ddof: int = 1) -> HistoryStats:
    """
    Arithmetic mean and standard deviation of a price list.

    Args:
        prices: Price values
        ddof: Delta degrees of freedom (1 = sample, 0 = population)

    Returns:
        HistoryStats; zeros for an empty list, NaN deviation when ``n <= ddof``
    """
    n = len(prices)
    if n == 0:
        return HistoryStats(average=0.0, standard_deviation=0.0)

    values = np.asarray(prices, dtype=float)
    average = float(values.mean())

    if n <= ddof:
        return HistoryStats(average=average, standard_deviation=float("nan"))

    variance = float(np.sum((values - average) ** 2)) / (n - ddof)
    return HistoryStats(average=average, standard_deviation=float(np.sqrt(variance)))


def instrument_stats(history: Sequence[PricePoint]) -> HistoryStats:
    """Average and sample standard deviation of a history."""
    return mean_and_std([point.price for point in history], ddof=1)


def calculate_statistics(history: Sequence[PricePoint]) -> HistoryStats:
    """Average and population standard deviation of a history."""
    return mean_and_std([point.price for point in history], ddof=0)


def correlation(series_a: Sequence[PricePoint], series_b: Sequence[PricePoint]) -> float:
    """
    Pearson correlation of two histories over their common timestamps.

    Returns 0.0 when either history has fewer than two points, when fewer
    than two timestamps are shared, or when either aligned side is constant.
    The result is clamped to [-1, 1].

    Args:
        series_a: First history
        series_b: Second history

    Returns:
        Correlation coefficient
    """
    if not series_a or not series_b or len(series_a) < 2 or len(series_b) < 2:
        return 0.0

    aligned = align(series_a, series_b)
    n = len(aligned)
    if n < 2:
        return 0.0

    x = np.fromiter((p.value_a for p in aligned), dtype=float, count=n)
    y = np.fromiter((p.value_b for p in aligned), dtype=float, count=n)

    dx = x - x.mean()
    dy = y - y.mean()

    covariance = float(np.sum(dx * dy)) / (n - 1)
    std_a = float(np.sqrt(np.sum(dx * dx) / (n - 1)))
    std_b = float(np.sqrt(np.sum(dy * dy) / (n - 1)))

    if std_a == 0 or std_b == 0:
        return 0.0

    return max(-1.0, min(1.0, covariance / (std_a * std_b)))


def correlation_label(value: float) -> str:
    """
    Strength bucket for a correlation value.

    Args:
        value: Correlation in [-1, 1]

    Returns:
        Label such as "Strong positive" or "Negligible"
    """
    if value >= 0.8:
        return "Strong positive"
    if value >= 0.5:
        return "Moderate positive"
    if value >= 0.2:
        return "Weak positive"
    if value > -0.2:
        return "Negligible"
    if value > -0.5:
        return "Weak negative"
    if value > -0.8:
        return "Moderate negative"
    return "Strong negative"
