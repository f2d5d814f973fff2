"""
Data structures shared by the gateway, the cache and the correlation engine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Hashable, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field


class PricePoint(BaseModel):
    """
    A timestamped observed price for an instrument.

    ``timestamp`` is kept exactly as the upstream sent it (``lastUpdatedAt``)
    so that alignment compares keys for exact equality.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: Union[str, int, float, datetime] = Field(alias="lastUpdatedAt")
    price: float


@dataclass(frozen=True)
class Instrument:
    """A tradable entity; identity is the symbol."""
    symbol: str
    display_name: str = field(default="", compare=False)


@dataclass(frozen=True)
class CacheEntry:
    """One cached upstream response. ``stored_at`` is a monotonic clock reading."""
    key: str
    payload: Any
    stored_at: float


@dataclass(frozen=True)
class AlignedPoint:
    """Two prices observed at the same timestamp."""
    timestamp: Hashable
    value_a: float
    value_b: float


@dataclass(frozen=True)
class HistoryStats:
    """Average and standard deviation of a price history."""
    average: float
    standard_deviation: float


@dataclass
class CorrelationMatrix:
    """
    Square matrix of pairwise correlations.

    Rows and columns follow ``symbols``. ``histories`` holds the price
    histories the matrix was computed from, keyed by symbol.
    """
    symbols: list[str]
    values: list[list[float]]
    histories: dict[str, list[PricePoint]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> list[float]:
        return self.values[index]

    def to_frame(self) -> pd.DataFrame:
        """Matrix as a DataFrame labelled by symbol on both axes."""
        return pd.DataFrame(self.values, index=self.symbols, columns=self.symbols)

    def average_correlation(self) -> float:
        """Mean of the off-diagonal cells (0.0 below two instruments)."""
        n = len(self.values)
        if n < 2:
            return 0.0
        total = sum(
            self.values[i][j]
            for i in range(n)
            for j in range(n)
            if i != j
        )
        return total / (n * (n - 1))
