"""
Correlation matrix over a batch of instruments.

Histories are fetched concurrently (fan-out/fan-in). A failed fetch for one
instrument is replaced by an empty history so the rest of the batch survives.
"""

import asyncio
from typing import Sequence

from loguru import logger

from algos.core.stats import SELF_CORRELATION, correlation
from data.errors import MatrixBuildFailure
from data.gateway import MarketDataGateway
from data.models import CorrelationMatrix, Instrument, PricePoint

DEFAULT_MAX_STOCKS = 10


def correlation_values(histories: Sequence[Sequence[PricePoint]]) -> list[list[float]]:
    """
    Pairwise correlation of every history against every other.

    Each off-diagonal cell is computed on its own, so ``[i][j]`` and
    ``[j][i]`` come from separate calls with the arguments swapped.

    Args:
        histories: One history per instrument, in matrix order

    Returns:
        Square matrix with 1.0 on the diagonal
    """
    n = len(histories)
    matrix = []
    for i in range(n):
        row = []
        for j in range(n):
            if i == j:
                row.append(SELF_CORRELATION)
            else:
                row.append(correlation(histories[i], histories[j]))
        matrix.append(row)
    return matrix


class CorrelationMatrixBuilder:
    """Builds correlation matrices from gateway histories."""

    def __init__(self, gateway: MarketDataGateway):
        self.gateway = gateway

    async def _history_or_empty(self, symbol: str, minutes: int) -> list[PricePoint]:
        try:
            return await self.gateway.get_history(symbol, minutes)
        except Exception as e:
            logger.error(f"Error fetching history for {symbol}: {e}")
            return []

    async def build(
        self,
        instruments: Sequence[Instrument],
        minutes: int,
        limit: int = DEFAULT_MAX_STOCKS,
    ) -> CorrelationMatrix:
        """
        Fetch histories for the first ``limit`` instruments and correlate them.

        Args:
            instruments: Ordered instruments; only the first ``limit`` are used
            minutes: History window in minutes
            limit: Maximum number of instruments

        Returns:
            ``limit x limit`` (or smaller) correlation matrix

        Raises:
            MatrixBuildFailure: If the batch fails outside the per-instrument guard
        """
        visible = list(instruments)[:limit]

        try:
            histories = await asyncio.gather(
                *(self._history_or_empty(inst.symbol, minutes) for inst in visible)
            )
            values = correlation_values(histories)
        except Exception as e:
            logger.error(f"Error calculating correlation matrix: {e}")
            raise MatrixBuildFailure() from e

        symbols = [inst.symbol for inst in visible]
        logger.info(f"Built {len(symbols)}x{len(symbols)} correlation matrix over {minutes}m")

        return CorrelationMatrix(
            symbols=symbols,
            values=values,
            histories=dict(zip(symbols, histories)),
        )
