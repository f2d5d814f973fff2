#!/usr/bin/env python3
"""
Correlation report.
Fetches the instrument catalog and price histories, then prints per-instrument
statistics and the pairwise correlation matrix.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from algos.core.correlation import CorrelationMatrixBuilder
from algos.core.stats import correlation_label, instrument_stats
from config.settings import settings
from data.cache import RetryingCache
from data.errors import DataFetchFailure, MatrixBuildFailure
from data.gateway import MarketDataGateway
from data.providers import StockAPIProvider


console = Console()


def cell_style(value: float) -> str:
    """Rich style for a correlation cell."""
    if value >= 0.5:
        return "bold blue"
    if value >= 0.2:
        return "blue"
    if value > -0.2:
        return "dim"
    if value > -0.5:
        return "red"
    return "bold red"


async def run_report(minutes: int, limit: int, csv_path: str | None) -> int:
    """Fetch data and print the report."""
    gateway = MarketDataGateway(
        StockAPIProvider.from_settings(settings),
        RetryingCache.from_settings(settings),
    )

    try:
        instruments = await gateway.list_instruments()
    except DataFetchFailure as e:
        console.print(Panel(
            f"Unable to load stocks: {e}. Please check if the API service is running "
            "and accessible, or try again later.",
            style="red",
        ))
        return 1

    if not instruments:
        console.print("[yellow]No instruments returned by the API[/yellow]")
        return 1

    builder = CorrelationMatrixBuilder(gateway)
    try:
        matrix = await builder.build(instruments, minutes, limit=limit)
    except MatrixBuildFailure as e:
        console.print(Panel(str(e), style="red"))
        return 1

    names = {inst.symbol: inst.display_name for inst in instruments}

    console.print(f"\n[bold blue]Correlation Heatmap[/bold blue] (last {settings.timeframe_label(minutes)})\n")

    stats_table = Table(show_header=True, header_style="bold cyan")
    stats_table.add_column("Symbol", style="dim")
    stats_table.add_column("Name")
    stats_table.add_column("Points", justify="right")
    stats_table.add_column("Avg", justify="right")
    stats_table.add_column("Std Dev", justify="right")

    for symbol in matrix.symbols:
        history = matrix.histories.get(symbol, [])
        stats = instrument_stats(history)
        stats_table.add_row(
            symbol,
            names.get(symbol, ""),
            str(len(history)),
            f"${stats.average:.2f}",
            f"${stats.standard_deviation:.2f}",
        )

    console.print(stats_table)
    console.print()

    matrix_table = Table(show_header=True, header_style="bold cyan")
    matrix_table.add_column("", style="dim")
    for symbol in matrix.symbols:
        matrix_table.add_column(symbol, justify="right")

    for symbol, row in zip(matrix.symbols, matrix.values):
        matrix_table.add_row(
            symbol,
            *(f"[{cell_style(value)}]{value:.2f}[/]" for value in row),
        )

    console.print(matrix_table)
    console.print(
        f"\nAverage correlation: {matrix.average_correlation():.3f} "
        f"({correlation_label(matrix.average_correlation())})"
    )

    if csv_path:
        matrix.to_frame().to_csv(csv_path)
        console.print(f"✅ Matrix saved to: {csv_path}")

    stats = gateway.cache.get_stats()
    logger.debug(f"Cache stats: {stats}")

    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Print a stock correlation report")
    parser.add_argument("--minutes", type=int, default=settings.DEFAULT_TIMEFRAME_MINUTES,
                        help="History window in minutes")
    parser.add_argument("--limit", type=int, default=settings.MATRIX_MAX_STOCKS,
                        help="Maximum number of instruments")
    parser.add_argument("--csv", type=str, default=None, help="Write the matrix to a CSV file")

    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    settings.require_timeframe(args.minutes)

    return asyncio.run(run_report(args.minutes, args.limit, args.csv))


if __name__ == "__main__":
    sys.exit(main())
