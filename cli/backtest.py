#!/usr/bin/env python3
"""
Single strategy backtest CLI.

Runs a catalog strategy or a YAML strategy file against an OHLCV CSV file
and prints the statistics, the result contract as JSON, and/or a chart.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from backtester.data.loader import DataLoader
from backtester.evaluation.engine import Backtester
from backtester.reporting.chart import render_backtest_chart
from backtester.shared.errors import StrategyError
from backtester.shared.types import BacktestResult
from backtester.signals.catalog import StrategyRegistry, default_registry
from backtester.signals.config_loader import load_strategy_from_yaml


def setup_logging(log_path: Optional[Path] = None, verbose: bool = False, stream: TextIO = sys.stdout):
    """
    Setup logging to a console stream and optionally to file.

    Args:
        log_path: Path to log file (None = console only)
        verbose: If True, use DEBUG level, otherwise INFO
        stream: Console stream (stderr keeps stdout clean for --json)
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def print_strategy_list(registry: StrategyRegistry):
    """Print catalog ids grouped by category."""
    print("Available strategies:")
    listed = set()
    for category in registry.categories():
        ids = registry.by_category(category)
        if not ids:
            continue
        print(f"\n  [{category}]")
        for sid in ids:
            print(f"    {sid:<28} {registry.get(sid).name}")
            listed.add(sid)
    others = [sid for sid in registry.ids() if sid not in listed]
    if others:
        print("\n  [other]")
        for sid in others:
            print(f"    {sid:<28} {registry.get(sid).name}")


def print_summary(result: BacktestResult):
    """Print the statistics block of a result."""
    stats = result.stats
    print("=" * 60)
    print(f"BACKTEST: {result.strategy_name}")
    print("=" * 60)
    print(f"Total trades:        {stats.total_trades} ({stats.buy_trades} buy / {stats.sell_trades} sell)")
    print(f"Completed trades:    {stats.completed_trades}")
    print(f"Wins / losses:       {stats.wins} / {stats.losses}")
    print(f"Win rate:            {stats.win_rate:.2f}%")
    print(f"Average win:         {stats.avg_win:.4f}")
    print(f"Average loss:        {stats.avg_loss:.4f}")
    print(f"Total profit:        {stats.total_profit:.4f}")
    print(f"Total profit %:      {stats.total_profit_percent:.2f}%")
    print(f"Max drawdown:        {stats.max_drawdown:.4f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Backtest a trading strategy on OHLCV data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # List catalog strategies
    python -m cli.backtest --list

    # Run a catalog strategy
    python -m cli.backtest --data data/btcusdt.csv --strategy ma_crossover

    # Run a YAML strategy on a date range and save a chart
    python -m cli.backtest --data data/btcusdt.csv --config configs/rsi_ma_combined.yaml \\
        --start-date 2024-01-01 --end-date 2024-06-30 --chart out/rsi_ma.png
        """
    )
    parser.add_argument("--data", "-d", type=str, help="OHLCV CSV file (Date index + Open/High/Low/Close/Volume)")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--strategy", "-s", type=str, help="Catalog strategy id (see --list)")
    source.add_argument("--config", "-c", type=str, help="YAML strategy file")
    parser.add_argument("--start-date", type=str, help="Start date (YYYY-MM-DD, inclusive)")
    parser.add_argument("--end-date", type=str, help="End date (YYYY-MM-DD, inclusive)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON instead of a summary")
    parser.add_argument("--chart", type=str, help="Save a chart of the result to this path (e.g. result.png)")
    parser.add_argument("--list", action="store_true", help="List catalog strategies and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging (DEBUG level)")
    parser.add_argument("--log-file", type=str, help="Also write logs to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        Path(args.log_file) if args.log_file else None,
        args.verbose,
        stream=sys.stderr if args.json else sys.stdout,
    )
    logger = logging.getLogger(__name__)

    registry = default_registry()

    if args.list:
        print_strategy_list(registry)
        return 0

    if not args.data:
        parser.error("--data is required unless --list is given")
    if not (args.strategy or args.config):
        parser.error("one of --strategy or --config is required")

    try:
        if args.config:
            strategy = load_strategy_from_yaml(args.config)
        else:
            strategy = registry.get(args.strategy)

        bars = DataLoader(args.data).load_bars(start_date=args.start_date, end_date=args.end_date)
        logger.info(f"Loaded {len(bars)} bars from {args.data}")

        result = Backtester().run(strategy, bars)
    except (StrategyError, FileNotFoundError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print_summary(result)

    if args.chart:
        chart_path = render_backtest_chart(bars, result, args.chart)
        logger.info(f"Chart saved to {chart_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
