"""
Unified CLI entry points for backtesting operations.

Provides command-line interfaces for:
- Running a catalog or YAML strategy against an OHLCV CSV file
- Listing the strategy catalog
"""
