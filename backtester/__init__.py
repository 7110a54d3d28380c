"""
Strategy backtesting modules.

Provides unified interfaces for:
- Data loading (OHLCV CSV files and DataFrames)
- Indicator calculations (SMA, EMA, RSI, MACD, Bollinger Bands, Volume SMA)
- Strategy descriptors with callable or expression buy/sell conditions
- Long-only trade simulation and performance statistics
- Chart rendering of backtest results
"""
