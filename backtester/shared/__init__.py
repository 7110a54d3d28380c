"""
Shared types, errors and defaults for the backtester.

This module provides:
- Bar, Trade, Marker, StatsReport and BacktestResult types
- Strategy and expression exception types
- Centralized default values for all indicator parameters
"""
from .types import (
    Bar,
    TradeAction,
    Trade,
    MarkerPosition,
    Marker,
    StatsReport,
    BacktestResult,
)
from .errors import (
    StrategyError,
    InvalidStrategyError,
    StrategyValidationError,
    ExpressionError,
)
from .defaults import (
    RSI_PERIOD,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEV,
    VOLUME_SMA_PERIOD,
)

__all__ = [
    'Bar',
    'TradeAction',
    'Trade',
    'MarkerPosition',
    'Marker',
    'StatsReport',
    'BacktestResult',
    'StrategyError',
    'InvalidStrategyError',
    'StrategyValidationError',
    'ExpressionError',
    'RSI_PERIOD',
    'MACD_FAST', 'MACD_SLOW', 'MACD_SIGNAL',
    'BOLLINGER_PERIOD', 'BOLLINGER_STD_DEV',
    'VOLUME_SMA_PERIOD',
]
