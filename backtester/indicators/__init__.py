"""
Indicator calculation module.

Provides all trading indicators:
- Moving averages (SMA, EMA) at any number of periods
- Oscillators (RSI, MACD)
- Bollinger Bands and Volume SMA

All indicators follow a unified interface and produce series aligned
index-for-index with the bar series.
"""
from .base import Indicator
from .spec import (
    IndicatorSpec,
    RsiParams,
    MacdParams,
    BollingerParams,
    VolumeParams,
    indicator_spec_from_dict,
)
from .technical import (
    calculate_sma,
    calculate_ema,
    calculate_rsi,
    calculate_macd,
    calculate_bollinger_bands,
    calculate_volume_sma,
)
from .engine import IndicatorEngine, IndicatorSeries, build_indicators, indicator_values_at

__all__ = [
    'Indicator',
    'IndicatorSpec',
    'RsiParams',
    'MacdParams',
    'BollingerParams',
    'VolumeParams',
    'indicator_spec_from_dict',
    'calculate_sma',
    'calculate_ema',
    'calculate_rsi',
    'calculate_macd',
    'calculate_bollinger_bands',
    'calculate_volume_sma',
    'IndicatorEngine',
    'IndicatorSeries',
    'build_indicators',
    'indicator_values_at',
]
