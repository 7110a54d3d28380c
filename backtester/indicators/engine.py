"""
Indicator engine: turns an IndicatorSpec into aligned indicator series.

Every series has exactly one entry per bar (positional index), with NaN in
the warm-up region. Indicators are computed independently of each other, so
the result is a pure function of the bars and the IndicatorSpec.
"""
import logging
from typing import Dict, List, Sequence

import pandas as pd

from .base import Indicator
from .implementations import (
    SMAIndicator,
    EMAIndicator,
    RSIIndicator,
    MACDIndicator,
    BollingerBandsIndicator,
    VolumeSMAIndicator,
)
from .spec import IndicatorSpec
from ..data.bars import bars_to_dataframe
from ..shared.types import Bar

logger = logging.getLogger(__name__)

IndicatorSeries = Dict[str, pd.Series]


def build_indicators(spec: IndicatorSpec) -> List[Indicator]:
    """Instantiate one Indicator per requested family/period, in a stable order."""
    indicators: List[Indicator] = []
    indicators.extend(SMAIndicator(p) for p in spec.sma)
    indicators.extend(EMAIndicator(p) for p in spec.ema)
    if spec.rsi is not None:
        indicators.append(RSIIndicator(spec.rsi.period))
    if spec.macd is not None:
        indicators.append(MACDIndicator(
            spec.macd.fast_period, spec.macd.slow_period, spec.macd.signal_period
        ))
    if spec.bollinger is not None:
        indicators.append(BollingerBandsIndicator(spec.bollinger.period, spec.bollinger.std_dev))
    if spec.volume is not None:
        indicators.append(VolumeSMAIndicator(spec.volume.period))
    return indicators


class IndicatorEngine:
    """Calculates every indicator a strategy requests."""

    def calculate(self, bars: Sequence[Bar], spec: IndicatorSpec) -> IndicatorSeries:
        """
        Calculate all requested indicators.

        Args:
            bars: Bars in ascending time order
            spec: Indicators to compute

        Returns:
            Mapping of indicator key -> Series aligned index-for-index with bars
        """
        data = bars_to_dataframe(bars)
        series: IndicatorSeries = {}
        for indicator in build_indicators(spec):
            series.update(indicator.calculate(data))
        logger.debug(f"Calculated {len(series)} indicator series over {len(data)} bars")
        return series


def indicator_values_at(indicators: IndicatorSeries, index: int) -> Dict[str, float]:
    """
    Indicator values at one bar index.

    Undefined entries (warm-up NaN) are omitted rather than passed as None,
    so conditions that read them fail closed.
    """
    values: Dict[str, float] = {}
    for key, series in indicators.items():
        if index >= len(series):
            continue
        val = series.iat[index]
        if pd.isna(val):
            continue
        values[key] = float(val)
    return values
