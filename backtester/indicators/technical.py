"""
Technical indicator formulas.

Provides SMA, EMA, RSI, MACD, Bollinger Bands and Volume SMA as pure
functions of a pandas Series. Every result has the same index as its input;
bars inside an indicator's warm-up window hold NaN, never a numeric
placeholder.
"""
from typing import Tuple

import numpy as np
import pandas as pd

from ..shared.defaults import (
    RSI_PERIOD, RSI_FLAT_VALUE, RSI_MAX_VALUE,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEV,
    VOLUME_SMA_PERIOD,
)


def calculate_sma(values: pd.Series, period: int) -> pd.Series:
    """Simple moving average; NaN while fewer than `period` values are available."""
    return values.rolling(window=period, min_periods=period).mean()


def calculate_ema(values: pd.Series, period: int) -> pd.Series:
    """
    Exponential moving average seeded with the first value.

    ema[0] = values[0]; ema[i] = values[i] * k + ema[i-1] * (1 - k), k = 2 / (period + 1).
    Defined from the first bar on (no NaN warm-up).
    """
    k = 2.0 / (period + 1)
    return values.ewm(alpha=k, adjust=False).mean()


def calculate_rsi(closes: pd.Series, period: int = RSI_PERIOD) -> pd.Series:
    """
    Calculate Relative Strength Index (RSI).

    RSI = 100 - (100 / (1 + RS))
    RS = Average Gain / Average Loss

    Averages are plain means of the last `period` close-to-close changes
    ending at the current bar, so RSI is NaN for the first `period` bars.
    A window without losses saturates at 100; a window without any movement
    resolves to 50 (RS treated as 1).
    """
    delta = closes.diff()
    gain = delta.clip(lower=0)
    loss = (-delta).clip(lower=0)

    avg_gain = gain.rolling(window=period, min_periods=period).mean()
    avg_loss = loss.rolling(window=period, min_periods=period).mean()

    # Count moves instead of comparing float means to zero
    gain_count = (gain > 0).astype(float).rolling(window=period, min_periods=period).sum()
    loss_count = (loss > 0).astype(float).rolling(window=period, min_periods=period).sum()
    no_gain = gain_count == 0
    no_loss = loss_count == 0

    rs = avg_gain / avg_loss.where(~no_loss, np.nan)
    rsi = 100 - (100 / (1 + rs))
    rsi = rsi.mask(no_loss & ~no_gain, RSI_MAX_VALUE)
    rsi = rsi.mask(no_gain & ~no_loss, 0.0)
    rsi = rsi.mask(no_gain & no_loss, RSI_FLAT_VALUE)

    return rsi.where(avg_gain.notna() & avg_loss.notna())


def calculate_macd(
    closes: pd.Series,
    fast_period: int = MACD_FAST,
    slow_period: int = MACD_SLOW,
    signal_period: int = MACD_SIGNAL,
) -> Tuple[pd.Series, pd.Series, pd.Series]:
    """
    Calculate MACD (Moving Average Convergence Divergence).

    The signal line is the EMA of the MACD line, seeded like any other EMA.

    Returns:
        Tuple of (MACD line, Signal line, Histogram)
    """
    macd_line = calculate_ema(closes, fast_period) - calculate_ema(closes, slow_period)
    signal_line = calculate_ema(macd_line, signal_period)
    histogram = macd_line - signal_line
    return macd_line, signal_line, histogram


def calculate_bollinger_bands(
    closes: pd.Series,
    period: int = BOLLINGER_PERIOD,
    std_dev: float = BOLLINGER_STD_DEV,
) -> Tuple[pd.Series, pd.Series, pd.Series]:
    """
    Calculate Bollinger Bands around the SMA using population standard deviation.

    Returns:
        Tuple of (upper, middle, lower)
    """
    middle = calculate_sma(closes, period)
    sigma = closes.rolling(window=period, min_periods=period).std(ddof=0)
    upper = middle + std_dev * sigma
    lower = middle - std_dev * sigma
    return upper, middle, lower


def calculate_volume_sma(volumes: pd.Series, period: int = VOLUME_SMA_PERIOD) -> pd.Series:
    """SMA of traded volume."""
    return calculate_sma(volumes.fillna(0.0), period)
