"""
Individual indicator implementations following the Indicator interface.

These classes provide a uniform interface for all technical indicators,
making it easier to add new indicators without modifying existing code.
Each class owns its output keys (e.g. 'sma20', 'macdSignal').
"""
import pandas as pd
from typing import Dict
from .base import Indicator
from .technical import (
    calculate_sma,
    calculate_ema,
    calculate_rsi,
    calculate_macd,
    calculate_bollinger_bands,
    calculate_volume_sma,
)
from ..shared.defaults import (
    RSI_PERIOD,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEV,
    VOLUME_SMA_PERIOD,
)


class SMAIndicator(Indicator):
    """Simple Moving Average of the close, keyed sma<period>."""

    def __init__(self, period: int):
        self.period = period

    @property
    def key(self) -> str:
        return f"sma{self.period}"

    def calculate(self, data: pd.DataFrame) -> Dict[str, pd.Series]:
        return {self.key: calculate_sma(data['close'], self.period)}


class EMAIndicator(Indicator):
    """Exponential Moving Average of the close, keyed ema<period>."""

    def __init__(self, period: int):
        self.period = period

    @property
    def key(self) -> str:
        return f"ema{self.period}"

    def calculate(self, data: pd.DataFrame) -> Dict[str, pd.Series]:
        return {self.key: calculate_ema(data['close'], self.period)}


class RSIIndicator(Indicator):
    """Relative Strength Index indicator."""

    def __init__(self, period: int = RSI_PERIOD):
        self.period = period

    def calculate(self, data: pd.DataFrame) -> Dict[str, pd.Series]:
        return {'rsi': calculate_rsi(data['close'], self.period)}


class MACDIndicator(Indicator):
    """MACD (Moving Average Convergence Divergence) indicator."""

    def __init__(
        self,
        fast: int = MACD_FAST,
        slow: int = MACD_SLOW,
        signal: int = MACD_SIGNAL
    ):
        self.fast = fast
        self.slow = slow
        self.signal = signal

    def calculate(self, data: pd.DataFrame) -> Dict[str, pd.Series]:
        """Calculate all MACD components: line, signal, histogram."""
        macd_line, signal_line, histogram = calculate_macd(
            data['close'], self.fast, self.slow, self.signal
        )
        return {
            'macd': macd_line,
            'macdSignal': signal_line,
            'macdHistogram': histogram,
        }


class BollingerBandsIndicator(Indicator):
    """Bollinger Bands (upper, middle, lower) around the SMA."""

    def __init__(self, period: int = BOLLINGER_PERIOD, std_dev: float = BOLLINGER_STD_DEV):
        self.period = period
        self.std_dev = std_dev

    def calculate(self, data: pd.DataFrame) -> Dict[str, pd.Series]:
        upper, middle, lower = calculate_bollinger_bands(data['close'], self.period, self.std_dev)
        return {
            'bbUpper': upper,
            'bbMiddle': middle,
            'bbLower': lower,
        }


class VolumeSMAIndicator(Indicator):
    """SMA of volume, keyed volumeSMA."""

    def __init__(self, period: int = VOLUME_SMA_PERIOD):
        self.period = period

    def calculate(self, data: pd.DataFrame) -> Dict[str, pd.Series]:
        return {'volumeSMA': calculate_volume_sma(data['volume'], self.period)}


# Export all indicator classes
__all__ = [
    'SMAIndicator',
    'EMAIndicator',
    'RSIIndicator',
    'MACDIndicator',
    'BollingerBandsIndicator',
    'VolumeSMAIndicator',
]
