"""
Base indicator interface.

All indicators should follow this pattern:
1. Calculate one or more keyed series from OHLCV data
2. Leave warm-up bars as NaN; the strategy's IndicatorSpec decides where
   evaluation starts
"""
from abc import ABC, abstractmethod
from typing import Dict
import pandas as pd


class Indicator(ABC):
    """
    Base class for all indicators.

    Indicators calculate values from bar data that buy/sell conditions read
    by key. They do not generate signals directly.
    """

    @abstractmethod
    def calculate(self, data: pd.DataFrame) -> Dict[str, pd.Series]:
        """
        Calculate indicator values from bar data.

        Args:
            data: Positionally indexed DataFrame with open/high/low/close/volume columns

        Returns:
            Mapping of indicator key -> series (same index as data)
        """
        pass
