"""
Data loading module.

Loads OHLCV data from local CSV files and converts between pandas
DataFrames and Bar sequences.
"""
from .loader import DataLoader
from .bars import bars_from_dataframe, bars_to_dataframe, coerce_bars

__all__ = [
    'DataLoader',
    'bars_from_dataframe',
    'bars_to_dataframe',
    'coerce_bars',
]
