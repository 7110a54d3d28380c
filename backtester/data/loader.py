"""
Data loader for OHLCV CSV files.

Loads local CSV files with a date index and Open/High/Low/Close/Volume
columns, with support for:
- Date range filtering
- Conversion to Bar sequences for the backtester
"""
import pandas as pd
from pathlib import Path
from typing import List, Optional, Union
from datetime import datetime

from .bars import OHLC_COLUMNS, bars_from_dataframe
from ..shared.types import Bar


class DataLoader:
    """
    Loads OHLCV data from a CSV file.

    Supports date range filtering. No network access: acquiring the data is
    the caller's concern.
    """

    def __init__(self, data_path: Union[str, Path]):
        """
        Initialize the data loader.

        Args:
            data_path: Path to the CSV file containing the data
        """
        self.data_path = Path(data_path)
        if not self.data_path.exists():
            raise FileNotFoundError(f"Data file not found: {self.data_path}")

    def load(
        self,
        start_date: Optional[Union[str, datetime, pd.Timestamp]] = None,
        end_date: Optional[Union[str, datetime, pd.Timestamp]] = None,
    ) -> pd.DataFrame:
        """
        Load data from CSV file with optional filtering.

        Args:
            start_date: Start date for filtering (inclusive). If None, no start filter.
            end_date: End date for filtering (inclusive). If None, no end filter.

        Returns:
            DataFrame with datetime index and OHLCV columns, sorted ascending

        Raises:
            ValueError: If the file lacks Open/High/Low/Close columns
        """
        df = pd.read_csv(
            self.data_path,
            index_col=0,
            parse_dates=True,
        )

        if not isinstance(df.index, pd.DatetimeIndex):
            df.index = pd.to_datetime(df.index)

        lower = {str(c).lower() for c in df.columns}
        missing = [name for name in OHLC_COLUMNS if name not in lower]
        if missing:
            raise ValueError(f"Columns {missing} not found. Available: {list(df.columns)}")

        df = df.sort_index()

        if start_date is not None:
            start_date = pd.to_datetime(start_date)
            df = df[df.index >= start_date]

        if end_date is not None:
            end_date = pd.to_datetime(end_date)
            df = df[df.index <= end_date]

        return df

    def load_bars(
        self,
        start_date: Optional[Union[str, datetime, pd.Timestamp]] = None,
        end_date: Optional[Union[str, datetime, pd.Timestamp]] = None,
    ) -> List[Bar]:
        """Load the file and convert it to Bars in ascending time order."""
        return bars_from_dataframe(self.load(start_date=start_date, end_date=end_date))
