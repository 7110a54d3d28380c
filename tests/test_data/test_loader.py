"""Tests for the CSV data loader."""
import pandas as pd
import pytest

from backtester.data.loader import DataLoader


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "prices.csv"
    index = pd.date_range("2024-01-01", periods=10, freq="D")
    df = pd.DataFrame(
        {
            "Open": [100.0 + i for i in range(10)],
            "High": [101.0 + i for i in range(10)],
            "Low": [99.0 + i for i in range(10)],
            "Close": [100.5 + i for i in range(10)],
            "Volume": [1000 + i for i in range(10)],
        },
        index=index,
    )
    # Written in reverse to check sorting
    df.iloc[::-1].to_csv(path, index_label="Date")
    return path


class TestDataLoader:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DataLoader(tmp_path / "missing.csv")

    def test_load_sorted_with_datetime_index(self, csv_path):
        df = DataLoader(csv_path).load()
        assert isinstance(df.index, pd.DatetimeIndex)
        assert df.index.is_monotonic_increasing
        assert len(df) == 10

    def test_date_filter_inclusive(self, csv_path):
        df = DataLoader(csv_path).load(start_date="2024-01-03", end_date="2024-01-05")
        assert list(df.index) == list(pd.date_range("2024-01-03", "2024-01-05", freq="D"))

    def test_load_bars(self, csv_path):
        bars = DataLoader(csv_path).load_bars(start_date="2024-01-09")
        assert len(bars) == 2
        assert bars[0].close == 108.5
        assert bars[0].volume == 1008.0
        assert bars[0].time == pd.Timestamp("2024-01-09")

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("Date,Close\n2024-01-01,1.0\n")
        with pytest.raises(ValueError, match="not found"):
            DataLoader(path).load()
