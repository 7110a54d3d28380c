"""
Tests for technical indicator formulas (SMA, EMA, RSI, MACD, Bollinger, Volume SMA).
"""
import math

import pytest
import pandas as pd
import numpy as np
from backtester.indicators.technical import (
    calculate_sma,
    calculate_ema,
    calculate_rsi,
    calculate_macd,
    calculate_bollinger_bands,
    calculate_volume_sma,
)


@pytest.fixture
def sample_prices():
    """Create sample price data for testing."""
    rng = np.random.default_rng(42)
    # Create simple uptrend with noise
    return pd.Series(100 + np.arange(100) * 0.5 + rng.normal(0, 2, 100))


class TestSMA:
    """Test SMA calculation."""

    def test_sma_warmup_is_nan(self):
        sma = calculate_sma(pd.Series([1.0, 2.0, 3.0, 4.0, 5.0]), 3)
        assert sma.iloc[:2].isna().all()
        assert sma.iloc[2:].notna().all()

    def test_sma_values(self):
        sma = calculate_sma(pd.Series([1.0, 2.0, 3.0, 4.0, 5.0]), 3)
        assert sma.iloc[2] == pytest.approx(2.0)
        assert sma.iloc[3] == pytest.approx(3.0)
        assert sma.iloc[4] == pytest.approx(4.0)

    def test_sma_length(self, sample_prices):
        assert len(calculate_sma(sample_prices, 20)) == len(sample_prices)

    def test_period_longer_than_series_is_all_nan(self):
        sma = calculate_sma(pd.Series([1.0, 2.0]), 5)
        assert sma.isna().all()

    def test_sma_is_pure(self, sample_prices):
        """Recomputing on the same input yields identical series."""
        pd.testing.assert_series_equal(calculate_sma(sample_prices, 10), calculate_sma(sample_prices, 10))


class TestEMA:
    """Test EMA calculation."""

    def test_ema_seeded_with_first_value(self):
        ema = calculate_ema(pd.Series([10.0, 20.0, 30.0]), 3)
        # k = 2 / (3 + 1) = 0.5
        assert ema.iloc[0] == pytest.approx(10.0)
        assert ema.iloc[1] == pytest.approx(15.0)
        assert ema.iloc[2] == pytest.approx(22.5)

    def test_ema_has_no_warmup(self, sample_prices):
        ema = calculate_ema(sample_prices, 20)
        assert ema.notna().all()
        assert len(ema) == len(sample_prices)

    def test_ema_convergence(self):
        """EMA of a constant series stays at the constant."""
        ema = calculate_ema(pd.Series([50.0] * 30), 10)
        assert np.allclose(ema.values, 50.0)

    def test_ema_is_pure(self, sample_prices):
        pd.testing.assert_series_equal(calculate_ema(sample_prices, 12), calculate_ema(sample_prices, 12))


class TestRSI:
    """Test RSI calculation."""

    def test_rsi_range(self, sample_prices):
        """RSI should be between 0 and 100."""
        valid_rsi = calculate_rsi(sample_prices, 14).dropna()
        assert valid_rsi.min() >= 0
        assert valid_rsi.max() <= 100

    def test_rsi_length_and_warmup(self, sample_prices):
        rsi = calculate_rsi(sample_prices, 14)
        assert len(rsi) == len(sample_prices)
        assert rsi.iloc[:14].isna().all()
        assert rsi.iloc[14:].notna().all()

    def test_rsi_known_values(self):
        # Changes: +2, -1, +3
        rsi = calculate_rsi(pd.Series([10.0, 12.0, 11.0, 14.0]), 2)
        # i=2: avg gain (2+0)/2=1, avg loss (0+1)/2=0.5 -> RS=2
        assert rsi.iloc[2] == pytest.approx(100 - 100 / 3)
        # i=3: avg gain (0+3)/2=1.5, avg loss (1+0)/2=0.5 -> RS=3
        assert rsi.iloc[3] == pytest.approx(75.0)

    def test_only_gains_saturates_at_100(self):
        rsi = calculate_rsi(pd.Series(np.arange(100.0, 130.0)), 14)
        assert (rsi.dropna() == 100.0).all()

    def test_only_losses_is_zero(self):
        rsi = calculate_rsi(pd.Series(np.arange(130.0, 100.0, -1.0)), 14)
        assert (rsi.dropna() == 0.0).all()

    def test_flat_prices_resolve_to_50(self):
        """No gains and no losses: RS treated as 1, RSI 50 (never NaN)."""
        rsi = calculate_rsi(pd.Series([50.0] * 30), 14)
        valid = rsi.iloc[14:]
        assert valid.notna().all()
        assert (valid == 50.0).all()

    def test_rsi_period(self, sample_prices):
        """Different periods should give different results."""
        rsi7 = calculate_rsi(sample_prices, 7)
        rsi14 = calculate_rsi(sample_prices, 14)
        assert not rsi7.dropna().equals(rsi14.dropna())

    def test_gain_after_flat_window(self):
        """Window with a single gain and otherwise flat prices saturates."""
        closes = pd.Series([50.0] * 20 + [51.0])
        rsi = calculate_rsi(closes, 14)
        assert rsi.iloc[19] == 50.0
        assert rsi.iloc[20] == 100.0


class TestMACD:
    """Test MACD calculation."""

    def test_macd_components(self, sample_prices):
        macd_line, signal_line, histogram = calculate_macd(sample_prices, 12, 26, 9)
        assert len(macd_line) == len(signal_line) == len(histogram) == len(sample_prices)
        pd.testing.assert_series_equal(histogram, macd_line - signal_line)

    def test_macd_line_is_ema_difference(self, sample_prices):
        macd_line, _, _ = calculate_macd(sample_prices, 12, 26, 9)
        expected = calculate_ema(sample_prices, 12) - calculate_ema(sample_prices, 26)
        pd.testing.assert_series_equal(macd_line, expected)

    def test_signal_is_ema_of_macd_line(self, sample_prices):
        macd_line, signal_line, _ = calculate_macd(sample_prices, 12, 26, 9)
        pd.testing.assert_series_equal(signal_line, calculate_ema(macd_line, 9))

    def test_macd_starts_at_zero(self, sample_prices):
        macd_line, signal_line, histogram = calculate_macd(sample_prices)
        assert macd_line.iloc[0] == pytest.approx(0.0)
        assert signal_line.iloc[0] == pytest.approx(0.0)
        assert histogram.iloc[0] == pytest.approx(0.0)


class TestBollingerBands:
    """Test Bollinger Bands calculation."""

    def test_known_values(self):
        upper, middle, lower = calculate_bollinger_bands(pd.Series([1.0, 2.0, 3.0, 4.0, 5.0]), 5, 2)
        # Population variance of 1..5 around 3 is 2
        assert middle.iloc[4] == pytest.approx(3.0)
        assert upper.iloc[4] == pytest.approx(3.0 + 2 * math.sqrt(2))
        assert lower.iloc[4] == pytest.approx(3.0 - 2 * math.sqrt(2))

    def test_warmup(self, sample_prices):
        upper, middle, lower = calculate_bollinger_bands(sample_prices, 20, 2)
        for series in (upper, middle, lower):
            assert series.iloc[:19].isna().all()
            assert series.iloc[19:].notna().all()

    def test_band_ordering(self, sample_prices):
        upper, middle, lower = calculate_bollinger_bands(sample_prices, 20, 2)
        assert (upper.dropna() >= middle.dropna()).all()
        assert (middle.dropna() >= lower.dropna()).all()

    def test_middle_is_sma(self, sample_prices):
        _, middle, _ = calculate_bollinger_bands(sample_prices, 20, 2)
        pd.testing.assert_series_equal(middle, calculate_sma(sample_prices, 20))

    def test_flat_prices_collapse_bands(self):
        upper, middle, lower = calculate_bollinger_bands(pd.Series([50.0] * 25), 20, 2)
        assert upper.iloc[24] == pytest.approx(50.0)
        assert lower.iloc[24] == pytest.approx(50.0)


class TestVolumeSMA:
    def test_volume_sma(self):
        vol = calculate_volume_sma(pd.Series([100.0, 200.0, 300.0, 400.0]), 2)
        assert math.isnan(vol.iloc[0])
        assert vol.iloc[1] == pytest.approx(150.0)
        assert vol.iloc[3] == pytest.approx(350.0)
