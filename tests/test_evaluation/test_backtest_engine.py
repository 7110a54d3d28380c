"""End-to-end tests for Backtester.run."""
import json

import numpy as np
import pandas as pd
import pytest

from backtester.evaluation.engine import Backtester, run_backtest
from backtester.shared.errors import InvalidStrategyError, StrategyValidationError
from backtester.shared.types import Bar, BacktestResult, TradeAction
from backtester.signals.catalog import default_registry

SMA10_STRATEGY = {
    "name": "SMA10",
    "indicators": {"sma": [10]},
    "conditions": {"buy": "close > sma10", "sell": "close < sma10"},
}


def _bars(closes):
    start = pd.Timestamp("2024-01-01")
    return [
        Bar(time=start + pd.Timedelta(days=i), open=c, high=c + 1, low=c - 1, close=c, volume=1000.0)
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def rising_bars():
    return _bars([100.0 + i for i in range(25)])


@pytest.fixture
def noisy_bars():
    rng = np.random.default_rng(7)
    closes = 100 + np.cumsum(rng.normal(0, 1.5, 150))
    return _bars([float(c) for c in closes])


class TestBacktester:
    def test_rising_series_single_buy_after_warmup(self, rising_bars):
        result = Backtester().run(SMA10_STRATEGY, rising_bars)
        assert isinstance(result, BacktestResult)
        assert len(result.trades) == 1
        buy = result.trades[0]
        assert buy.action is TradeAction.BUY
        assert buy.index == 10
        assert buy.price == 110.0
        assert result.stats.sell_trades == 0
        assert result.stats.total_profit == 0.0
        assert result.strategy_name == "SMA10"

    def test_flat_prices_rsi_never_nan(self):
        bars = _bars([50.0] * 40)
        strategy = default_registry().get("rsi_oversold_overbought")
        result = Backtester().run(strategy, bars)
        rsi = result.indicators["rsi"]
        assert rsi.iloc[14:].notna().all()
        assert (rsi.iloc[14:] == 50.0).all()
        assert result.trades[0].index == 14
        assert result.stats.total_profit == 0.0

    def test_json_string_with_embedded_data(self):
        payload = dict(SMA10_STRATEGY)
        payload["data"] = [
            {"time": f"2024-01-{i + 1:02d}", "open": 100 + i, "high": 101 + i, "low": 99 + i, "close": 100 + i}
            for i in range(15)
        ]
        result = Backtester().run(json.dumps(payload))
        assert [t.index for t in result.trades] == [10]
        assert result.trades[0].time == "2024-01-11"

    def test_mapping_with_embedded_data(self, rising_bars):
        payload = dict(SMA10_STRATEGY, data=rising_bars)
        assert len(Backtester().run(payload).trades) == 1

    def test_explicit_bars_override_embedded(self, rising_bars):
        payload = dict(SMA10_STRATEGY, data=rising_bars[:5])
        assert len(Backtester().run(payload, rising_bars).trades) == 1

    def test_dataframe_input(self, rising_bars):
        index = pd.date_range("2024-01-01", periods=25, freq="D")
        closes = [100.0 + i for i in range(25)]
        df = pd.DataFrame(
            {"Open": closes, "High": closes, "Low": closes, "Close": closes, "Volume": 1000},
            index=index,
        )
        result = Backtester().run(SMA10_STRATEGY, df)
        assert result.trades[0].index == 10
        assert result.trades[0].time == index[10]

    def test_numpy_integer_prices(self):
        closes = np.arange(100, 125)
        bars = [
            Bar(time=i, open=closes[i], high=closes[i], low=closes[i], close=closes[i], volume=np.int64(1000))
            for i in range(len(closes))
        ]
        strategy = {
            "name": "Above 110",
            "indicators": {},
            "conditions": {"buy": "close > 110", "sell": "close < 100"},
        }
        result = Backtester().run(strategy, bars)
        assert [t.index for t in result.trades] == [11]
        assert type(result.trades[0].price) is float

    def test_no_bars_yields_empty_result(self):
        result = Backtester().run(SMA10_STRATEGY)
        assert result.trades == []
        assert result.stats.total_trades == 0

    def test_to_dict_contract(self, noisy_bars):
        result = run_backtest(default_registry().get("simple_test"), noisy_bars)
        out = result.to_dict()
        assert set(out) == {"trades", "buyMarkers", "sellMarkers", "stats", "strategyName"}
        assert out["strategyName"] == "Simple Test Strategy"
        assert len(out["buyMarkers"]) == result.stats.buy_trades
        assert len(out["sellMarkers"]) == result.stats.sell_trades
        for trade in out["trades"]:
            if trade["action"] == "SELL":
                assert "profit" in trade and "profitPercent" in trade
            else:
                assert "profit" not in trade
        if out["buyMarkers"]:
            assert out["buyMarkers"][0]["position"] == "belowBar"
            assert out["buyMarkers"][0]["text"] == "Buy"

    def test_trades_alternate(self, noisy_bars):
        result = run_backtest(default_registry().get("high_frequency"), noisy_bars)
        actions = [t.action for t in result.trades]
        assert actions[::2] == [TradeAction.BUY] * len(actions[::2])
        assert actions[1::2] == [TradeAction.SELL] * len(actions[1::2])

    def test_sell_profit_matches_previous_buy(self, noisy_bars):
        result = run_backtest(default_registry().get("ma_crossover"), noisy_bars)
        for buy, sell in zip(result.trades[::2], result.trades[1::2]):
            assert sell.profit == pytest.approx(sell.price - buy.price)

    def test_independent_runs(self, noisy_bars):
        backtester = Backtester()
        strategy = default_registry().get("macd_crossover")
        first = backtester.run(strategy, noisy_bars)
        second = backtester.run(strategy, noisy_bars)
        assert first.to_dict() == second.to_dict()

    @pytest.mark.parametrize("strategy_id", sorted(default_registry().ids()))
    def test_every_catalog_strategy_runs(self, strategy_id, noisy_bars):
        result = run_backtest(default_registry().get(strategy_id), noisy_bars)
        assert result.stats.total_trades == len(result.trades)
        assert 0.0 <= result.stats.win_rate <= 100.0

    def test_invalid_strategy_string(self, rising_bars):
        with pytest.raises(InvalidStrategyError):
            Backtester().run("not a strategy", rising_bars)

    def test_missing_fields(self, rising_bars):
        with pytest.raises(StrategyValidationError):
            Backtester().run({"name": "x"}, rising_bars)

    def test_malformed_bars(self):
        with pytest.raises(ValueError):
            Backtester().run(SMA10_STRATEGY, [{"close": 1.0}])
