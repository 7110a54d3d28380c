"""Tests for YAML strategy loading."""
from pathlib import Path

import pytest

from backtester.signals.config_loader import load_strategies_from_dir, load_strategy_from_yaml
from backtester.shared.errors import InvalidStrategyError, StrategyValidationError

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestLoadStrategyFromYaml:
    def test_loads_descriptor(self, tmp_path):
        path = _write(tmp_path, "dip.yaml", (
            "name: Dip Buyer\n"
            "description: Buy RSI dips\n"
            "indicators:\n"
            "  rsi:\n"
            "    period: 7\n"
            "  sma: [20]\n"
            "conditions:\n"
            "  buy: \"rsi < 30 && close > sma20\"\n"
            "  sell: \"rsi > 70\"\n"
        ))
        strategy = load_strategy_from_yaml(path)
        assert strategy.name == "Dip Buyer"
        assert strategy.indicators.rsi.period == 7
        assert strategy.indicators.sma == (20,)
        assert strategy.conditions.buy.expression == "rsi < 30 && close > sma20"

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = _write(tmp_path, "trend.yaml", (
            "indicators:\n"
            "  ema: [10]\n"
            "conditions:\n"
            "  buy: \"close > ema10\"\n"
            "  sell: \"close < ema10\"\n"
        ))
        assert load_strategy_from_yaml(path).name == "trend"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_strategy_from_yaml(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        with pytest.raises(InvalidStrategyError, match="Empty"):
            load_strategy_from_yaml(_write(tmp_path, "empty.yaml", ""))

    def test_non_mapping_document(self, tmp_path):
        with pytest.raises(InvalidStrategyError):
            load_strategy_from_yaml(_write(tmp_path, "list.yaml", "- a\n- b\n"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(InvalidStrategyError, match="Invalid YAML"):
            load_strategy_from_yaml(_write(tmp_path, "bad.yaml", "name: [unclosed\n"))

    def test_missing_conditions(self, tmp_path):
        path = _write(tmp_path, "half.yaml", "name: Half\nindicators: {}\n")
        with pytest.raises(StrategyValidationError) as exc:
            load_strategy_from_yaml(path)
        assert exc.value.missing_fields == ["conditions"]


class TestBundledConfigs:
    def test_all_bundled_configs_load(self):
        strategies = load_strategies_from_dir(CONFIG_DIR)
        assert set(strategies) == {"rsi_ma_combined", "macd_crossover", "bollinger_volume", "ema_trend"}

    def test_snake_case_macd_keys(self):
        strategy = load_strategy_from_yaml(CONFIG_DIR / "macd_crossover.yaml")
        assert strategy.indicators.macd.slow_period == 26
        assert strategy.indicators.warmup_period() == 26

    def test_bollinger_volume(self):
        strategy = load_strategy_from_yaml(CONFIG_DIR / "bollinger_volume.yaml")
        assert strategy.indicators.bollinger.std_dev == 2.0
        assert strategy.indicators.volume.period == 20

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_strategies_from_dir(tmp_path / "missing")

    def test_yml_extension(self, tmp_path):
        _write(tmp_path, "one.yml", "indicators: {}\nconditions:\n  buy: \"true\"\n  sell: \"false\"\n")
        assert list(load_strategies_from_dir(tmp_path)) == ["one"]
