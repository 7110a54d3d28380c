"""
Strategy catalog: read-only registry of named strategy descriptors.

The registry is constructed by the caller and handed to whatever needs it;
there is no module-level mutable catalog. default_registry() builds a fresh
registry of the pre-built strategies on each call.
"""
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .config_loader import load_strategies_from_dir
from .strategy import StrategyDescriptor, strategy_from_dict


class StrategyRegistry:
    """Immutable mapping of strategy id -> descriptor, with optional categories."""

    def __init__(
        self,
        strategies: Mapping[str, StrategyDescriptor],
        categories: Optional[Mapping[str, List[str]]] = None,
    ):
        self._strategies = MappingProxyType(dict(strategies))
        self._categories = MappingProxyType(
            {name: tuple(ids) for name, ids in (categories or {}).items()}
        )

    def get(self, strategy_id: str) -> StrategyDescriptor:
        """
        Look up a strategy by id.

        Raises:
            KeyError: If the id is unknown (message lists the available ids)
        """
        try:
            return self._strategies[strategy_id]
        except KeyError:
            raise KeyError(
                f"Unknown strategy '{strategy_id}'. Available: {', '.join(self.ids())}"
            ) from None

    def ids(self) -> List[str]:
        return list(self._strategies)

    def all_strategies(self) -> List[Tuple[str, StrategyDescriptor]]:
        return list(self._strategies.items())

    def categories(self) -> List[str]:
        return list(self._categories)

    def by_category(self, category: str) -> List[str]:
        """Strategy ids in a category (empty list for unknown categories)."""
        return [sid for sid in self._categories.get(category, ()) if sid in self._strategies]

    def with_strategy(
        self,
        strategy_id: str,
        strategy: StrategyDescriptor,
        category: Optional[str] = None,
    ) -> 'StrategyRegistry':
        """New registry with strategy_id added (or replaced)."""
        strategies = dict(self._strategies)
        strategies[strategy_id] = strategy
        categories = {name: list(ids) for name, ids in self._categories.items()}
        if category is not None and strategy_id not in categories.setdefault(category, []):
            categories[category].append(strategy_id)
        return StrategyRegistry(strategies, categories)

    def without_strategy(self, strategy_id: str) -> 'StrategyRegistry':
        """New registry with strategy_id removed (no-op if absent)."""
        strategies = {k: v for k, v in self._strategies.items() if k != strategy_id}
        categories = {
            name: [sid for sid in ids if sid != strategy_id]
            for name, ids in self._categories.items()
        }
        return StrategyRegistry(strategies, categories)

    def __contains__(self, strategy_id: object) -> bool:
        return strategy_id in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    def __iter__(self) -> Iterator[str]:
        return iter(self._strategies)

    @classmethod
    def from_directory(cls, config_dir: Union[str, Path]) -> 'StrategyRegistry':
        """Registry of every YAML strategy in a directory, keyed by file stem."""
        return cls(load_strategies_from_dir(config_dir))


DEFAULT_CATEGORIES: Dict[str, List[str]] = {
    'moving_average': ['ma_crossover', 'ma_crossover_aggressive'],
    'rsi': ['rsi_oversold_overbought', 'rsi_aggressive'],
    'macd': ['macd_crossover', 'macd_aggressive'],
    'bollinger': ['bollinger_bounce', 'bollinger_squeeze'],
    'combined': ['rsi_ma_combined', 'macd_rsi_combined'],
    'high_frequency': ['high_frequency'],
    'mean_reversion': ['mean_reversion'],
    'momentum': ['momentum'],
}


def _default_strategies() -> Dict[str, Dict]:
    return {
        # Moving average crossovers
        'ma_crossover': {
            'name': "Moving Average Crossover",
            'description': "Buy when short MA crosses above long MA, sell when it crosses below",
            'indicators': {'sma': [5, 20]},
            'conditions': {
                'buy': lambda v, bars, i: v['sma5'] > v['sma20'],
                'sell': lambda v, bars, i: v['sma5'] < v['sma20'],
            },
        },
        'ma_crossover_aggressive': {
            'name': "Aggressive MA Crossover",
            'description': "More sensitive moving average crossover with shorter periods",
            'indicators': {'sma': [3, 8]},
            'conditions': {
                'buy': lambda v, bars, i: v['sma3'] > v['sma8'],
                'sell': lambda v, bars, i: v['sma3'] < v['sma8'],
            },
        },

        # RSI
        'rsi_oversold_overbought': {
            'name': "RSI Oversold/Overbought",
            'description': "Buy when RSI crosses above 30, sell when it crosses below 70",
            'indicators': {'rsi': {'period': 14}},
            'conditions': {
                'buy': lambda v, bars, i: v['rsi'] > 30,
                'sell': lambda v, bars, i: v['rsi'] < 70,
            },
        },
        'rsi_aggressive': {
            'name': "Aggressive RSI",
            'description': "More frequent RSI signals with wider ranges",
            'indicators': {'rsi': {'period': 14}},
            'conditions': {
                'buy': lambda v, bars, i: v['rsi'] > 35,
                'sell': lambda v, bars, i: v['rsi'] < 65,
            },
        },

        # MACD
        'macd_crossover': {
            'name': "MACD Crossover",
            'description': "Buy when MACD crosses above signal line, sell when below",
            'indicators': {'macd': {'fastPeriod': 12, 'slowPeriod': 26, 'signalPeriod': 9}},
            'conditions': {
                'buy': lambda v, bars, i: v['macd'] > v['macdSignal'],
                'sell': lambda v, bars, i: v['macd'] < v['macdSignal'],
            },
        },
        'macd_aggressive': {
            'name': "Aggressive MACD",
            'description': "Faster MACD with shorter periods for more signals",
            'indicators': {'macd': {'fastPeriod': 8, 'slowPeriod': 21, 'signalPeriod': 5}},
            'conditions': {
                'buy': lambda v, bars, i: v['macd'] > v['macdSignal'],
                'sell': lambda v, bars, i: v['macd'] < v['macdSignal'],
            },
        },

        # Bollinger Bands
        'bollinger_bounce': {
            'name': "Bollinger Bands Bounce",
            'description': "Buy when price touches lower band, sell when it touches upper band",
            'indicators': {'bollinger': {'period': 20, 'stdDev': 2}},
            'conditions': {
                'buy': lambda v, bars, i: bars[i].close <= v['bbLower'],
                'sell': lambda v, bars, i: bars[i].close >= v['bbUpper'],
            },
        },
        'bollinger_squeeze': {
            'name': "Bollinger Bands Squeeze",
            'description': "Buy when price breaks above upper band, sell when below lower band",
            'indicators': {'bollinger': {'period': 20, 'stdDev': 2}},
            'conditions': {
                'buy': lambda v, bars, i: bars[i].close > v['bbUpper'],
                'sell': lambda v, bars, i: bars[i].close < v['bbLower'],
            },
        },

        # Combined
        'rsi_ma_combined': {
            'name': "RSI + MA Combined",
            'description': "Combines RSI oversold/overbought with moving average trend",
            'indicators': {'rsi': {'period': 14}, 'sma': [20]},
            'conditions': {
                'buy': "rsi < 30 && close > sma20",
                'sell': "rsi > 70 || close < sma20",
            },
        },
        'macd_rsi_combined': {
            'name': "MACD + RSI Combined",
            'description': "Combines MACD momentum with RSI confirmation",
            'indicators': {
                'macd': {'fastPeriod': 12, 'slowPeriod': 26, 'signalPeriod': 9},
                'rsi': {'period': 14},
            },
            'conditions': {
                'buy': "macd > macdSignal && rsi < 40",
                'sell': "macd < macdSignal && rsi > 60",
            },
        },

        # High frequency
        'high_frequency': {
            'name': "High Frequency Strategy",
            'description': "Very short-term strategy for maximum signals",
            'indicators': {'sma': [3, 8], 'rsi': {'period': 7}},
            'conditions': {
                'buy': "sma3 > sma8 || rsi < 25",
                'sell': "sma3 < sma8 || rsi > 75",
            },
        },

        # Mean reversion
        'mean_reversion': {
            'name': "Mean Reversion",
            'description': "Buy when price is far below moving average, sell when far above",
            'indicators': {'sma': [50]},
            'conditions': {
                'buy': "close < sma50 * 0.95",
                'sell': "close > sma50 * 1.05",
            },
        },

        # Momentum
        'momentum': {
            'name': "Momentum Strategy",
            'description': "Buy on strong upward momentum, sell on downward momentum",
            'indicators': {'ema': [10, 20]},
            'conditions': {
                'buy': lambda v, bars, i: v['ema10'] > v['ema20'] and bars[i].close > bars[i - 1].close,
                'sell': lambda v, bars, i: v['ema10'] < v['ema20'] and bars[i].close < bars[i - 1].close,
            },
        },

        # Simple test
        'simple_test': {
            'name': "Simple Test Strategy",
            'description': "Simple strategy that should generate both buy and sell signals",
            'indicators': {'sma': [10]},
            'conditions': {
                'buy': "close > sma10",
                'sell': "close < sma10",
            },
        },
    }


def default_registry() -> StrategyRegistry:
    """Fresh registry of the pre-built strategies."""
    strategies = {sid: strategy_from_dict(d) for sid, d in _default_strategies().items()}
    return StrategyRegistry(strategies, DEFAULT_CATEGORIES)
