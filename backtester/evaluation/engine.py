"""
Backtest engine: one strategy over one bar series.

descriptor -> indicators -> simulation -> statistics -> result, in a single
pass. All working state lives inside run(); a Backtester only holds its
collaborators, so separate runs (or separate instances in a parameter sweep)
never share state.
"""
import json
import logging
from typing import Any, Mapping, Optional

from .simulator import TradeSimulator
from .statistics import calculate_statistics
from ..data.bars import coerce_bars
from ..indicators.engine import IndicatorEngine
from ..shared.types import BacktestResult
from ..signals.conditions import ConditionEvaluator
from ..signals.strategy import parse_strategy

logger = logging.getLogger(__name__)


def _embedded_bars(strategy: Any) -> Any:
    """Bars carried under a strategy's 'data' key, if any."""
    if isinstance(strategy, str):
        try:
            strategy = json.loads(strategy)
        except json.JSONDecodeError:
            return None
    if isinstance(strategy, Mapping):
        return strategy.get('data')
    return None


class Backtester:
    """Runs strategies against bar series."""

    def __init__(
        self,
        indicator_engine: Optional[IndicatorEngine] = None,
        evaluator: Optional[ConditionEvaluator] = None,
    ):
        self.indicator_engine = indicator_engine or IndicatorEngine()
        self.simulator = TradeSimulator(evaluator or ConditionEvaluator())

    def run(self, strategy: Any, bars: Any = None) -> BacktestResult:
        """
        Backtest a strategy.

        Args:
            strategy: StrategyDescriptor, mapping or JSON string
            bars: Sequence of Bars / bar mappings or an OHLCV DataFrame.
                If omitted, bars are read from the strategy's 'data' key.

        Returns:
            BacktestResult with trades, markers, stats and indicator series

        Raises:
            InvalidStrategyError: If the strategy cannot be interpreted
            StrategyValidationError: If the strategy is missing required fields
            ValueError: If the bars are malformed
        """
        descriptor = parse_strategy(strategy)
        if bars is None:
            bars = _embedded_bars(strategy)
        bar_list = coerce_bars(bars)

        indicators = self.indicator_engine.calculate(bar_list, descriptor.indicators)
        outcome = self.simulator.simulate(bar_list, indicators, descriptor)
        stats = calculate_statistics(outcome.trades)

        logger.info(
            f"Backtest '{descriptor.name}': {len(bar_list)} bars, "
            f"{stats.total_trades} trades, win rate {stats.win_rate:.1f}%, "
            f"total profit {stats.total_profit:.2f}"
        )

        return BacktestResult(
            trades=outcome.trades,
            buy_markers=outcome.buy_markers,
            sell_markers=outcome.sell_markers,
            stats=stats,
            strategy_name=descriptor.name,
            indicators=indicators,
        )


def run_backtest(strategy: Any, bars: Any = None) -> BacktestResult:
    """Convenience wrapper: fresh Backtester per call."""
    return Backtester().run(strategy, bars)
