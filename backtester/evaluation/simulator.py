"""
Long-only trade simulator.

Walks the bar series once with a two-state machine (flat / long):
- flat + buy condition  -> BUY at the bar's close, go long
- long + sell condition -> SELL at the bar's close, go flat
At most one trade per bar, so BUY and SELL always alternate. A position
still open at the end of the series is left open (no forced exit).
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .statistics import percent_change
from ..indicators.engine import IndicatorSeries, indicator_values_at
from ..shared.defaults import (
    BUY_MARKER_COLOR, BUY_MARKER_SHAPE, BUY_MARKER_LABEL,
    SELL_MARKER_COLOR, SELL_MARKER_SHAPE, SELL_MARKER_LABEL,
)
from ..shared.types import Bar, Marker, MarkerPosition, Trade, TradeAction
from ..signals.conditions import ConditionEvaluator
from ..signals.strategy import StrategyDescriptor

logger = logging.getLogger(__name__)


class PositionState(Enum):
    """State of the simulated position."""
    FLAT = "flat"
    LONG = "long"


@dataclass
class SimulationOutcome:
    """Trade log and chart markers of one simulation pass."""
    trades: List[Trade] = field(default_factory=list)
    buy_markers: List[Marker] = field(default_factory=list)
    sell_markers: List[Marker] = field(default_factory=list)
    final_state: PositionState = PositionState.FLAT


class TradeSimulator:
    """Applies a strategy's buy/sell conditions bar by bar."""

    def __init__(self, evaluator: Optional[ConditionEvaluator] = None):
        self.evaluator = evaluator or ConditionEvaluator()

    def simulate(
        self,
        bars: Sequence[Bar],
        indicators: IndicatorSeries,
        strategy: StrategyDescriptor,
    ) -> SimulationOutcome:
        """
        Run the state machine over bars.

        Evaluation starts at the strategy's warm-up period (largest configured
        indicator period, 0 without indicators).
        """
        outcome = SimulationOutcome()
        state = PositionState.FLAT
        entry_price = 0.0

        start_index = strategy.indicators.warmup_period()
        buy_condition = strategy.conditions.buy
        sell_condition = strategy.conditions.sell

        for i in range(start_index, len(bars)):
            bar = bars[i]
            values = indicator_values_at(indicators, i)

            if state is PositionState.FLAT:
                if self.evaluator.evaluate(buy_condition, values, bars, i):
                    outcome.trades.append(Trade(
                        time=bar.time,
                        action=TradeAction.BUY,
                        price=bar.close,
                        index=i,
                    ))
                    outcome.buy_markers.append(Marker(
                        time=bar.time,
                        position=MarkerPosition.BELOW_BAR,
                        label=BUY_MARKER_LABEL,
                        color=BUY_MARKER_COLOR,
                        shape=BUY_MARKER_SHAPE,
                    ))
                    state = PositionState.LONG
                    entry_price = bar.close
                    logger.debug(f"BUY at index {i} price {bar.close}")

            elif self.evaluator.evaluate(sell_condition, values, bars, i):
                profit = bar.close - entry_price
                outcome.trades.append(Trade(
                    time=bar.time,
                    action=TradeAction.SELL,
                    price=bar.close,
                    index=i,
                    profit=profit,
                    profit_percent=percent_change(entry_price, bar.close),
                ))
                outcome.sell_markers.append(Marker(
                    time=bar.time,
                    position=MarkerPosition.ABOVE_BAR,
                    label=SELL_MARKER_LABEL,
                    color=SELL_MARKER_COLOR,
                    shape=SELL_MARKER_SHAPE,
                ))
                state = PositionState.FLAT
                logger.debug(f"SELL at index {i} price {bar.close} profit {profit:.4f}")

        outcome.final_state = state
        return outcome
