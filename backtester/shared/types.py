"""
Shared types for backtesting modules.

This module consolidates the bar, trade, marker and report types that flow
between the indicator engine, the simulator, the statistics calculator and
the chart layer.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd


@dataclass(frozen=True)
class Bar:
    """One OHLCV sample for a fixed time interval."""
    time: Any
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


class TradeAction(Enum):
    """Side of a simulated trade (long-only: BUY opens, SELL closes)."""
    BUY = "BUY"
    SELL = "SELL"


class MarkerPosition(Enum):
    """Where the chart layer draws a marker relative to its bar."""
    BELOW_BAR = "belowBar"
    ABOVE_BAR = "aboveBar"


@dataclass
class Trade:
    """
    A single entry or exit in the trade log.

    BUY trades never carry profit fields; SELL trades always do, computed
    against the most recent BUY.
    """
    time: Any
    action: TradeAction
    price: float
    index: int
    profit: Optional[float] = None
    profit_percent: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "time": self.time,
            "action": self.action.value,
            "price": self.price,
            "index": self.index,
        }
        if self.action is TradeAction.SELL:
            out["profit"] = self.profit
            out["profitPercent"] = self.profit_percent
        return out


@dataclass
class Marker:
    """Chart marker for one trade. Carries no simulation state."""
    time: Any
    position: MarkerPosition
    label: str
    color: str
    shape: str
    size: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "position": self.position.value,
            "color": self.color,
            "shape": self.shape,
            "text": self.label,
            "size": self.size,
        }


@dataclass
class StatsReport:
    """Aggregate performance metrics derived from a trade log."""
    total_trades: int = 0
    buy_trades: int = 0
    sell_trades: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0  # Percent of completed round trips that won
    avg_win: float = 0.0
    avg_loss: float = 0.0  # Mean absolute loss (positive number)
    total_profit: float = 0.0
    total_profit_percent: float = 0.0
    max_drawdown: float = 0.0  # Over cumulative realized profit

    @property
    def completed_trades(self) -> int:
        return self.wins + self.losses

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTrades": self.total_trades,
            "buyTrades": self.buy_trades,
            "sellTrades": self.sell_trades,
            "wins": self.wins,
            "losses": self.losses,
            "winRate": self.win_rate,
            "avgWin": self.avg_win,
            "avgLoss": self.avg_loss,
            "totalProfit": self.total_profit,
            "totalProfitPercent": self.total_profit_percent,
            "maxDrawdown": self.max_drawdown,
        }


@dataclass
class BacktestResult:
    """Everything produced by one backtest run."""
    trades: List[Trade]
    buy_markers: List[Marker]
    sell_markers: List[Marker]
    stats: StatsReport
    strategy_name: str
    indicators: Dict[str, pd.Series] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Output contract consumed by the rendering layer."""
        return {
            "trades": [t.to_dict() for t in self.trades],
            "buyMarkers": [m.to_dict() for m in self.buy_markers],
            "sellMarkers": [m.to_dict() for m in self.sell_markers],
            "stats": self.stats.to_dict(),
            "strategyName": self.strategy_name,
        }
