"""
Backtest evaluation module.

Single-pass, long-only simulation of a strategy over a bar series and the
statistics derived from its trade log.
"""
from .engine import Backtester, run_backtest
from .simulator import TradeSimulator, SimulationOutcome, PositionState
from .statistics import calculate_statistics, percent_change

__all__ = [
    'Backtester',
    'run_backtest',
    'TradeSimulator',
    'SimulationOutcome',
    'PositionState',
    'calculate_statistics',
    'percent_change',
]
