"""
Reporting module: chart rendering of backtest results.
"""
from .chart import render_backtest_chart

__all__ = ['render_backtest_chart']
