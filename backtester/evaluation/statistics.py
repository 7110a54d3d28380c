"""
Performance statistics over a trade log.

Round trips are paired by position: (trades[0], trades[1]), (trades[2],
trades[3]), ... An unmatched trailing BUY (position still open) is ignored.
Drawdown is tracked over the cumulative realized-profit curve, not a
mark-to-market equity curve.
"""
from typing import Sequence

from ..shared.types import StatsReport, Trade, TradeAction


def percent_change(entry_price: float, exit_price: float) -> float:
    """Profit of a round trip as a percent of the entry price (0 for a zero entry)."""
    if entry_price == 0:
        return 0.0
    return (exit_price - entry_price) / entry_price * 100


def calculate_statistics(trades: Sequence[Trade]) -> StatsReport:
    """
    Reduce a trade log to aggregate performance metrics.

    Wins are round trips with profit > 0; everything else (including
    break-even) counts as a loss. avg_loss is reported as a positive number.
    """
    stats = StatsReport(
        total_trades=len(trades),
        buy_trades=sum(1 for t in trades if t.action is TradeAction.BUY),
        sell_trades=sum(1 for t in trades if t.action is TradeAction.SELL),
    )

    win_sum = 0.0
    loss_sum = 0.0
    peak = 0.0

    for i in range(1, len(trades), 2):
        buy = trades[i - 1]
        sell = trades[i]
        if buy.action is not TradeAction.BUY or sell.action is not TradeAction.SELL:
            continue

        profit = sell.price - buy.price
        stats.total_profit += profit
        stats.total_profit_percent += percent_change(buy.price, sell.price)

        if profit > 0:
            stats.wins += 1
            win_sum += profit
        else:
            stats.losses += 1
            loss_sum += abs(profit)

        peak = max(peak, stats.total_profit)
        stats.max_drawdown = max(stats.max_drawdown, peak - stats.total_profit)

    completed = stats.wins + stats.losses
    stats.win_rate = (stats.wins / completed * 100) if completed else 0.0
    stats.avg_win = (win_sum / stats.wins) if stats.wins else 0.0
    stats.avg_loss = (loss_sum / stats.losses) if stats.losses else 0.0

    return stats
