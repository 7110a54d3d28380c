"""
Chart rendering for backtest results.

Draws the close price with overlay indicators (SMA, EMA, Bollinger Bands),
oscillators (RSI, MACD) on a lower panel when present, and buy/sell markers
at the bars where trades happened.
"""
import matplotlib.pyplot as plt
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..shared.types import BacktestResult, Bar, TradeAction

OVERLAY_PREFIXES = ('sma', 'ema', 'bb')
OSCILLATOR_KEYS = ('rsi', 'macd', 'macdSignal', 'macdHistogram')


def _overlay_keys(result: BacktestResult) -> List[str]:
    return [k for k in result.indicators if k.startswith(OVERLAY_PREFIXES)]


def _oscillator_keys(result: BacktestResult) -> List[str]:
    return [k for k in OSCILLATOR_KEYS if k in result.indicators]


def render_backtest_chart(
    bars: Sequence[Bar],
    result: BacktestResult,
    output_path: Union[str, Path],
    title: Optional[str] = None,
) -> Path:
    """
    Render a backtest result to an image file.

    Args:
        bars: Bars the backtest ran on
        result: Result of Backtester.run() on those bars
        output_path: Destination file (format from suffix, e.g. .png)
        title: Chart title (default: strategy name)

    Returns:
        Path to the saved chart
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    oscillators = _oscillator_keys(result)
    if oscillators:
        fig, (ax_price, ax_osc) = plt.subplots(
            2, 1, figsize=(14, 9), sharex=True, gridspec_kw={'height_ratios': [3, 1]}
        )
    else:
        fig, ax_price = plt.subplots(figsize=(14, 7))
        ax_osc = None

    try:
        x = list(range(len(bars)))
        ax_price.plot(x, [b.close for b in bars], linewidth=1.5, color='gray', label='Close')

        for key in _overlay_keys(result):
            series = result.indicators[key]
            style = '--' if key.startswith('bb') else '-'
            ax_price.plot(x, series.values, linestyle=style, linewidth=1.0, alpha=0.8, label=key)

        buys = [t for t in result.trades if t.action is TradeAction.BUY]
        sells = [t for t in result.trades if t.action is TradeAction.SELL]
        if buys:
            ax_price.scatter(
                [t.index for t in buys], [bars[t.index].low for t in buys],
                marker='^', color='green', s=120, zorder=5, label='Buy',
            )
        if sells:
            ax_price.scatter(
                [t.index for t in sells], [bars[t.index].high for t in sells],
                marker='v', color='red', s=120, zorder=5, label='Sell',
            )

        stats = result.stats
        ax_price.set_title(
            f"{title or result.strategy_name}\n"
            f"Trades: {stats.total_trades} | Win rate: {stats.win_rate:.1f}% | "
            f"Total profit: {stats.total_profit:.2f} | Max drawdown: {stats.max_drawdown:.2f}",
            fontsize=12, fontweight='bold',
        )
        ax_price.set_ylabel('Price')
        ax_price.grid(True, alpha=0.3)
        ax_price.legend(loc='upper left', fontsize=8)

        if ax_osc is not None:
            for key in oscillators:
                series = result.indicators[key]
                if key == 'macdHistogram':
                    ax_osc.bar(x, series.fillna(0).values, color='gray', alpha=0.4, label=key)
                else:
                    ax_osc.plot(x, series.values, linewidth=1.0, label=key)
            if 'rsi' in oscillators:
                ax_osc.axhline(70, color='red', linestyle=':', linewidth=0.8)
                ax_osc.axhline(30, color='green', linestyle=':', linewidth=0.8)
            ax_osc.grid(True, alpha=0.3)
            ax_osc.legend(loc='upper left', fontsize=8)
            ax_osc.set_xlabel('Bar')
        else:
            ax_price.set_xlabel('Bar')

        plt.tight_layout()
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
    finally:
        plt.close(fig)
    return output_path
