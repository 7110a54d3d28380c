"""
Conversion between OHLCV DataFrames and Bar sequences.

The simulator addresses bars by position, so every conversion keeps the
input order. Column names are matched case-insensitively ('Close' or 'close').
"""
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from ..shared.types import Bar

OHLC_COLUMNS = ('open', 'high', 'low', 'close')
VOLUME_COLUMN = 'volume'


def _column_map(df: pd.DataFrame) -> Dict[str, str]:
    """Map lower-case field name -> actual column name."""
    return {str(col).lower(): col for col in df.columns}


def bars_from_dataframe(df: pd.DataFrame) -> List[Bar]:
    """
    Convert an OHLCV DataFrame to a list of Bars.

    The index supplies each bar's time. A missing Volume column yields
    volume 0.0 for every bar.

    Raises:
        ValueError: If any of Open/High/Low/Close is missing
    """
    columns = _column_map(df)
    missing = [name for name in OHLC_COLUMNS if name not in columns]
    if missing:
        raise ValueError(f"Missing OHLC columns: {missing}. Available: {list(df.columns)}")

    opens = df[columns['open']].astype(float).tolist()
    highs = df[columns['high']].astype(float).tolist()
    lows = df[columns['low']].astype(float).tolist()
    closes = df[columns['close']].astype(float).tolist()
    if VOLUME_COLUMN in columns:
        volumes = df[columns[VOLUME_COLUMN]].fillna(0).astype(float).tolist()
    else:
        volumes = [0.0] * len(df)

    return [
        Bar(time=t, open=o, high=h, low=l, close=c, volume=v)
        for t, o, h, l, c, v in zip(df.index, opens, highs, lows, closes, volumes)
    ]


def bars_to_dataframe(bars: Sequence[Bar]) -> pd.DataFrame:
    """
    Convert Bars to a positionally indexed DataFrame.

    Columns are lower-case open/high/low/close/volume plus time; the index is
    a RangeIndex so row i is bar i.
    """
    return pd.DataFrame(
        {
            'time': [b.time for b in bars],
            'open': np.array([b.open for b in bars], dtype=float),
            'high': np.array([b.high for b in bars], dtype=float),
            'low': np.array([b.low for b in bars], dtype=float),
            'close': np.array([b.close for b in bars], dtype=float),
            'volume': np.array([b.volume or 0.0 for b in bars], dtype=float),
        },
        index=pd.RangeIndex(len(bars)),
    )


def coerce_bars(data: Union[None, pd.DataFrame, Iterable[Union[Bar, Mapping[str, Any]]]]) -> List[Bar]:
    """
    Normalize supported bar inputs to a list of Bars.

    Accepts None (no bars), an OHLCV DataFrame, or an iterable of Bar objects
    and/or mappings with time/open/high/low/close[/volume] keys.

    Raises:
        ValueError: If an element cannot be read as a bar
    """
    if data is None:
        return []
    if isinstance(data, pd.DataFrame):
        return bars_from_dataframe(data)

    bars: List[Bar] = []
    for i, item in enumerate(data):
        if isinstance(item, Bar):
            bars.append(Bar(
                time=item.time,
                open=float(item.open),
                high=float(item.high),
                low=float(item.low),
                close=float(item.close),
                volume=float(item.volume or 0.0),
            ))
            continue
        if not isinstance(item, Mapping):
            raise ValueError(f"Invalid bar at position {i}: {item!r}")
        try:
            bars.append(Bar(
                time=item.get('time'),
                open=float(item['open']),
                high=float(item['high']),
                low=float(item['low']),
                close=float(item['close']),
                volume=float(item.get('volume') or 0.0),
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid bar at position {i}: {e}") from e
    return bars
