"""
DataFrame adapters for brick analysis.

Converts between pandas DataFrames (as produced by the OHLC loader) and the
Bar/Brick dataclasses consumed by the resampler and turning-point filter.
"""

import math
import numbers
from typing import Any, List, Optional, Sequence

import pandas as pd

from .types import Bar, Brick


BAR_COLUMNS = [
    "timestamp", "open", "high", "low", "close", "volume",
    "indicator1", "indicator2", "extrema_marker",
]

OPTIONAL_COLUMNS = ["indicator1", "indicator2", "extrema_marker"]


def _optional_float(value: Any) -> Optional[float]:
    """NaN/None -> None, anything else -> float."""
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return value


def _to_unix(value: Any, fallback: int) -> int:
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return int(value)
    if hasattr(value, "timestamp"):
        return int(value.timestamp())
    return fallback


def dataframe_to_bars(df: pd.DataFrame) -> List[Bar]:
    """
    Convert DataFrame with OHLC columns to Bar list.

    Args:
        df: DataFrame with columns open, high, low, close and optionally
            volume, indicator1, indicator2, extrema_marker. The timestamp is
            read from a 'timestamp' column or, failing that, a datetime index.

    Returns:
        List of Bar objects with sequential indices starting at 0, in the
        DataFrame's row order.

    Example:
        >>> df = load_ohlc("market_data.csv")
        >>> bricks = resample(dataframe_to_bars(df), 25)
    """
    bars = []
    col_map = {c.lower(): c for c in df.columns}

    for idx, row in df.iterrows():
        fallback = 1700000000 + len(bars) * 60
        if "timestamp" in col_map:
            timestamp = _to_unix(row[col_map["timestamp"]], fallback)
        elif hasattr(idx, "timestamp"):
            timestamp = int(idx.timestamp())
        else:
            timestamp = fallback

        volume = _optional_float(row[col_map["volume"]]) if "volume" in col_map else None

        bars.append(Bar(
            index=len(bars),
            timestamp=timestamp,
            open=float(row[col_map["open"]]),
            high=float(row[col_map["high"]]),
            low=float(row[col_map["low"]]),
            close=float(row[col_map["close"]]),
            volume=volume if volume is not None else 0.0,
            indicator1=_optional_float(row[col_map["indicator1"]]) if "indicator1" in col_map else None,
            indicator2=_optional_float(row[col_map["indicator2"]]) if "indicator2" in col_map else None,
            extrema_marker=(
                _optional_float(row[col_map["extrema_marker"]])
                if "extrema_marker" in col_map else None
            ),
        ))
    return bars


def bars_to_dataframe(bars: Sequence[Bar]) -> pd.DataFrame:
    """Convert bars to a DataFrame indexed by bar index."""
    df = pd.DataFrame(
        [
            {
                "index": bar.index,
                "timestamp": bar.timestamp,
                "open": bar.open,
                "high": bar.high,
                "low": bar.low,
                "close": bar.close,
                "volume": bar.volume,
                "indicator1": bar.indicator1,
                "indicator2": bar.indicator2,
                "extrema_marker": bar.extrema_marker,
            }
            for bar in bars
        ],
        columns=["index"] + BAR_COLUMNS,
    )
    return df.set_index("index")


def bricks_to_dataframe(bricks: Sequence[Brick]) -> pd.DataFrame:
    """Convert bricks to a DataFrame indexed by sequence index, wicks as high/low."""
    df = pd.DataFrame(
        [
            {
                "sequence_index": brick.sequence_index,
                "source_index": brick.source_index,
                "timestamp": brick.source_timestamp,
                "open": brick.open,
                "close": brick.close,
                "high": brick.high,
                "low": brick.low,
                "direction": brick.direction.value,
                "indicator1": brick.indicator1,
                "indicator2": brick.indicator2,
                "source_marker": brick.source_marker,
                "extrema_marker": brick.extrema_marker,
            }
            for brick in bricks
        ],
        columns=[
            "sequence_index", "source_index", "timestamp", "open", "close",
            "high", "low", "direction", "indicator1", "indicator2",
            "source_marker", "extrema_marker",
        ],
    )
    return df.set_index("sequence_index")
