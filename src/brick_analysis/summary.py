"""Headline statistics for a bar series."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence

from .adapters import bars_to_dataframe
from .types import Bar


@dataclass
class SeriesSummary:
    """Range, volume and change of a bar series."""
    start_timestamp: int
    end_timestamp: int
    bar_count: int
    highest_price: float
    lowest_price: float
    average_volume: float
    price_change_percentage: Optional[float]  # None when the first open is zero
    last_close: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize(bars: Sequence[Bar]) -> Optional[SeriesSummary]:
    """
    Summarize a bar series.

    Change is measured from the first bar's open to the last bar's close.
    Returns None for an empty series.
    """
    if not bars:
        return None

    df = bars_to_dataframe(bars)
    first = df.iloc[0]
    last = df.iloc[-1]

    change = None
    if first["open"] != 0:
        change = float((last["close"] - first["open"]) / first["open"] * 100)

    return SeriesSummary(
        start_timestamp=int(first["timestamp"]),
        end_timestamp=int(last["timestamp"]),
        bar_count=len(df),
        highest_price=float(df["high"].max()),
        lowest_price=float(df["low"].min()),
        average_volume=float(df["volume"].mean()),
        price_change_percentage=change,
        last_close=float(last["close"]),
    )
