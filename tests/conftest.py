"""
Shared test fixtures and helpers for brick analysis tests.
"""

from typing import List, Optional

import pytest

from src.brick_analysis.types import Bar


def make_bar(
    index: int,
    open_: float,
    high: float,
    low: float,
    close: float,
    timestamp: int = None,
    volume: float = 0.0,
    extrema_marker: Optional[float] = None,
    indicator1: Optional[float] = None,
    indicator2: Optional[float] = None,
) -> Bar:
    """Helper to create Bar objects for testing.

    Args:
        index: Bar index in the sequence
        open_: Opening price
        high: High price
        low: Low price
        close: Closing price
        timestamp: Unix timestamp (defaults to 1700000000 + index * 60)
        volume: Traded volume
        extrema_marker: Raw turning-point marker, if any

    Returns:
        Bar object for use in resampler and filter tests
    """
    return Bar(
        index=index,
        timestamp=timestamp or 1700000000 + index * 60,
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=volume,
        indicator1=indicator1,
        indicator2=indicator2,
        extrema_marker=extrema_marker,
    )


def bars_from_closes(closes: List[float], spread: float = 1.0) -> List[Bar]:
    """Bars whose open is the previous close and whose range pads open/close by ``spread``."""
    bars = []
    previous = closes[0]
    for i, close in enumerate(closes):
        open_ = previous
        bars.append(make_bar(
            i,
            open_,
            max(open_, close) + spread,
            min(open_, close) - spread,
            close,
        ))
        previous = close
    return bars


@pytest.fixture
def zigzag_bars() -> List[Bar]:
    """Rising then falling then rising series with markers on the swing bars."""
    return [
        make_bar(0, 100, 102, 98, 100, volume=10),
        make_bar(1, 100, 131, 99, 130, volume=20, extrema_marker=131),
        make_bar(2, 130, 132, 104, 105, volume=30, extrema_marker=104),
        make_bar(3, 105, 106, 74, 76, volume=40, extrema_marker=74),
        make_bar(4, 76, 128, 75, 127, volume=50, extrema_marker=128),
    ]
