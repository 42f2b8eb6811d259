"""Core data types for brick analysis."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Tuple


@dataclass
class Bar:
    """Single OHLC bar"""
    index: int
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    indicator1: Optional[float] = None
    indicator2: Optional[float] = None
    extrema_marker: Optional[float] = None  # Raw, unfiltered turning-point price

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


class BrickDirection(str, Enum):
    """Direction of a brick body."""
    UP = "up"
    DOWN = "down"


@dataclass
class Brick:
    """
    Fixed-step price brick derived from one source bar.

    Body is always one step tall and sits on the price grid. The wick covers
    the true high/low observed while the brick (or its batch) was forming and
    always contains the body.

    ``source_marker`` is the generating bar's extrema marker and is shared by
    every brick of the batch. ``extrema_marker`` is set on at most one brick of
    the batch: the one the marker anchors to. Only the latter takes part in
    turning-point filtering.
    """
    sequence_index: int
    source_index: int
    source_timestamp: int
    open: float
    close: float
    direction: BrickDirection
    wick_bounds: Tuple[float, float]
    indicator1: Optional[float] = None
    indicator2: Optional[float] = None
    source_marker: Optional[float] = None
    extrema_marker: Optional[float] = None

    @property
    def body_bounds(self) -> Tuple[float, float]:
        return (min(self.open, self.close), max(self.open, self.close))

    @property
    def high(self) -> float:
        """Wick top; lets bricks stand in wherever a bar's high is read."""
        return self.wick_bounds[1]

    @property
    def low(self) -> float:
        """Wick bottom."""
        return self.wick_bounds[0]

    @property
    def timestamp(self) -> int:
        return self.source_timestamp

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "sequence_index": self.sequence_index,
            "source_index": self.source_index,
            "source_timestamp": self.source_timestamp,
            "open": self.open,
            "close": self.close,
            "direction": self.direction.value,
            "body_bounds": list(self.body_bounds),
            "wick_bounds": list(self.wick_bounds),
            "indicator1": self.indicator1,
            "indicator2": self.indicator2,
            "source_marker": self.source_marker,
            "extrema_marker": self.extrema_marker,
        }


class Candidate(Protocol):
    """
    Anything the turning-point filter can read.

    Bars expose their own high/low; bricks expose their wick bounds.
    """

    @property
    def high(self) -> float: ...

    @property
    def low(self) -> float: ...

    @property
    def extrema_marker(self) -> Optional[float]: ...
