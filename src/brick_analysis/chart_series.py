"""
Chart Series

Pairs a candidate sequence (bars or bricks) with its turning-point decisions
so a renderer can draw relevant markers without re-running any logic.

Two modes:
- area: raw bars, markers anchored on bar high/low
- bricks: resampled bricks, markers anchored on wick high/low
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from .brick_config import BrickConfig
from .brick_resampler import BrickResampler, is_valid_step
from .constants import INVALID_STEP_MESSAGE, NO_BRICKS_MESSAGE
from .turning_points import filter_relevant
from .types import Bar, Brick


ChartItem = Union[Bar, Brick]


@dataclass
class AnnotatedPoint:
    """One chart item plus its marker decision. Dropped markers carry None."""
    position: int
    item: ChartItem
    marker_point: Optional[float] = None
    is_top: Optional[bool] = None

    @property
    def is_relevant(self) -> bool:
        return self.marker_point is not None

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.item, Brick):
            data = self.item.to_dict()
        else:
            data = {
                "index": self.item.index,
                "timestamp": self.item.timestamp,
                "open": self.item.open,
                "high": self.item.high,
                "low": self.item.low,
                "close": self.item.close,
                "volume": self.item.volume,
                "indicator1": self.item.indicator1,
                "indicator2": self.item.indicator2,
                "extrema_marker": self.item.extrema_marker,
            }
        data["marker_point"] = self.marker_point
        data["is_top"] = self.is_top
        return data


@dataclass
class ChartSeries:
    """Annotated series ready for a renderer."""
    mode: str
    points: List[AnnotatedPoint] = field(default_factory=list)
    step_size: Optional[float] = None
    message: Optional[str] = None

    @property
    def relevant_count(self) -> int:
        return sum(1 for p in self.points if p.is_relevant)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "step_size": self.step_size,
            "point_count": len(self.points),
            "relevant_count": self.relevant_count,
            "message": self.message,
            "points": [p.to_dict() for p in self.points],
        }


def annotate(candidates: Sequence[ChartItem]) -> List[AnnotatedPoint]:
    """Run the turning-point filter and attach each decision to its item."""
    relevant = filter_relevant(candidates)
    points = []
    for position, item in enumerate(candidates):
        decision = relevant.get(position)
        if decision is None:
            points.append(AnnotatedPoint(position=position, item=item))
        else:
            points.append(AnnotatedPoint(
                position=position,
                item=item,
                marker_point=decision.anchor_price,
                is_top=decision.is_top,
            ))
    return points


def build_area_series(bars: Sequence[Bar]) -> ChartSeries:
    """Annotate the raw bar series."""
    return ChartSeries(mode="area", points=annotate(bars))


def build_brick_series(
    bars: Sequence[Bar],
    step_size: Optional[float] = None,
    config: Optional[BrickConfig] = None,
) -> ChartSeries:
    """
    Resample into bricks and annotate them.

    When bars exist but no brick forms, the series is empty and ``message``
    suggests a smaller step. Without a step the configured one is used.

    Raises:
        BrickLimitExceededError: If the step is too small for the data.
    """
    resampler = BrickResampler(config)
    if step_size is None:
        step_size = resampler.config.step_size
    bricks = resampler.resample(bars, step_size)

    message = None
    if not is_valid_step(step_size):
        message = INVALID_STEP_MESSAGE.format(step_size=step_size)
    elif bars and not bricks:
        message = NO_BRICKS_MESSAGE.format(step_size=step_size)
    return ChartSeries(
        mode="bricks",
        points=annotate(bricks),
        step_size=step_size,
        message=message,
    )
