"""
Brick Resampler Module

Converts time-based OHLC bars into fixed-step price bricks.

Key Features:
- Absolute price grid anchored on the first close (floor to a step multiple)
- Any number of bricks per source bar, in one direction only
- Wick tracking: true high/low seen while a batch of bricks was forming
- Indicator values and extrema markers carried from the generating bar
- Bounded emission per bar so a bad step size cannot loop forever
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .brick_config import BrickConfig
from .types import Bar, Brick, BrickDirection

logger = logging.getLogger(__name__)


class BrickLimitExceededError(ValueError):
    """Raised when one bar would emit more bricks than the configured limit."""

    def __init__(self, bar_index: int, step_size: float, limit: int):
        self.bar_index = bar_index
        self.step_size = step_size
        self.limit = limit
        super().__init__(
            f"Bar {bar_index} would emit more than {limit} bricks "
            f"with step size {step_size}; use a larger step"
        )


class BrickResampler:
    """Resamples an ordered bar sequence into fixed-step bricks."""

    def __init__(self, config: Optional[BrickConfig] = None):
        self.config = config or BrickConfig.default()

    def resample(self, bars: Sequence[Bar], step_size: Optional[float] = None) -> List[Brick]:
        """
        Build the brick series for ``bars``.

        Args:
            bars: Bars in chronological order (never re-sorted here)
            step_size: Brick height; defaults to the configured step

        Returns:
            Bricks with dense sequence indices. Empty when there are no bars,
            the step is not a positive finite number, or price never moved a
            full step.

        Raises:
            BrickLimitExceededError: If a single bar would emit more than
                ``max_bricks_per_bar`` bricks.
        """
        step = self.config.step_size if step_size is None else step_size
        if not bars or not is_valid_step(step):
            return []

        # Bricks sit on level * step; tracking the integer level keeps every
        # open/close exactly on the grid.
        level = math.floor(bars[0].close / step)
        period_high = bars[0].high
        period_low = bars[0].low
        bricks: List[Brick] = []

        for position, bar in enumerate(bars):
            period_high = max(period_high, bar.high)
            period_low = min(period_low, bar.low)

            batch, level = self._emit_batch(bar, level, step, len(bricks))
            if not batch:
                continue

            _assign_wicks(batch, period_high, period_low)
            _assign_marker(batch, bar.extrema_marker)
            bricks.extend(batch)

            if position + 1 < len(bars):
                period_high = bars[position + 1].high
                period_low = bars[position + 1].low

        if not bricks:
            logger.info(
                f"No bricks produced from {len(bars)} bars with step size {step}"
            )
        logger.debug(f"Resampled {len(bars)} bars into {len(bricks)} bricks (step={step})")
        return bricks

    def _emit_batch(
        self, bar: Bar, level: int, step: float, next_index: int
    ) -> Tuple[List[Brick], int]:
        """Emit every brick ``bar``'s close completes. Returns the batch and the new level."""
        batch: List[Brick] = []
        limit = self.config.max_bricks_per_bar

        while bar.close >= (level + 1) * step:
            if len(batch) >= limit:
                raise BrickLimitExceededError(bar.index, step, limit)
            batch.append(self._make_brick(bar, level * step, (level + 1) * step,
                                          BrickDirection.UP, next_index + len(batch)))
            level += 1

        while bar.close <= (level - 1) * step:
            if len(batch) >= limit:
                raise BrickLimitExceededError(bar.index, step, limit)
            batch.append(self._make_brick(bar, level * step, (level - 1) * step,
                                          BrickDirection.DOWN, next_index + len(batch)))
            level -= 1

        return batch, level

    @staticmethod
    def _make_brick(
        bar: Bar, open_: float, close: float, direction: BrickDirection, sequence_index: int
    ) -> Brick:
        return Brick(
            sequence_index=sequence_index,
            source_index=bar.index,
            source_timestamp=bar.timestamp,
            open=open_,
            close=close,
            direction=direction,
            wick_bounds=(min(open_, close), max(open_, close)),
            indicator1=bar.indicator1,
            indicator2=bar.indicator2,
            source_marker=bar.extrema_marker,
        )


def is_valid_step(step: float) -> bool:
    return step is not None and math.isfinite(step) and step > 0


def _extreme_bricks(batch: List[Brick]) -> Tuple[Brick, Brick]:
    """Return (brick with highest body top, brick with lowest body bottom)."""
    highest = max(batch, key=lambda b: b.body_bounds[1])
    lowest = min(batch, key=lambda b: b.body_bounds[0])
    return highest, lowest


def _assign_wicks(batch: List[Brick], period_high: float, period_low: float) -> None:
    """
    Hang the accumulated period extremes on the outermost bricks of a batch.

    Inner bricks keep wick == body. Every wick is then widened to cover its
    body in case the period extremes sit inside it.
    """
    highest, lowest = _extreme_bricks(batch)
    highest.wick_bounds = (highest.wick_bounds[0], max(period_high, highest.body_bounds[1]))
    lowest.wick_bounds = (min(period_low, lowest.body_bounds[0]), lowest.wick_bounds[1])

    for brick in batch:
        body_low, body_high = brick.body_bounds
        brick.wick_bounds = (
            min(brick.wick_bounds[0], body_low),
            max(brick.wick_bounds[1], body_high),
        )


def _assign_marker(batch: List[Brick], marker: Optional[float]) -> None:
    """Anchor the bar's marker on the outer brick whose wick extreme is nearer (ties go high)."""
    if marker is None or not math.isfinite(marker):
        return

    highest, lowest = _extreme_bricks(batch)
    dist_high = abs(marker - highest.wick_bounds[1])
    dist_low = abs(marker - lowest.wick_bounds[0])

    if dist_high <= dist_low:
        highest.extrema_marker = marker
    else:
        lowest.extrema_marker = marker


def resample(
    bars: Sequence[Bar], step_size: float, config: Optional[BrickConfig] = None
) -> List[Brick]:
    """
    Convert bars into fixed-step bricks.

    Convenience wrapper around ``BrickResampler``; each call is independent.

    Example:
        >>> bricks = resample(bars, 25)
        >>> [b.direction.value for b in bricks]
        ['up', 'up']
    """
    return BrickResampler(config).resample(bars, step_size)
