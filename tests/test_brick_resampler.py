"""
Tests for the brick resampler.

Covers:
1. Grid anchoring and emission
2. Wick assignment across batches
3. Marker carry-over and anchoring
4. Degenerate inputs (empty, bad step, no movement)
5. Bounded emission
"""

import math

import pytest

from src.brick_analysis.brick_config import BrickConfig
from src.brick_analysis.brick_resampler import (
    BrickLimitExceededError,
    BrickResampler,
    resample,
)
from src.brick_analysis.types import BrickDirection

from conftest import bars_from_closes, make_bar


class TestGridEmission:
    """Bricks open and close on the step grid anchored on the first close."""

    def test_two_up_bricks_from_closes(self):
        """Closes 100, 100, 126, 150, 151 with step 25 give two up bricks."""
        bars = bars_from_closes([100, 100, 126, 150, 151])
        bricks = resample(bars, 25)

        assert len(bricks) == 2
        assert [b.sequence_index for b in bricks] == [0, 1]
        assert all(b.direction == BrickDirection.UP for b in bricks)
        assert (bricks[0].open, bricks[0].close) == (100, 125)
        assert (bricks[1].open, bricks[1].close) == (125, 150)
        assert bricks[0].source_index == 2
        assert bricks[1].source_index == 3

    def test_reference_floored_to_step_multiple(self):
        """First close 112 anchors the grid at 100, so 125 is the first up line."""
        bars = bars_from_closes([112, 124, 125])
        bricks = resample(bars, 25)

        assert len(bricks) == 1
        assert (bricks[0].open, bricks[0].close) == (100, 125)

    def test_down_bricks(self):
        bars = bars_from_closes([100, 74, 50])
        bricks = resample(bars, 25)

        assert [b.direction for b in bricks] == [BrickDirection.DOWN, BrickDirection.DOWN]
        assert (bricks[0].open, bricks[0].close) == (100, 75)
        assert (bricks[1].open, bricks[1].close) == (75, 50)
        assert bricks[0].body_bounds == (75, 100)

    def test_single_bar_emits_multiple_bricks(self):
        """A 3-step move in one bar emits 3 bricks sharing that bar's timestamp."""
        bars = bars_from_closes([100, 180])
        bricks = resample(bars, 25)

        assert len(bricks) == 3
        assert [b.close for b in bricks] == [125, 150, 175]
        assert {b.source_timestamp for b in bricks} == {bars[1].timestamp}

    def test_reversal_needs_full_step_from_reference(self):
        """After an up brick to 125, a close of 101 is not yet a down brick."""
        bars = bars_from_closes([100, 126, 101, 100])
        bricks = resample(bars, 25)

        assert [(b.open, b.close) for b in bricks] == [(100, 125), (125, 100)]

    def test_grid_and_chaining_invariants(self):
        """Every open/close is a step multiple and bricks chain close -> open."""
        closes = [1000, 1043, 1012, 955, 990, 1110, 1090, 1002, 870, 905, 1200]
        bricks = resample(bars_from_closes(closes), 20)

        assert len(bricks) > 0
        for brick in bricks:
            assert brick.open % 20 == 0
            assert brick.close % 20 == 0
            assert abs(brick.close - brick.open) == 20
        for prev, nxt in zip(bricks, bricks[1:]):
            assert prev.close == nxt.open

    def test_fractional_step_stays_on_grid(self):
        """Prices are derived from the grid level, so float steps do not drift."""
        closes = [1.0 + 0.1 * i for i in range(40)]
        bricks = resample(bars_from_closes(closes, spread=0.01), 0.1)

        for prev, nxt in zip(bricks, bricks[1:]):
            assert prev.close == nxt.open
        for brick in bricks:
            level = brick.open / 0.1
            assert math.isclose(level, round(level), abs_tol=1e-9)

    def test_sequence_index_dense(self):
        closes = [100, 160, 90, 40, 140]
        bricks = resample(bars_from_closes(closes), 10)

        assert [b.sequence_index for b in bricks] == list(range(len(bricks)))

    def test_indicators_carried_from_source_bar(self):
        bars = [
            make_bar(0, 100, 101, 99, 100, indicator1=1.0, indicator2=2.0),
            make_bar(1, 100, 151, 99, 150, indicator1=3.5, indicator2=4.5),
        ]
        bricks = resample(bars, 25)

        assert len(bricks) == 2
        assert all(b.indicator1 == 3.5 and b.indicator2 == 4.5 for b in bricks)


class TestWicks:
    """Period extremes hang on the outermost bricks of each batch."""

    def test_wick_covers_period_extremes(self):
        bars = [
            make_bar(0, 100, 103, 97, 100),
            make_bar(1, 100, 110, 92, 105),   # no brick, but extends the period
            make_bar(2, 105, 131, 104, 130),  # emits 100 -> 125
        ]
        bricks = resample(bars, 25)

        assert len(bricks) == 1
        assert bricks[0].wick_bounds == (92, 131)

    def test_multi_brick_batch_splits_wicks(self):
        """Top wick on the highest brick, bottom wick on the lowest, none in between."""
        bars = [
            make_bar(0, 100, 101, 95, 100),
            make_bar(1, 100, 185, 96, 180),
        ]
        bricks = resample(bars, 25)

        assert len(bricks) == 3
        lowest, middle, highest = bricks
        assert lowest.wick_bounds == (95, 125)
        assert middle.wick_bounds == middle.body_bounds == (125, 150)
        assert highest.wick_bounds == (150, 185)

    def test_down_batch_assigns_wicks_by_body_position(self):
        bars = [
            make_bar(0, 100, 104, 99, 100),
            make_bar(1, 100, 102, 40, 45),
        ]
        bricks = resample(bars, 25)

        assert [b.close for b in bricks] == [75, 50]
        first, second = bricks
        assert first.wick_bounds == (75, 104)   # highest body gets the top wick
        assert second.wick_bounds == (40, 75)   # lowest body gets the bottom wick

    def test_period_resets_from_next_bar_after_emission(self):
        """Extremes seen before an emission do not leak into the next brick."""
        bars = [
            make_bar(0, 100, 100, 60, 100),     # low of 60 belongs to the first batch
            make_bar(1, 100, 126, 99, 125),     # emits 100 -> 125
            make_bar(2, 125, 149, 121, 148),
            make_bar(3, 148, 152, 140, 150),    # emits 125 -> 150
        ]
        bricks = resample(bars, 25)

        assert bricks[0].wick_bounds == (60, 126)
        assert bricks[1].wick_bounds == (121, 152)

    def test_wick_always_contains_body(self):
        """Period extremes inside the body never shrink the wick below it."""
        bars = [
            make_bar(0, 110, 112, 108, 110),
            make_bar(1, 110, 126, 109, 126),
        ]
        bricks = resample(bars, 25)

        brick = bricks[0]
        assert brick.wick_bounds[0] <= brick.body_bounds[0]
        assert brick.wick_bounds[1] >= brick.body_bounds[1]

    def test_wick_containment_over_random_walk(self):
        closes = [500, 520, 480, 430, 470, 560, 610, 600, 540, 505, 650, 400]
        for brick in resample(bars_from_closes(closes, spread=7), 15):
            assert brick.wick_bounds[0] <= brick.body_bounds[0]
            assert brick.wick_bounds[1] >= brick.body_bounds[1]


class TestMarkers:
    """Markers are shared by the batch but anchored on one brick."""

    def test_marker_near_high_goes_to_highest_brick(self):
        bars = [
            make_bar(0, 100, 101, 99, 100),
            make_bar(1, 100, 183, 98, 180, extrema_marker=182),
        ]
        bricks = resample(bars, 25)

        assert [b.extrema_marker for b in bricks] == [None, None, 182]
        assert all(b.source_marker == 182 for b in bricks)

    def test_marker_near_low_goes_to_lowest_brick(self):
        bars = [
            make_bar(0, 100, 101, 99, 100),
            make_bar(1, 100, 101, 40, 45, extrema_marker=41),
        ]
        bricks = resample(bars, 25)

        assert [b.extrema_marker for b in bricks] == [None, 41]

    def test_equidistant_marker_favors_high_side(self):
        bars = [
            make_bar(0, 100, 101, 100, 100),
            make_bar(1, 100, 150, 100, 150, extrema_marker=125),
        ]
        bricks = resample(bars, 25)

        # Wick spans 100..150 over two bricks; 125 is 25 from each extreme
        assert bricks[1].extrema_marker == 125
        assert bricks[0].extrema_marker is None

    def test_marker_on_bar_without_bricks_is_dropped(self):
        bars = [
            make_bar(0, 100, 101, 99, 100),
            make_bar(1, 100, 110, 95, 105, extrema_marker=110),
        ]
        assert resample(bars, 25) == []

    def test_bricks_without_marker_source(self):
        bricks = resample(bars_from_closes([100, 130]), 25)
        assert bricks[0].source_marker is None
        assert bricks[0].extrema_marker is None


class TestDegenerateInputs:
    """Empty results are valid results."""

    @pytest.mark.parametrize("step", [25, 1, 0.5, 1000])
    def test_empty_bars(self, step):
        assert resample([], step) == []

    @pytest.mark.parametrize("step", [0, -5, float("nan"), float("inf")])
    def test_invalid_step_returns_empty(self, step):
        assert resample(bars_from_closes([100, 200, 300]), step) == []

    def test_step_larger_than_movement(self):
        bars = bars_from_closes([100, 140, 90, 130])
        assert resample(bars, 1000) == []

    def test_repeated_calls_are_independent(self):
        bars = bars_from_closes([100, 126, 150])
        first = resample(bars, 25)
        second = resample(bars, 25)

        assert [b.to_dict() for b in first] == [b.to_dict() for b in second]
        assert first[0] is not second[0]


class TestBoundedEmission:
    """A tiny step cannot loop forever."""

    def test_limit_exceeded_raises(self):
        config = BrickConfig(step_size=1.0, max_bricks_per_bar=5)
        bars = bars_from_closes([100, 110])

        with pytest.raises(BrickLimitExceededError) as exc_info:
            BrickResampler(config).resample(bars)

        assert exc_info.value.bar_index == 1
        assert exc_info.value.limit == 5

    def test_limit_is_per_bar(self):
        """Many bars each emitting under the limit are fine."""
        config = BrickConfig(step_size=1.0, max_bricks_per_bar=5)
        bars = bars_from_closes([100 + 4 * i for i in range(10)])

        bricks = BrickResampler(config).resample(bars)
        assert len(bricks) == 36

    def test_near_zero_step_with_defaults_raises(self):
        bars = bars_from_closes([100, 200])
        with pytest.raises(BrickLimitExceededError):
            resample(bars, 1e-6)

    def test_limit_error_is_value_error(self):
        assert issubclass(BrickLimitExceededError, ValueError)


class TestResamplerConfig:
    def test_default_step_used_when_omitted(self):
        bars = bars_from_closes([100, 126])
        bricks = BrickResampler(BrickConfig.default().with_step_size(25)).resample(bars)
        assert len(bricks) == 1

    def test_explicit_step_overrides_config(self):
        bars = bars_from_closes([100, 126])
        bricks = BrickResampler(BrickConfig(step_size=25)).resample(bars, 5)
        assert len(bricks) == 5
