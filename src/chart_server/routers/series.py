"""
Series router for the Chart Server.

Provides endpoints for annotated chart data:
- GET /api/bars - Raw bars with relevant turning points
- GET /api/bricks - Bricks with relevant turning points
- GET /api/summary - Series summary
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ...brick_analysis.brick_resampler import BrickLimitExceededError
from ...brick_analysis.chart_series import (
    AnnotatedPoint,
    ChartSeries,
    build_area_series,
    build_brick_series,
)
from ...brick_analysis.summary import summarize
from ...brick_analysis.types import Brick
from ..schemas import ChartPointResponse, ChartSeriesResponse, SummaryResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["series"])


def _point_response(point: AnnotatedPoint) -> ChartPointResponse:
    item = point.item
    if isinstance(item, Brick):
        body_low, body_high = item.body_bounds
        return ChartPointResponse(
            position=point.position,
            timestamp=item.source_timestamp,
            open=item.open,
            high=item.high,
            low=item.low,
            close=item.close,
            direction=item.direction.value,
            body_low=body_low,
            body_high=body_high,
            source_index=item.source_index,
            indicator1=item.indicator1,
            indicator2=item.indicator2,
            extrema_marker=item.extrema_marker,
            marker_point=point.marker_point,
            is_top=point.is_top,
        )
    return ChartPointResponse(
        position=point.position,
        timestamp=item.timestamp,
        open=item.open,
        high=item.high,
        low=item.low,
        close=item.close,
        volume=item.volume,
        source_index=item.index,
        indicator1=item.indicator1,
        indicator2=item.indicator2,
        extrema_marker=item.extrema_marker,
        marker_point=point.marker_point,
        is_top=point.is_top,
    )


def _series_response(series: ChartSeries) -> ChartSeriesResponse:
    return ChartSeriesResponse(
        mode=series.mode,
        step_size=series.step_size,
        point_count=len(series.points),
        relevant_count=series.relevant_count,
        message=series.message,
        points=[_point_response(p) for p in series.points],
    )


@router.get("/bars", response_model=ChartSeriesResponse)
async def get_bars():
    """Raw bars annotated with relevant tops and bottoms."""
    from ..api import get_state

    s = get_state()
    return _series_response(build_area_series(s.source_bars))


@router.get("/bricks", response_model=ChartSeriesResponse)
async def get_bricks(
    step_size: Optional[float] = Query(None, description="Brick step; defaults to the server's step"),
):
    """
    Bricks annotated with relevant tops and bottoms.

    A non-positive or non-finite step returns an empty series with an
    explanatory message and is not memoized.
    A step small enough to explode the brick count returns 422.
    """
    from ..api import get_state

    s = get_state()
    step = s.config.step_size if step_size is None else step_size

    series = s.cached_series(step)
    if series is None:
        try:
            series = build_brick_series(s.source_bars, step, s.config)
        except BrickLimitExceededError as e:
            logger.warning(str(e))
            raise HTTPException(status_code=422, detail=str(e))
        s.cache_series(step, series)

    return _series_response(series)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary():
    """Range, volume and change of the loaded series."""
    from ..api import get_state

    s = get_state()
    summary = summarize(s.source_bars)
    if summary is None:
        raise HTTPException(status_code=404, detail="No bars loaded")
    return SummaryResponse(**summary.to_dict())
