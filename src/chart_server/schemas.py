"""
Pydantic models for the Chart Series API.

All request/response schemas for chart series endpoints.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Input Bars
# ============================================================================


class BarInput(BaseModel):
    """A single OHLC bar supplied by the ingestion layer."""
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    indicator1: Optional[float] = None
    indicator2: Optional[float] = None
    extrema_marker: Optional[float] = None


class LoadBarsRequest(BaseModel):
    """Replace the loaded series. Bars must already be in chronological order."""
    bars: List[BarInput] = Field(default_factory=list)


class LoadBarsResponse(BaseModel):
    bar_count: int


# ============================================================================
# Annotated Series
# ============================================================================


class ChartPointResponse(BaseModel):
    """
    One chart item with its turning-point decision.

    For bricks, high/low are the wick bounds and body_low/body_high the body.
    marker_point is the exact price a relevant marker snaps to; it is None
    for items whose marker was dropped or that never had one.
    """
    position: int
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None
    direction: Optional[str] = None  # "up" / "down" for bricks
    body_low: Optional[float] = None
    body_high: Optional[float] = None
    source_index: Optional[int] = None
    indicator1: Optional[float] = None
    indicator2: Optional[float] = None
    extrema_marker: Optional[float] = None
    marker_point: Optional[float] = None
    is_top: Optional[bool] = None


class ChartSeriesResponse(BaseModel):
    mode: str  # "area" or "bricks"
    step_size: Optional[float] = None
    point_count: int
    relevant_count: int
    message: Optional[str] = None
    points: List[ChartPointResponse]


# ============================================================================
# Summary
# ============================================================================


class SummaryResponse(BaseModel):
    start_timestamp: int
    end_timestamp: int
    bar_count: int
    highest_price: float
    lowest_price: float
    average_volume: float
    price_change_percentage: Optional[float] = None
    last_close: float
