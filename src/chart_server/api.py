"""
FastAPI backend for the brick chart.

Minimal server for:
- Loading a bar series (from a CSV at startup or a JSON upload)
- Serving raw bars and bricks annotated with relevant turning points
- Serving the series summary
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .schemas import LoadBarsRequest, LoadBarsResponse
from ..brick_analysis.adapters import dataframe_to_bars
from ..brick_analysis.brick_config import BrickConfig
from ..brick_analysis.brick_resampler import is_valid_step
from ..brick_analysis.chart_series import ChartSeries
from ..brick_analysis.constants import BRICK_CACHE_SIZE
from ..brick_analysis.types import Bar
from ..data.ohlc_loader import load_ohlc

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Application state for the chart server."""
    source_bars: List[Bar]
    config: BrickConfig = field(default_factory=BrickConfig.default)
    data_file: Optional[str] = None
    # Brick series memoized per valid step size, most recently used last;
    # valid until the bars are replaced
    brick_cache: "OrderedDict[float, ChartSeries]" = field(default_factory=OrderedDict)
    cache_size: int = BRICK_CACHE_SIZE

    def replace_bars(self, bars: List[Bar]) -> None:
        self.source_bars = bars
        self.brick_cache.clear()

    def cached_series(self, step: float) -> Optional[ChartSeries]:
        series = self.brick_cache.get(step)
        if series is not None:
            self.brick_cache.move_to_end(step)
        return series

    def cache_series(self, step: float, series: ChartSeries) -> None:
        """Memoize a series, evicting the least recently used beyond cache_size."""
        if not is_valid_step(step):
            return
        self.brick_cache[step] = series
        self.brick_cache.move_to_end(step)
        while len(self.brick_cache) > self.cache_size:
            evicted, _ = self.brick_cache.popitem(last=False)
            logger.debug(f"Evicted brick series for step {evicted}")


# Global state
state: Optional[AppState] = None

app = FastAPI(
    title="Brick Chart Server",
    description="Brick resampling and turning-point filtering for charting",
    version="0.1.0",
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_state() -> AppState:
    """Get the application state."""
    if state is None:
        raise HTTPException(
            status_code=500,
            detail="Application not initialized. Start server with --data or PUT /api/bars."
        )
    return state


def init_app(
    data_file: Optional[str] = None,
    config: Optional[BrickConfig] = None,
    bars: Optional[List[Bar]] = None,
) -> AppState:
    """
    Initialize the application state.

    Args:
        data_file: CSV to load bars from (ignored when ``bars`` is given)
        config: Brick configuration; defaults to BrickConfig.default()
        bars: Pre-built bars
    """
    global state

    if bars is None:
        bars = []
        if data_file:
            df = load_ohlc(data_file)
            bars = dataframe_to_bars(df)
            logger.info(f"Loaded {len(bars)} bars from {data_file}")

    state = AppState(
        source_bars=bars,
        config=config or BrickConfig.default(),
        data_file=data_file,
    )
    return state


# ============================================================================
# Core API Endpoints
# ============================================================================


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "initialized": state is not None,
        "bar_count": len(state.source_bars) if state is not None else 0,
    }


@app.put("/api/bars", response_model=LoadBarsResponse)
async def load_bars(request: LoadBarsRequest):
    """Replace the loaded bar series. Initializes the app if needed."""
    bars = [
        Bar(
            index=i,
            timestamp=b.timestamp,
            open=b.open,
            high=b.high,
            low=b.low,
            close=b.close,
            volume=b.volume,
            indicator1=b.indicator1,
            indicator2=b.indicator2,
            extrema_marker=b.extrema_marker,
        )
        for i, b in enumerate(request.bars)
    ]

    if state is None:
        init_app(bars=bars)
    else:
        state.replace_bars(bars)
        state.data_file = None

    logger.info(f"Loaded {len(bars)} bars from request")
    return LoadBarsResponse(bar_count=len(bars))


# Routers import get_state from this module, so they are included last
from .routers import series_router  # noqa: E402

app.include_router(series_router)
