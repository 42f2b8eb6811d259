# Brick Analysis Module
#
# Brick resampling and turning-point relevance filtering for charting.

from .types import Bar, Brick, BrickDirection, Candidate
from .brick_config import BrickConfig
from .brick_resampler import BrickResampler, BrickLimitExceededError, resample
from .turning_points import (
    ExtremeKind,
    RelevantExtreme,
    TurningPointFilter,
    classify_candidate,
    filter_relevant,
)
from .chart_series import (
    AnnotatedPoint,
    ChartSeries,
    annotate,
    build_area_series,
    build_brick_series,
)
from .summary import SeriesSummary, summarize
from .adapters import bars_to_dataframe, bricks_to_dataframe, dataframe_to_bars
