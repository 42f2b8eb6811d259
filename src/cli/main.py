"""
Main CLI Module for Brick Charting

Provides command-line access to brick resampling and turning-point filtering
over a CSV bar file. Output is JSON, to stdout or to a file.

Commands:
- bricks: Resample bars into bricks annotated with relevant turning points
- turning-points: List relevant tops/bottoms of the raw bars (or of the bricks
  when --step-size is given)
- summary: Print headline statistics of the series
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.brick_analysis.adapters import dataframe_to_bars
from src.brick_analysis.brick_config import BrickConfig
from src.brick_analysis.brick_resampler import BrickResampler
from src.brick_analysis.chart_series import build_brick_series
from src.brick_analysis.summary import summarize
from src.brick_analysis.turning_points import filter_relevant
from src.brick_analysis.types import Bar
from src.data.ohlc_loader import load_ohlc

logger = logging.getLogger(__name__)


def _load_bars(path: str) -> List[Bar]:
    df = load_ohlc(path)
    bars = dataframe_to_bars(df)
    logger.info(f"Loaded {len(bars)} bars from {path}")
    return bars


def _emit(payload: Dict[str, Any], output: Optional[str]) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {path}")
    else:
        print(text)


def run_bricks_command(args) -> int:
    """Resample into bricks and annotate relevant turning points."""
    bars = _load_bars(args.file)
    config = BrickConfig.default().with_step_size(args.step_size)
    series = build_brick_series(bars, args.step_size, config)
    if series.message:
        print(series.message, file=sys.stderr)
    _emit(series.to_dict(), args.output)
    return 0


def run_turning_points_command(args) -> int:
    """List relevant extremes of the raw series or of its bricks."""
    bars = _load_bars(args.file)

    if args.step_size is None:
        candidates = bars
        source = "bars"
    else:
        candidates = BrickResampler().resample(bars, args.step_size)
        source = "bricks"

    relevant = filter_relevant(candidates)
    payload = {
        "source": source,
        "step_size": args.step_size,
        "candidate_count": len(candidates),
        "turning_points": [
            {
                "position": position,
                "timestamp": candidates[position].timestamp,
                "anchor_price": extreme.anchor_price,
                "kind": extreme.kind.value,
            }
            for position, extreme in relevant.items()
        ],
    }
    _emit(payload, args.output)
    return 0


def run_summary_command(args) -> int:
    """Print series statistics."""
    bars = _load_bars(args.file)
    summary = summarize(bars)
    if summary is None:
        print("No bars in file", file=sys.stderr)
        return 1
    _emit(summary.to_dict(), args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Brick resampling and turning-point filtering for OHLC data"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable info logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    bricks = subparsers.add_parser("bricks", help="Resample bars into annotated bricks")
    bricks.add_argument("file", help="CSV file (time,open,high,low,close[,...])")
    bricks.add_argument("--step-size", type=float, required=True, help="Brick step size")
    bricks.add_argument("--output", "-o", help="Write JSON here instead of stdout")
    bricks.set_defaults(func=run_bricks_command)

    turning = subparsers.add_parser("turning-points", help="List relevant tops and bottoms")
    turning.add_argument("file", help="CSV file (time,open,high,low,close[,...])")
    turning.add_argument(
        "--step-size",
        type=float,
        default=None,
        help="Filter bricks of this step instead of raw bars"
    )
    turning.add_argument("--output", "-o", help="Write JSON here instead of stdout")
    turning.set_defaults(func=run_turning_points_command)

    summary = subparsers.add_parser("summary", help="Series statistics")
    summary.add_argument("file", help="CSV file (time,open,high,low,close[,...])")
    summary.add_argument("--output", "-o", help="Write JSON here instead of stdout")
    summary.set_defaults(func=run_summary_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
