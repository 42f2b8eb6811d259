"""
Main entry point for the Brick Chart Server.

Usage:
    python -m src.chart_server.main --data ./data/es-5m.csv
    python -m src.chart_server.main --data ./data/es-5m.csv --step-size 10 --port 8080
"""

import argparse
import logging
from pathlib import Path

import uvicorn

from .api import app, init_app
from ..brick_analysis.brick_config import BrickConfig
from ..brick_analysis.constants import DEFAULT_STEP_SIZE

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Brick Chart Server - bricks and relevant turning points for charting"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="CSV file to load at startup (optional; bars can be PUT later)"
    )
    parser.add_argument(
        "--step-size",
        type=float,
        default=DEFAULT_STEP_SIZE,
        help=f"Default brick step size (default: {DEFAULT_STEP_SIZE})"
    )

    args = parser.parse_args()

    if args.data is not None and not Path(args.data).is_file():
        print(f"Error: Data file not found: {args.data}")
        return 1

    try:
        s = init_app(
            data_file=args.data,
            config=BrickConfig.default().with_step_size(args.step_size),
        )
    except ValueError as e:
        print(f"Error loading data: {e}")
        return 1

    print(f"\n{'='*60}")
    print("Brick Chart Server")
    print(f"{'='*60}")
    print(f"Data file:      {args.data or '(none, PUT /api/bars)'}")
    print(f"Bars loaded:    {len(s.source_bars)}")
    print(f"Step size:      {args.step_size}")
    print(f"Server:         http://{args.host}:{args.port}/")
    print(f"{'='*60}\n")

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="info"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
