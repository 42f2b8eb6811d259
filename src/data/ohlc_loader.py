import logging
import os

import pandas as pd

from ..brick_analysis.adapters import OPTIONAL_COLUMNS

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['time', 'open', 'high', 'low', 'close']

# Share of rows that may fail OHLC validation before the whole file is rejected.
MAX_INVALID_FRACTION = 0.01


def load_ohlc(filepath: str) -> pd.DataFrame:
    """
    Loads OHLC data from a CSV file into a standardized DataFrame.

    Expected layout (comma-separated, header required, names case-insensitive):
        time,open,high,low,close[,volume][,indicator1][,indicator2][,extrema_marker]
    where ``time`` is a Unix epoch in seconds. Blank optional cells stay NaN.

    Args:
        filepath: Path to the CSV file.

    Returns:
        DataFrame indexed by UTC timestamp, sorted ascending, with columns:
        open, high, low, close, volume, indicator1, indicator2, extrema_marker.

    Raises:
        FileNotFoundError, ValueError.
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")

    if os.path.getsize(filepath) == 0:
        raise ValueError("File is empty")

    try:
        df = pd.read_csv(filepath, sep=',', engine='c')

        df.columns = df.columns.str.strip().str.lower()

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Missing required columns {missing}. Found: {df.columns.tolist()}")

        if 'volume' not in df.columns:
            df['volume'] = 0.0
        else:
            df['volume'] = df['volume'].fillna(0).astype('float64')

        for c in OPTIONAL_COLUMNS:
            if c not in df.columns:
                df[c] = float('nan')

        df['timestamp'] = pd.to_datetime(df['time'], unit='s', utc=True)
        df.drop(columns=['time'], inplace=True)

        for c in ['open', 'high', 'low', 'close'] + OPTIONAL_COLUMNS:
            df[c] = df[c].astype('float64')

    except (KeyError, TypeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValueError(f"Error parsing file: {e}")

    df = df[['timestamp', 'open', 'high', 'low', 'close', 'volume'] + OPTIONAL_COLUMNS]
    df = df.set_index('timestamp').sort_index(kind='mergesort')

    # Keep the last occurrence of a repeated timestamp (most recent correction)
    duplicate_timestamps = df.index.duplicated(keep='last')
    if duplicate_timestamps.any():
        logger.debug(
            f"Duplicate timestamps in {os.path.basename(filepath)}: "
            f"{duplicate_timestamps.sum()} removed (kept last occurrence)"
        )
        df = df[~duplicate_timestamps]

    return _drop_invalid_rows(df, filepath)


def _drop_invalid_rows(df: pd.DataFrame, filepath: str) -> pd.DataFrame:
    """Drop rows breaking low <= open/close <= high or volume >= 0."""
    if df.empty:
        return df

    valid_ohlc = (
        (df['low'] <= df['open']) & (df['open'] <= df['high']) &
        (df['low'] <= df['close']) & (df['close'] <= df['high'])
    )
    valid_mask = valid_ohlc & (df['volume'] >= 0)

    if valid_mask.all():
        return df

    invalid_count = int((~valid_mask).sum())
    total_count = len(df)
    if invalid_count / total_count > MAX_INVALID_FRACTION:
        raise ValueError(
            f"Too many invalid rows: {invalid_count}/{total_count} "
            f"({invalid_count / total_count:.2%})"
        )

    logger.warning(f"Dropping {invalid_count} invalid OHLC row(s) from {filepath}")
    return df[valid_mask]
