"""
Strict validation for synthesized series.

The synthesizer coerces bad input instead of rejecting it; callers that
want hard failures run requests and results through these checks.
"""

import math
from typing import Mapping

import pandas as pd
from loguru import logger

from synth.chart_data import series_to_frame
from synth.ranges import RANGE_PRESETS, RangePreset, SeriesRange, resolve_range
from synth.walk import MIN_VALUE, SeriesPoint, SeriesRequest


def assert_monotonic_ts(df: pd.DataFrame, column: str = 'ts') -> None:
    """
    Assert that timestamps are strictly increasing.

    Args:
        df: DataFrame to check
        column: Timestamp column name

    Raises:
        ValueError: If timestamps repeat or go backwards
    """
    if df.empty:
        return

    if column not in df.columns:
        raise ValueError(f"Column '{column}' not found in DataFrame")

    if not (df[column].is_monotonic_increasing and df[column].is_unique):
        diffs = df[column].diff()
        zero = pd.Timedelta(0) if pd.api.types.is_datetime64_any_dtype(df[column]) else 0
        bad_indices = diffs[diffs <= zero].index.tolist()

        raise ValueError(
            f"Timestamps in column '{column}' are not monotonic. "
            f"Found {len(bad_indices)} non-increasing steps at indices: {bad_indices[:5]}..."
        )


def validate_request(
    request: SeriesRequest,
    presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS
) -> SeriesRequest:
    """
    Reject requests the synthesizer would otherwise silently coerce.

    Args:
        request: Request to check
        presets: Preset table the range must belong to

    Returns:
        The request unchanged

    Raises:
        ValueError: On unknown range, non-positive end value or bad noise parameters
    """
    series_range = resolve_range(request.range)
    if series_range is None or series_range not in presets:
        raise ValueError(f"Unsupported range '{request.range}'. Expected one of: {[str(r) for r in presets]}")

    if math.isnan(request.end_value) or request.end_value <= 0:
        raise ValueError(f"End value must be positive, got {request.end_value}")

    if request.volatility < 0:
        raise ValueError(f"Volatility must be non-negative, got {request.volatility}")

    if math.isinf(request.trend_bias) or math.isinf(request.volatility):
        raise ValueError("Trend bias and volatility must be finite")

    return request


def validate_series(
    points: list[SeriesPoint],
    request: SeriesRequest,
    presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS,
    min_value: float = MIN_VALUE
) -> list[SeriesPoint]:
    """
    Check a synthesized series against the guarantees of its request.

    Args:
        points: Synthesized points, oldest first
        request: Request the points were produced from
        presets: Preset table used for synthesis
        min_value: Floor used for synthesis

    Returns:
        The points unchanged

    Raises:
        ValueError: If any guarantee is violated
    """
    if not points:
        raise ValueError("Series is empty")

    series_range = resolve_range(request.range)
    if series_range is not None and series_range in presets:
        expected_len = presets[series_range].sample_count
        if len(points) != expected_len:
            raise ValueError(f"Expected {expected_len} points for {series_range}, got {len(points)}")

    df = series_to_frame(points)
    assert_monotonic_ts(df)

    if df['value'].isna().any():
        raise ValueError("NaN values found in series")

    below = df[df['value'] < min_value]
    if len(below) > 0:
        raise ValueError(f"Found {len(below)} values below floor {min_value}")

    expected_end = max(min_value, request.end_value)
    if points[-1].value != expected_end:
        raise ValueError(f"Series ends at {points[-1].value}, expected {expected_end}")

    logger.debug(f"Validated {len(points)} points for {request.range}")
    return points
