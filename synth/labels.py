"""
Timestamp and axis-label derivation for synthesized series.
"""

from datetime import datetime
from typing import Mapping, Optional

import numpy as np
import pandas as pd

from config.settings import settings
from synth.ranges import RANGE_PRESETS, RangeLike, RangePreset, SeriesRange, preset_for

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return a tz-aware 'now'; naive datetimes are read as host local time."""
    if now is None:
        return settings.local_now()
    if now.tzinfo is None:
        return now.astimezone()
    return now


def derive_labels(
    value: RangeLike,
    count: int,
    now: Optional[datetime] = None,
    presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS
) -> tuple[list[int], list[str]]:
    """
    Produce parallel timestamp and label lists for a range.

    Args:
        value: Range or range code
        count: Number of samples to place across the range's span
        now: Anchor for the final sample (defaults to current time)
        presets: Preset table to resolve the range against

    Returns:
        Tuple of (epoch-millisecond timestamps ascending, axis labels)
    """
    return labels_for_preset(preset_for(value, presets), count, now)


def labels_for_preset(
    preset: RangePreset,
    count: int,
    now: Optional[datetime] = None
) -> tuple[list[int], list[str]]:
    """
    Spread `count` samples evenly over the preset's span, ending at now.

    The span is calendar aware (six months back is six calendar months), the
    spacing is uniform in absolute time so timestamps stay strictly
    increasing across DST shifts.
    """
    if count < 1:
        return [], []

    anchor = pd.Timestamp(resolve_now(now))
    span_start = anchor - pd.DateOffset(**{preset.time_unit: preset.units})
    step_ms = (anchor - span_start) / pd.Timedelta(milliseconds=1) / count

    now_ms = anchor.value // 1_000_000
    offsets = np.rint(np.arange(count - 1, -1, -1) * step_ms).astype(np.int64)
    timestamps = [int(now_ms - offset) for offset in offsets]

    index = pd.to_datetime(timestamps, unit="ms", utc=True).tz_convert(anchor.tz)
    return timestamps, _format_labels(index, preset.label_style)


def _format_labels(index: pd.DatetimeIndex, style: str) -> list[str]:
    if style == "hour":
        return [f"{hour}:00" for hour in index.hour]
    if style == "weekday":
        return [WEEKDAYS[day] for day in index.dayofweek]
    if style == "month_day":
        return [f"{month}/{day}" for month, day in zip(index.month, index.day)]
    return [str(year) for year in index.year]
