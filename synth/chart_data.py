"""
Chart bundles for stock cards.
Turns a stock's current price, momentum rating and volatility into one
synthesized series per range.
"""

import math
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

import pandas as pd
from loguru import logger

from config.settings import settings
from synth.labels import resolve_now
from synth.ranges import RANGE_PRESETS, RangeLike, RangePreset, SeriesRange, preset_for, resolve_range
from synth.walk import RandomSource, SeriesPoint, SeriesRequest, default_random_source, synthesize

MOMENTUM_FACTORS: dict[str, float] = {
    "Strong": 0.8,
    "Fair": 0.0,
    "Weak": -0.5,
}

DEFAULT_MOMENTUM_FACTOR = MOMENTUM_FACTORS["Weak"]


def momentum_factor(rating: Optional[str]) -> float:
    """Map a momentum rating to its factor; unknown ratings count as weak."""
    return MOMENTUM_FACTORS.get(rating or "", DEFAULT_MOMENTUM_FACTOR)


def parse_volatility(value: Any) -> float:
    """
    Parse a volatility given as number or numeric string.
    Unparsable, NaN and zero values fall back to SYNTH_DEFAULT_VOLATILITY.
    """
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = 0.0

    if math.isnan(parsed) or parsed == 0.0:
        logger.debug(f"Volatility {value!r} not usable, defaulting to {settings.SYNTH_DEFAULT_VOLATILITY}")
        return settings.SYNTH_DEFAULT_VOLATILITY
    return parsed


def request_for_range(
    current_price: float,
    value: RangeLike,
    momentum: Optional[str] = "Fair",
    volatility: Any = None,
    presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS
) -> SeriesRequest:
    """
    Build the SeriesRequest for one range of a stock chart.

    Args:
        current_price: Price the series must end at
        value: Range or range code
        momentum: Momentum rating ("Strong", "Fair", "Weak")
        volatility: Base volatility, scaled per range
        presets: Preset table

    Returns:
        Request with trend and volatility scaled by the range preset.
        Ranges outside the preset table get no momentum trend.
    """
    preset = preset_for(value, presets)
    series_range = resolve_range(value)
    if series_range is not None and series_range in presets:
        factor = momentum_factor(momentum)
    else:
        factor = 0.0
    return SeriesRequest(
        end_value=current_price,
        range=value,
        trend_bias=factor * preset.momentum_trend,
        volatility=parse_volatility(volatility) * preset.volatility_scale,
    )


def generate_chart_data(
    current_price: float,
    momentum: Optional[str] = "Fair",
    volatility: Any = None,
    ranges: Optional[Iterable[RangeLike]] = None,
    rng: Optional[RandomSource] = None,
    now: Optional[datetime] = None,
    presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS
) -> dict[str, list[SeriesPoint]]:
    """
    Generate chart series for several ranges at once.

    All series share one random source and one 'now', so their final
    points line up on the same timestamp.

    Returns:
        Mapping of range code to points, in the order ranges were given
    """
    if ranges is None:
        ranges = list(presets)
    if rng is None:
        rng = default_random_source()
    now = resolve_now(now)

    chart_data = {}
    for value in ranges:
        request = request_for_range(current_price, value, momentum, volatility, presets)
        code = str(resolve_range(value) or value)
        chart_data[code] = synthesize(request, rng=rng, now=now, presets=presets)

    logger.info(f"Generated chart data for {len(chart_data)} ranges ending at {current_price}")
    return chart_data


def series_to_frame(points: list[SeriesPoint]) -> pd.DataFrame:
    """Convert points to a DataFrame with UTC `ts`, `label` and `value` columns."""
    df = pd.DataFrame(
        [point.model_dump() for point in points],
        columns=["timestamp", "label", "value"],
    )
    df.insert(0, "ts", pd.to_datetime(df["timestamp"], unit="ms", utc=True))
    return df.drop(columns=["timestamp"])
