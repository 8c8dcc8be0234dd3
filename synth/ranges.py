"""
Range presets for the chart series synthesizer.

Single table of per-range constants: historical span, sample density,
axis label style and the start-change / trend / volatility multipliers.
Unrecognized range codes degrade to a one-sample-per-unit preset.
"""

import re
from enum import Enum
from typing import Literal, Mapping, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

TimeUnit = Literal["hours", "days", "weeks", "months", "years"]
LabelStyle = Literal["hour", "weekday", "month_day", "year"]


class SeriesRange(str, Enum):
    """Supported historical windows, valued by their chart codes."""
    INTRADAY = "1D"
    FIVE_DAY = "5D"
    ONE_MONTH = "1M"
    SIX_MONTH = "6M"
    ONE_YEAR = "1Y"
    FIVE_YEAR = "5Y"
    MAX = "MAX"

    def __str__(self) -> str:
        return self.value


class RangePreset(BaseModel):
    """Constants that shape a series for one range."""
    model_config = ConfigDict(frozen=True)

    units: int = Field(ge=1, description="Span length in time units")
    time_unit: TimeUnit = Field(description="Calendar unit of the span")
    samples_per_unit: int = Field(default=1, ge=1, description="Points generated per time unit")
    label_style: LabelStyle = Field(description="Axis label format")
    start_change: float = Field(gt=-1.0, lt=1.0, description="Start value offset as a fraction of the end value")
    momentum_start_change: float = Field(
        default=0.0, description="Start offset shift per unit of momentum factor"
    )
    momentum_trend: float = Field(default=1.0, gt=0.0, description="Per-step trend per unit of momentum factor")
    volatility_scale: float = Field(default=1.0, ge=0.0, description="Multiplier applied to base volatility")

    @property
    def sample_count(self) -> int:
        return self.units * self.samples_per_unit


RANGE_PRESETS: dict[SeriesRange, RangePreset] = {
    SeriesRange.INTRADAY: RangePreset(
        units=24, time_unit="hours", samples_per_unit=1, label_style="hour",
        start_change=-0.01, momentum_start_change=0.005, momentum_trend=0.001, volatility_scale=0.2,
    ),
    SeriesRange.FIVE_DAY: RangePreset(
        units=5, time_unit="days", samples_per_unit=7, label_style="weekday",
        start_change=-0.02, momentum_start_change=0.01, momentum_trend=0.002, volatility_scale=0.4,
    ),
    SeriesRange.ONE_MONTH: RangePreset(
        units=30, time_unit="days", samples_per_unit=4, label_style="month_day",
        start_change=-0.05, momentum_start_change=0.02, momentum_trend=0.003, volatility_scale=0.6,
    ),
    SeriesRange.SIX_MONTH: RangePreset(
        units=6, time_unit="months", samples_per_unit=4, label_style="month_day",
        start_change=-0.10, momentum_start_change=0.05, momentum_trend=0.005, volatility_scale=0.8,
    ),
    SeriesRange.ONE_YEAR: RangePreset(
        units=12, time_unit="months", samples_per_unit=12, label_style="year",
        start_change=-0.15, momentum_start_change=0.10, momentum_trend=0.007, volatility_scale=1.0,
    ),
    SeriesRange.FIVE_YEAR: RangePreset(
        units=5, time_unit="years", samples_per_unit=12, label_style="year",
        start_change=-0.40, momentum_start_change=0.20, momentum_trend=0.010, volatility_scale=1.2,
    ),
    SeriesRange.MAX: RangePreset(
        units=10, time_unit="years", samples_per_unit=12, label_style="year",
        start_change=-0.60, momentum_start_change=0.30, momentum_trend=0.015, volatility_scale=1.5,
    ),
}

# Flat views of the table for callers that only need one column
SAMPLE_COUNTS: dict[SeriesRange, int] = {r: p.sample_count for r, p in RANGE_PRESETS.items()}
START_CHANGES: dict[SeriesRange, float] = {r: p.start_change for r, p in RANGE_PRESETS.items()}
VOLATILITY_SCALES: dict[SeriesRange, float] = {r: p.volatility_scale for r, p in RANGE_PRESETS.items()}

MIN_SAMPLES = 2
DEFAULT_START_CHANGE = -0.10

UNIT_CODES: dict[str, TimeUnit] = {
    "H": "hours",
    "D": "days",
    "W": "weeks",
    "M": "months",
    "Y": "years",
}

UNIT_LABEL_STYLES: dict[TimeUnit, LabelStyle] = {
    "hours": "hour",
    "days": "weekday",
    "weeks": "month_day",
    "months": "month_day",
    "years": "year",
}

FALLBACK_PRESET = RangePreset(
    units=24, time_unit="hours", samples_per_unit=1, label_style="hour",
    start_change=DEFAULT_START_CHANGE,
)

_RANGE_CODE_RE = re.compile(r"^\s*(\d+)\s*([HDWMY])\s*$")

RangeLike = Union[SeriesRange, str]


def resolve_range(value: RangeLike) -> Optional[SeriesRange]:
    """Map a range or range code ("5D", "max") to a SeriesRange, or None if unknown."""
    if isinstance(value, SeriesRange):
        return value
    try:
        return SeriesRange(str(value).strip().upper())
    except ValueError:
        return None


def parse_range_code(code: str) -> Optional[tuple[int, TimeUnit]]:
    """
    Split a free-form range code into (unit count, time unit).

    Args:
        code: Code such as "3D", "2W" or "18M"

    Returns:
        Tuple of (units, time_unit), or None if the code has no recognizable shape
    """
    match = _RANGE_CODE_RE.match(str(code).upper())
    if not match:
        return None
    return int(match.group(1)), UNIT_CODES[match.group(2)]


def preset_for(
    value: RangeLike,
    presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS
) -> RangePreset:
    """
    Look up the preset for a range, degrading gracefully for unknown codes.

    Known ranges come from the preset table. An unknown code of the form
    "<count><unit>" gets one sample per unit (at least MIN_SAMPLES) and no
    trend adjustment; anything else gets FALLBACK_PRESET.
    """
    series_range = resolve_range(value)
    if series_range is not None and series_range in presets:
        return presets[series_range]

    code = value.value if isinstance(value, SeriesRange) else str(value)
    parsed = parse_range_code(code)
    if parsed is None:
        logger.warning(f"Unrecognized range '{code}', using {FALLBACK_PRESET.units} hourly samples")
        return FALLBACK_PRESET

    units, time_unit = parsed
    logger.warning(f"Unrecognized range '{code}', using raw unit count {units} as sample count")
    return RangePreset(
        units=max(MIN_SAMPLES, units),
        time_unit=time_unit,
        samples_per_unit=1,
        label_style=UNIT_LABEL_STYLES[time_unit],
        start_change=DEFAULT_START_CHANGE,
    )


def sample_count(value: RangeLike, presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS) -> int:
    """Number of points a series for this range contains."""
    return preset_for(value, presets).sample_count


def start_change_fraction(
    value: RangeLike,
    trend_bias: float,
    presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS
) -> float:
    """
    Fraction by which the series start sits away from its end value.

    Positive trend shrinks the historical discount, negative trend enlarges it.
    """
    return start_change_for(preset_for(value, presets), trend_bias)


def start_change_for(preset: RangePreset, trend_bias: float) -> float:
    return preset.start_change + preset.momentum_start_change * trend_bias / preset.momentum_trend
