"""
Constrained random-walk synthesizer.

Produces a bounded random walk that starts at a range-dependent discount
from the requested end value, drifts toward it along a linear backbone and
is pinned to the end value exactly on its final point.
"""

import math
from datetime import datetime
from typing import Callable, Mapping, Optional

import numpy as np
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import settings
from synth.labels import labels_for_preset
from synth.ranges import RANGE_PRESETS, RangeLike, RangePreset, SeriesRange, preset_for, start_change_for

MIN_VALUE = 0.01

# Zero-argument callable yielding uniform floats in [0, 1)
RandomSource = Callable[[], float]


class SeriesRequest(BaseModel):
    """Parameters for one synthesized series."""
    model_config = ConfigDict(frozen=True)

    end_value: float = Field(description="Value the series terminates at")
    range: RangeLike = Field(default=SeriesRange.ONE_YEAR, description="Historical window")
    trend_bias: float = Field(default=0.0, description="Signed drift per step")
    volatility: Optional[float] = Field(
        default=None, validate_default=True, description="Scale of per-step noise"
    )

    @field_validator("volatility", mode="after")
    @classmethod
    def _default_volatility(cls, v: Optional[float]) -> float:
        if v is None or math.isnan(v):
            logger.warning(f"Volatility {v!r} replaced with default {settings.SYNTH_DEFAULT_VOLATILITY}")
            return settings.SYNTH_DEFAULT_VOLATILITY
        return v

    @field_validator("trend_bias", mode="after")
    @classmethod
    def _default_trend(cls, v: float) -> float:
        return 0.0 if math.isnan(v) else v


class SeriesPoint(BaseModel):
    """One chart sample."""
    model_config = ConfigDict(frozen=True)

    timestamp: int
    label: str
    value: float


def default_random_source() -> RandomSource:
    """
    Uniform [0, 1) source backed by numpy's Generator.
    Seeded from SYNTH_SEED when configured, fresh entropy otherwise.
    """
    rng = np.random.default_rng(settings.SYNTH_SEED)
    return lambda: float(rng.random())


def synthesize(
    request: SeriesRequest,
    rng: Optional[RandomSource] = None,
    now: Optional[datetime] = None,
    presets: Mapping[SeriesRange, RangePreset] = RANGE_PRESETS,
    min_value: float = MIN_VALUE,
) -> list[SeriesPoint]:
    """
    Generate a series ending exactly at request.end_value.

    Args:
        request: Series parameters
        rng: Uniform [0, 1) source (defaults to default_random_source())
        now: Time of the final point (defaults to current time)
        presets: Preset table to resolve the range against
        min_value: Floor applied to every value

    Returns:
        Points ordered oldest to newest
    """
    if rng is None:
        rng = default_random_source()

    preset = preset_for(request.range, presets)
    count = preset.sample_count
    end_value = request.end_value

    start_value = end_value * (1 + start_change_for(preset, request.trend_bias))
    base_step = (end_value - start_value) / count
    timestamps, labels = labels_for_preset(preset, count, now)

    logger.debug(
        f"Synthesizing {count} points for {request.range}: "
        f"start={start_value:.4f} end={end_value:.4f} step={base_step:.6f}"
    )

    points = []
    current = start_value
    for i in range(count):
        if i == count - 1:
            value = end_value
        else:
            noise = (rng() - 0.5) * request.volatility
            value = current + base_step + current * (request.trend_bias + noise)
        value = max(min_value, value)

        j = min(i, len(timestamps) - 1)
        points.append(SeriesPoint(timestamp=timestamps[j], label=labels[j], value=value))
        current = value

    return points
