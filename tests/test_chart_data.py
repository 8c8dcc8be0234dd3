"""
Tests for synth/chart_data module.
"""

import pandas as pd
import pytest

from config.settings import settings
from synth.chart_data import (
    MOMENTUM_FACTORS,
    generate_chart_data,
    momentum_factor,
    parse_volatility,
    request_for_range,
    series_to_frame,
)
from synth.ranges import RANGE_PRESETS, SAMPLE_COUNTS, SeriesRange
from tests.fixtures.synthetic_data import FIXED_NOW, constant_source


def test_momentum_factor():
    """Test rating to factor mapping with weak fallback."""
    assert momentum_factor("Strong") == 0.8
    assert momentum_factor("Fair") == 0.0
    assert momentum_factor("Weak") == -0.5
    assert momentum_factor("Unknown") == -0.5
    assert momentum_factor(None) == -0.5
    assert set(MOMENTUM_FACTORS) == {"Strong", "Fair", "Weak"}


def test_parse_volatility():
    """Test numeric and string volatility parsing with default fallback."""
    assert parse_volatility(0.3) == 0.3
    assert parse_volatility("0.42") == 0.42
    assert parse_volatility(None) == settings.SYNTH_DEFAULT_VOLATILITY
    assert parse_volatility("high") == settings.SYNTH_DEFAULT_VOLATILITY
    assert parse_volatility("0.0") == settings.SYNTH_DEFAULT_VOLATILITY
    assert parse_volatility(float("nan")) == settings.SYNTH_DEFAULT_VOLATILITY


def test_request_for_range_scales_by_preset():
    """Test trend and volatility are scaled per range."""
    request = request_for_range(150.0, SeriesRange.FIVE_YEAR, momentum="Strong", volatility="0.2")

    assert request.end_value == 150.0
    assert request.trend_bias == pytest.approx(0.8 * 0.01)
    assert request.volatility == pytest.approx(0.2 * 1.2)


def test_request_for_range_fair_momentum_is_neutral():
    """Test Fair momentum adds no trend."""
    request = request_for_range(10.0, "1D", momentum="Fair", volatility=0.5)

    assert request.trend_bias == 0.0
    assert request.volatility == pytest.approx(0.1)


def test_generate_chart_data_all_ranges():
    """Test the bundle holds one pinned series per range, keyed by code."""
    chart = generate_chart_data(87.25, momentum="Strong", volatility="0.25", now=FIXED_NOW)

    assert list(chart) == [str(r) for r in RANGE_PRESETS]
    for series_range in SeriesRange:
        points = chart[str(series_range)]
        assert len(points) == SAMPLE_COUNTS[series_range]
        assert points[-1].value == 87.25
        assert points[-1].timestamp == int(FIXED_NOW.timestamp() * 1000)


def test_generate_chart_data_subset_and_shared_source():
    """Test a range subset consumes draws from one shared source."""
    calls = []

    def counting_source():
        calls.append(1)
        return 0.5

    chart = generate_chart_data(
        20.0, ranges=["1D", SeriesRange.FIVE_DAY], rng=counting_source, now=FIXED_NOW
    )

    assert list(chart) == ["1D", "5D"]
    assert len(calls) == (24 - 1) + (35 - 1)


def test_generate_chart_data_is_reproducible():
    """Test identical sources give identical bundles."""
    first = generate_chart_data(55.0, "Weak", 0.4, rng=constant_source(0.3), now=FIXED_NOW)
    second = generate_chart_data(55.0, "Weak", 0.4, rng=constant_source(0.3), now=FIXED_NOW)

    for code in first:
        assert [p.model_dump() for p in first[code]] == [p.model_dump() for p in second[code]]


def test_series_to_frame():
    """Test DataFrame export columns and dtypes."""
    chart = generate_chart_data(30.0, ranges=[SeriesRange.INTRADAY], now=FIXED_NOW)
    df = series_to_frame(chart["1D"])

    assert list(df.columns) == ["ts", "label", "value"]
    assert len(df) == 24
    assert str(df["ts"].dt.tz) == "UTC"
    assert df["ts"].is_monotonic_increasing
    assert df["ts"].iloc[-1] == pd.Timestamp(FIXED_NOW)
    assert df["value"].iloc[-1] == 30.0


def test_series_to_frame_empty():
    """Test empty series convert to an empty frame."""
    df = series_to_frame([])

    assert df.empty
    assert list(df.columns) == ["ts", "label", "value"]


def test_unknown_range_gets_no_momentum_trend():
    """Test ranges outside the preset table ignore momentum instead of compounding it."""
    for momentum in ("Strong", "Weak", "Unknown"):
        request = request_for_range(100.0, "48H", momentum=momentum, volatility=0.2)
        assert request.trend_bias == 0.0

    chart = generate_chart_data(
        100.0, "Strong", 0.0, ranges=["48H"], rng=constant_source(0.5), now=FIXED_NOW
    )
    values = [p.value for p in chart["48H"]]

    assert len(values) == 48
    assert max(values) <= 100.0
    assert values[0] == pytest.approx(90.0 + 10.0 / 48)
    assert values[-1] == 100.0


def test_bundle_keys_are_canonical_codes():
    """Test lowercase codes are keyed by their canonical range code."""
    chart = generate_chart_data(12.0, ranges=["5d", "max", "3d"], rng=constant_source(0.5), now=FIXED_NOW)

    assert list(chart) == ["5D", "MAX", "3d"]
    assert len(chart["5D"]) == 35
