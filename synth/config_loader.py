"""
Configuration loader with pydantic validation for the series synthesizer.
Lets a YAML file override the built-in range presets.
"""

from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field

from synth.ranges import RANGE_PRESETS, RangePreset, SeriesRange, resolve_range
from synth.walk import MIN_VALUE


class PresetOverride(BaseModel):
    """Partial override of one range preset."""
    model_config = {"extra": "forbid"}

    units: Optional[int] = Field(default=None, ge=1, description="Span length in time units")
    time_unit: Optional[Literal["hours", "days", "weeks", "months", "years"]] = None
    samples_per_unit: Optional[int] = Field(default=None, ge=1, description="Points per time unit")
    label_style: Optional[Literal["hour", "weekday", "month_day", "year"]] = None
    start_change: Optional[float] = Field(default=None, gt=-1.0, lt=1.0, description="Start offset fraction")
    momentum_start_change: Optional[float] = None
    momentum_trend: Optional[float] = Field(default=None, gt=0.0, description="Trend per momentum unit")
    volatility_scale: Optional[float] = Field(default=None, ge=0.0, description="Volatility multiplier")


class SynthConfig(BaseModel):
    """Synthesizer configuration."""
    min_value: float = Field(default=MIN_VALUE, gt=0.0, description="Floor applied to every value")
    default_volatility: float = Field(default=0.15, gt=0.0, description="Base volatility for chart bundles")
    presets: dict[SeriesRange, PresetOverride] = Field(
        default_factory=dict, description="Per-range preset overrides keyed by range code"
    )


class ChartSynthConfig(BaseModel):
    """Root configuration model."""
    synth: SynthConfig = SynthConfig()

    model_config = {"extra": "allow"}


def _normalize_legacy_config(config_data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a flat layout (range codes at the root) to the nested one."""

    if "synth" in config_data:
        return config_data

    logger.info("Normalizing flat configuration format")

    synth: dict[str, Any] = {}
    presets: dict[str, Any] = {}
    normalized: dict[str, Any] = {"synth": synth}

    for key, value in config_data.items():
        if key in ("min_value", "default_volatility"):
            synth[key] = value
        elif key == "presets":
            presets.update(value or {})
        elif resolve_range(key) is not None:
            presets[resolve_range(key).value] = value
        else:
            normalized[key] = value

    if presets:
        synth["presets"] = presets

    return normalized


def load_config(path: str = "config.yaml") -> ChartSynthConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Validated configuration object

    Raises:
        ValueError: If the file cannot be parsed or fails validation
    """
    config_path = Path(path)

    if not config_path.exists():
        logger.warning(f"Config file not found at {path}, using defaults")
        return ChartSynthConfig()

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML config: {e}")

    if not raw_config:
        logger.warning("Empty config file, using defaults")
        return ChartSynthConfig()

    if not isinstance(raw_config, dict):
        raise ValueError(f"Configuration validation failed: expected a mapping, got {type(raw_config).__name__}")

    normalized_config = _normalize_legacy_config(raw_config)

    try:
        config = ChartSynthConfig.model_validate(normalized_config)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    logger.info(f"Loaded configuration: {config.model_dump(mode='json')}")

    return config


def build_presets(config: ChartSynthConfig) -> dict[SeriesRange, RangePreset]:
    """
    Merge configured overrides onto the built-in preset table.

    Returns a new mapping; RANGE_PRESETS is left untouched.
    """
    presets = dict(RANGE_PRESETS)
    for series_range, override in config.synth.presets.items():
        changes = override.model_dump(exclude_none=True)
        if not changes:
            continue
        merged = presets[series_range].model_dump() | changes
        presets[series_range] = RangePreset.model_validate(merged)
    return presets
