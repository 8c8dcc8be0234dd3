"""
Synthetic chart series for fictional stocks.

Random walks pinned to a terminal price, with range presets and axis labels.
"""

from .chart_data import generate_chart_data, request_for_range, series_to_frame
from .labels import derive_labels
from .ranges import RANGE_PRESETS, SAMPLE_COUNTS, START_CHANGES, RangePreset, SeriesRange
from .walk import SeriesPoint, SeriesRequest, synthesize

__all__ = [
    "RANGE_PRESETS",
    "SAMPLE_COUNTS",
    "START_CHANGES",
    "RangePreset",
    "SeriesPoint",
    "SeriesRange",
    "SeriesRequest",
    "derive_labels",
    "generate_chart_data",
    "request_for_range",
    "series_to_frame",
    "synthesize",
]
