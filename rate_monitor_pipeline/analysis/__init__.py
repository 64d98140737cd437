"""Analysis module for rate monitor pipeline."""

from .raw_series_builder import RawSeriesBuilder, RawSeries, PriceMatrix
from .gap_filler import GapFiller
from .fluctuation_smoother import FluctuationSmoother, SmoothingResult
from .change_point_segmenter import ChangePointSegmenter
from .interval_analyzer import PriceIntervalAnalyzer, analyze_intervals

__all__ = [
    "RawSeriesBuilder",
    "RawSeries",
    "PriceMatrix",
    "GapFiller",
    "FluctuationSmoother",
    "SmoothingResult",
    "ChangePointSegmenter",
    "PriceIntervalAnalyzer",
    "analyze_intervals",
]
