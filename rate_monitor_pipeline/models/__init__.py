"""Data models for rate monitor pipeline."""

from .quote import Quote
from .price_interval import PriceInterval, IntervalAnalysis
from .reserve_factor import ReserveLengthFactor

__all__ = [
    "Quote",
    "PriceInterval",
    "IntervalAnalysis",
    "ReserveLengthFactor",
]
