"""Derived pricing module for rate monitor pipeline."""

from .linked_groups import (
    LinkedGroupNormalizer,
    normalize_linked_groups,
    raw_price_lookup,
    adjusted_price_lookup,
)
from .reserve_length import (
    ReserveLengthFactorCalculator,
    compute_reserve_factor,
    build_reference_rates,
    round_up_factor,
)
from .pricing_sheet import PricingSheetBuilder, PricingSheet

__all__ = [
    "LinkedGroupNormalizer",
    "normalize_linked_groups",
    "raw_price_lookup",
    "adjusted_price_lookup",
    "ReserveLengthFactorCalculator",
    "compute_reserve_factor",
    "build_reference_rates",
    "round_up_factor",
    "PricingSheetBuilder",
    "PricingSheet",
]
