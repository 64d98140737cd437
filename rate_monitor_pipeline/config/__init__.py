"""Configuration module for rate monitor pipeline."""

from .settings import Settings
from .pricing_config import (
    CSV_LINKED_GROUPS,
    TEMPLATE_LINKED_GROUPS,
    SPECIAL_CATEGORY_MULTIPLIERS,
    price_multiplier,
)

__all__ = [
    "Settings",
    "CSV_LINKED_GROUPS",
    "TEMPLATE_LINKED_GROUPS",
    "SPECIAL_CATEGORY_MULTIPLIERS",
    "price_multiplier",
]
