"""Utils module for rate monitor pipeline."""

from .date_utils import nearest_date, lookup_exact_or_nearest, to_date
from .validators import validate_data, validate_columns

__all__ = [
    "nearest_date",
    "lookup_exact_or_nearest",
    "to_date",
    "validate_data",
    "validate_columns",
]
