"""Normalizers module for rate monitor pipeline."""

from .quote_normalizer import QuoteNormalizer, parse_amount, read_amount

__all__ = [
    "QuoteNormalizer",
    "parse_amount",
    "read_amount",
]
