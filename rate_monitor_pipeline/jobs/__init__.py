"""Jobs module for rate monitor pipeline."""

from .analyze_rates import run_analysis

__all__ = [
    "run_analysis",
]
