"""Collectors module for rate monitor pipeline."""

from .report_collector import ReportCollector

__all__ = [
    "ReportCollector",
]
