"""Exporters module for rate monitor pipeline."""

from .csv_exporter import CsvIntervalExporter, adjustment_label
from .workbook_exporter import PricingWorkbookExporter

__all__ = [
    "CsvIntervalExporter",
    "PricingWorkbookExporter",
    "adjustment_label",
]
