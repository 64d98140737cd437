"""
Export des tables de pricing dans un classeur xlsx.

Une feuille par table (PRICING, CATEGORIES, RESERVE LENGTH), sans mise en
forme : le classeur sert de source au template publié.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import pandas as pd

from ..pricing.pricing_sheet import PricingSheet

logger = logging.getLogger(__name__)


class PricingWorkbookExporter:
    """Écrit un PricingSheet dans `<export_directory>/TUN Pricing <date>.xlsx`."""
    
    def export(
        self,
        sheet: PricingSheet,
        export_directory: str,
        run_date: Optional[date] = None
    ) -> Optional[Path]:
        """
        Returns:
            Chemin du classeur, ou None si rien à exporter / échec d'écriture
        """
        if sheet.intervals.empty:
            logger.info("No intervals to write in pricing workbook")
            return None
        
        run_date = run_date or date.today()
        export_path = Path(export_directory)
        workbook_path = export_path / f"TUN Pricing {run_date:%Y-%m-%d}.xlsx"
        
        try:
            export_path.mkdir(parents=True, exist_ok=True)
            with pd.ExcelWriter(workbook_path, engine="openpyxl") as writer:
                sheet.intervals.to_excel(writer, sheet_name="PRICING", index=False)
                sheet.category_rates.to_excel(writer, sheet_name="CATEGORIES", index=False)
                sheet.reserve_factors.to_excel(writer, sheet_name="RESERVE LENGTH", index=False)
        except (OSError, ValueError) as e:
            logger.error(f"Error writing pricing workbook: {e}", exc_info=True)
            return None
        
        logger.info(
            f"Pricing workbook saved to {workbook_path} "
            f"(reference: {sheet.reference_category}, "
            f"{len(sheet.reserve_factors)} reserve length factors)"
        )
        return workbook_path
