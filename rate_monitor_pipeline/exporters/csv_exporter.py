"""
Export CSV des intervalles et des prix ajustés.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Collection, Iterable, List, Optional

import pandas as pd

from ..config.pricing_config import CSV_LINKED_GROUPS, price_multiplier
from ..models.price_interval import PriceInterval
from ..pricing.linked_groups import adjusted_price_lookup, normalize_linked_groups

logger = logging.getLogger(__name__)


def adjustment_label(adjustment_pct: float) -> str:
    """15 -> 'plus15', -10 -> 'minus10', 2.5 -> 'plus2.5'"""
    if adjustment_pct >= 0:
        return f"plus{adjustment_pct:g}"
    return f"minus{abs(adjustment_pct):g}"


class CsvIntervalExporter:
    """
    Écrit une ligne par catégorie et une colonne par intervalle.
    
    Les prix sont multipliés par le facteur d'ajustement PUIS les groupes
    liés sont alignés sur leur maximum (sur les prix ajustés).
    """
    
    def __init__(self, linked_groups: Optional[Iterable[Collection[str]]] = None):
        self.linked_groups = list(CSV_LINKED_GROUPS if linked_groups is None else linked_groups)
    
    def build_table(
        self,
        intervals: List[PriceInterval],
        categories: List[str],
        adjustment_pct: float = 0.0
    ) -> pd.DataFrame:
        """
        Tableau exporté : colonne 'Sipp' puis une colonne par intervalle.
        
        Returns:
            DataFrame de chaînes ('123.45' ou 'N/A')
        """
        multiplier = price_multiplier(adjustment_pct)
        prices = normalize_linked_groups(
            intervals,
            self.linked_groups,
            adjusted_price_lookup(multiplier, categories),
        )
        
        rows = []
        for category in sorted(categories):
            row = {"Sipp": category}
            for i, interval in enumerate(intervals):
                price = prices[i].get(category)
                row[interval.label()] = f"{price:.2f}" if price is not None else "N/A"
            rows.append(row)
        
        columns = ["Sipp"] + [interval.label() for interval in intervals]
        return pd.DataFrame(rows, columns=columns)
    
    def export(
        self,
        intervals: List[PriceInterval],
        categories: List[str],
        adjustment_pct: float,
        output_directory: str
    ) -> Optional[Path]:
        """
        Exporte les intervalles dans output_directory.
        
        Returns:
            Chemin du fichier écrit, ou None si rien à exporter / échec d'écriture
        """
        if not intervals:
            logger.info("No intervals to export")
            return None
        
        logger.info("Exporting intervals and rates to CSV...")
        
        output_path = Path(output_directory)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        csv_path = output_path / f"price_intervals_{timestamp}_{adjustment_label(adjustment_pct)}.csv"
        
        table = self.build_table(intervals, categories, adjustment_pct)
        multiplier = price_multiplier(adjustment_pct)
        
        try:
            output_path.mkdir(parents=True, exist_ok=True)
            table.to_csv(csv_path, index=False)
            with open(csv_path, "a", encoding="utf-8") as f:
                f.write("\n")
                f.write(f"Prices adjusted by {adjustment_pct:g}% ({multiplier:.2f}x multiplier)\n")
                f.write("\n")
                f.write("Linked Sipp categories (same prices):\n")
                for group in self.linked_groups:
                    f.write(f"{' and '.join(sorted(group))}\n")
        except OSError as e:
            logger.error(f"Error exporting to CSV: {e}", exc_info=True)
            return None
        
        logger.info(f"Exported to: {csv_path}")
        return csv_path
