"""
Normaliseur des rapports de suggestion vers des cotations.

Format attendu (en-têtes de la première ligne) :
    Sipp | PickUpDate | SuggestedAmount | RuleDescription | Location | Lor

Seules les trois premières colonnes sont obligatoires.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from ..models.quote import Quote
from ..utils.date_utils import to_date
from ..utils.validators import validate_columns, validate_data

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["Sipp", "PickUpDate", "SuggestedAmount"]

QUOTE_SCHEMA = {
    "quote_date": date,
    "category_code": str,
    "suggested_amount": float,
}


def read_amount(value: Any) -> Optional[float]:
    """
    Montant arrondi à 0.1, ou None si la valeur est absente ou illisible.
    """
    if value is None:
        return None
    try:
        amount = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(amount):
        return None
    return round(amount * 10) / 10


def parse_amount(value: Any) -> float:
    """
    Montant arrondi à 0.1 ; une valeur absente ou illisible vaut 0.
    """
    amount = read_amount(value)
    return 0.0 if amount is None else amount


class QuoteNormalizer:
    """
    Convertit les lignes d'un rapport en cotations pré-nettoyées.
    """
    
    def normalize(self, table: pd.DataFrame) -> List[Quote]:
        """
        Args:
            table: Première feuille du rapport principal
            
        Returns:
            Cotations triées par date (montants nuls inclus) ; liste vide si
            les colonnes obligatoires manquent
        """
        logger.info("Extracting rate data...")
        
        if table.empty or validate_columns(table, REQUIRED_COLUMNS):
            return []
        
        quotes: List[Quote] = []
        for record in table.to_dict("records"):
            quote = self._normalize_record(record)
            if quote is not None:
                quotes.append(quote)
        
        quotes.sort(key=lambda quote: quote.quote_date)
        logger.info(f"Extracted {len(quotes)} rate entries (including entries with 0 suggested amount)")
        return quotes
    
    def _normalize_record(self, record: Dict[str, Any]):
        category = self._text(record.get("Sipp"))
        quote_date = to_date(record.get("PickUpDate"))
        
        if not category or quote_date is None:
            return None
        
        data = {
            "quote_date": quote_date,
            "category_code": category,
            "suggested_amount": parse_amount(record.get("SuggestedAmount")),
        }
        if not validate_data(data, QUOTE_SCHEMA):
            return None
        
        return Quote(
            rule_description=self._text(record.get("RuleDescription")),
            location=self._text(record.get("Location")),
            lor=self._integer(record.get("Lor")),
            **data,
        )
    
    def extract_auxiliary_series(
        self,
        table: pd.DataFrame,
        reference_category: str
    ) -> Dict[date, float]:
        """
        Série {date: prix} de la catégorie de référence d'un rapport <N>D.
        
        Les lignes d'autres catégories ou illisibles sont ignorées.
        """
        series: Dict[date, float] = {}
        if table.empty or validate_columns(table, REQUIRED_COLUMNS):
            return series
        
        for record in table.to_dict("records"):
            if self._text(record.get("Sipp")) != reference_category:
                continue
            quote_date = to_date(record.get("PickUpDate"))
            amount = read_amount(record.get("SuggestedAmount"))
            if quote_date is None or amount is None:
                continue
            series[quote_date] = amount
        
        return series
    
    @staticmethod
    def summarize(quotes: List[Quote]) -> Dict[str, Any]:
        """
        Statistiques descriptives d'une liste de cotations.
        """
        if not quotes:
            return {"count": 0}
        
        dates = [quote.quote_date for quote in quotes]
        first, last = min(dates), max(dates)
        summary = {
            "count": len(quotes),
            "first_date": first,
            "last_date": last,
            "days": (last - first).days + 1,
            "unique_dates": len(set(dates)),
            "unique_categories": len({quote.category_code for quote in quotes}),
            "zero_amount_count": sum(1 for quote in quotes if quote.suggested_amount == 0),
        }
        logger.info(
            f"Date range: {first:%Y-%m-%d} to {last:%Y-%m-%d} ({summary['days']} days), "
            f"{summary['unique_dates']} unique dates, "
            f"{summary['unique_categories']} categories, "
            f"{summary['zero_amount_count']} entries with 0 suggested amount"
        )
        return summary
    
    @staticmethod
    def _text(value: Any) -> str:
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return ""
        return str(value).strip()
    
    @staticmethod
    def _integer(value: Any) -> int:
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return 0
