"""
Utilitaires de dates pour les séries journalières.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, Optional

import pandas as pd
from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Origine des dates série Excel (système 1900, bug du 29/02/1900 inclus)
EXCEL_EPOCH = datetime(1899, 12, 30)


def to_date(value: Any) -> Optional[date]:
    """
    Convertit une valeur de cellule en date calendaire.
    
    Accepte les dates, datetimes, Timestamps pandas, numéros de série Excel
    et chaînes de caractères. Retourne None si la valeur n'est pas une date.
    """
    if value is None or value is pd.NaT:
        return None
    
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.date()
    
    if isinstance(value, datetime):
        return value.date()
    
    if isinstance(value, date):
        return value
    
    if isinstance(value, bool):
        return None
    
    if isinstance(value, (int, float)):
        if pd.isna(value):
            return None
        try:
            return (EXCEL_EPOCH + timedelta(days=float(value))).date()
        except OverflowError:
            return None
    
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date_parser.parse(text).date()
        except (ValueError, OverflowError):
            logger.debug(f"Could not parse date: {value!r}")
            return None
    
    return None


def nearest_date(target: date, candidates: Iterable[date]) -> Optional[date]:
    """
    Retourne la date la plus proche de `target` (distance absolue en jours).
    
    En cas d'égalité, la date la plus ancienne est retenue.
    Retourne None si aucune date candidate.
    """
    best: Optional[date] = None
    best_distance = None
    
    for candidate in sorted(candidates):
        distance = abs((candidate - target).days)
        if best_distance is None or distance < best_distance:
            best = candidate
            best_distance = distance
    
    return best


def lookup_exact_or_nearest(
    series: Dict[date, float],
    target: date
) -> Optional[float]:
    """
    Prix à la date exacte, sinon à la date la plus proche.
    
    Args:
        series: Série {date: prix}
        target: Date recherchée
        
    Returns:
        Prix trouvé, ou None si la série est vide
    """
    if target in series:
        return series[target]
    
    closest = nearest_date(target, series.keys())
    if closest is None:
        return None
    
    return series[closest]
