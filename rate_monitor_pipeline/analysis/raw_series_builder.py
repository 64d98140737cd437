"""
Construction des séries de prix brutes par catégorie.

Les séries sont stockées dans une matrice dense (catégorie x date) indexée
sur l'axe global des dates, calculé une seule fois par analyse.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

import numpy as np

from ..models.quote import Quote

logger = logging.getLogger(__name__)


@dataclass
class PriceMatrix:
    """
    Prix journaliers par catégorie sur l'axe global des dates.
    
    Attributes:
        dates: Axe des dates, trié, sans doublon
        categories: Catégories dans l'ordre de sélection (ordinal stable)
        prices: Tableau float (n_categories, n_dates), NaN = prix manquant
        filled: Masque booléen des prix comblés (None avant comblement)
    """
    dates: List[date]
    categories: List[str]
    prices: np.ndarray
    filled: Optional[np.ndarray] = None
    _date_index: Dict[date, int] = field(default_factory=dict, repr=False)
    
    def __post_init__(self):
        self._date_index = {day: i for i, day in enumerate(self.dates)}
    
    @property
    def is_empty(self) -> bool:
        return not self.dates or not self.categories
    
    def date_index(self, day: date) -> int:
        return self._date_index[day]
    
    def category_index(self, category: str) -> int:
        return self.categories.index(category)
    
    def row(self, category: str) -> np.ndarray:
        return self.prices[self.category_index(category)]
    
    def price_at(self, category: str, day: date) -> Optional[float]:
        value = self.prices[self.category_index(category), self.date_index(day)]
        return None if np.isnan(value) else float(value)
    
    def with_prices(
        self,
        prices: np.ndarray,
        filled: Optional[np.ndarray] = None
    ) -> "PriceMatrix":
        """Nouvelle matrice sur les mêmes axes (les tableaux ne sont pas partagés)."""
        return PriceMatrix(
            dates=list(self.dates),
            categories=list(self.categories),
            prices=prices,
            filled=filled if filled is not None else (
                None if self.filled is None else self.filled.copy()
            ),
        )


@dataclass
class RawSeries:
    """Séries brutes et catégories écartées faute de prix positif."""
    matrix: PriceMatrix
    ignored_categories: List[str] = field(default_factory=list)


class RawSeriesBuilder:
    """
    Transforme une liste de cotations en séries brutes par catégorie.
    
    L'axe des dates est l'union des dates de TOUTES les cotations, quelle
    que soit la catégorie. Seules les catégories sélectionnées ayant au moins
    un montant strictement positif sont conservées.
    """
    
    def build(
        self,
        quotes: List[Quote],
        selected_categories: Iterable[str]
    ) -> RawSeries:
        """
        Construit la matrice brute.
        
        Args:
            quotes: Cotations pré-nettoyées
            selected_categories: Codes Sipp retenus pour l'analyse
            
        Returns:
            RawSeries (prix <= 0 ou absents = NaN)
        """
        selected = list(dict.fromkeys(selected_categories))
        dates = sorted({quote.quote_date for quote in quotes})
        
        with_data = {
            quote.category_code
            for quote in quotes
            if quote.category_code in selected and quote.suggested_amount > 0
        }
        valid = [category for category in selected if category in with_data]
        ignored = [category for category in selected if category not in with_data]
        
        if ignored:
            logger.info(
                f"Ignoring {len(ignored)} selected categories with no non-zero values: "
                f"{', '.join(ignored)}"
            )
        
        logger.info(
            f"Found {len(dates)} unique dates and {len(valid)} valid categories "
            f"({len(selected)} selected)"
        )
        
        prices = np.full((len(valid), len(dates)), np.nan, dtype=float)
        matrix = PriceMatrix(dates=dates, categories=valid, prices=prices)
        
        row_of = {category: i for i, category in enumerate(valid)}
        for quote in quotes:
            row = row_of.get(quote.category_code)
            if row is None:
                continue
            # La dernière cotation d'un couple (catégorie, date) l'emporte, même nulle
            amount = quote.suggested_amount
            prices[row, matrix.date_index(quote.quote_date)] = amount if amount > 0 else np.nan
        
        return RawSeries(matrix=matrix, ignored_categories=ignored)
