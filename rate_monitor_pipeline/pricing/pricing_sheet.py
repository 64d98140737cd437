"""
Préparation des données de la feuille de pricing.

Produit, pour chaque intervalle :
- le tarif hebdomadaire de la catégorie de référence (ligne 8 du template),
- pour chaque catégorie, son tarif hebdomadaire et l'écart en % à la référence,
- les facteurs de durée de réservation (feuille RESERVE LENGTH).

Les tableaux sont des DataFrames pandas ; la mise en forme des cellules
reste à la charge de l'exporteur.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional

import pandas as pd

from ..config.pricing_config import (
    SPECIAL_CATEGORY_MULTIPLIERS,
    TEMPLATE_LINKED_GROUPS,
    price_multiplier,
)
from ..config.settings import Settings
from ..models.price_interval import PriceInterval
from .linked_groups import normalize_linked_groups, raw_price_lookup
from .reserve_length import (
    AuxiliaryData,
    ReserveLengthFactorCalculator,
    build_reference_rates,
)

logger = logging.getLogger(__name__)


@dataclass
class PricingSheet:
    """Données calculées pour le template de pricing."""
    reference_category: str
    multiplier: float
    normalized_prices: Dict[int, Dict[str, float]] = field(default_factory=dict)
    reference_rates: Dict[int, Dict[date, float]] = field(default_factory=dict)
    intervals: pd.DataFrame = field(default_factory=pd.DataFrame)
    category_rates: pd.DataFrame = field(default_factory=pd.DataFrame)
    reserve_factors: pd.DataFrame = field(default_factory=pd.DataFrame)


class PricingSheetBuilder:
    """
    Calcule les valeurs publiées dans le template de pricing.
    """
    
    def __init__(
        self,
        settings: Optional[Settings] = None,
        linked_groups=None,
        special_multipliers: Optional[Mapping[str, float]] = None
    ):
        """
        Args:
            settings: Configuration (si None, valeurs par défaut)
            linked_groups: Groupes liés du template (défaut: TEMPLATE_LINKED_GROUPS)
            special_multipliers: Catégories tarifées en multiple de la référence
        """
        self.settings = settings or Settings()
        self.linked_groups = TEMPLATE_LINKED_GROUPS if linked_groups is None else linked_groups
        self.special_multipliers = (
            SPECIAL_CATEGORY_MULTIPLIERS if special_multipliers is None else special_multipliers
        )
        self.calculator = ReserveLengthFactorCalculator(
            max_rental_length=self.settings.max_rental_length
        )
    
    def resolve_reference_category(self, categories: List[str]) -> str:
        """
        Catégorie de référence configurée, sinon la première sélectionnée.
        """
        reference = self.settings.reference_category
        if reference in categories:
            return reference
        
        fallback = categories[0] if categories else "N/A"
        logger.warning(
            f"Reference category {reference} not found in selected categories, "
            f"using {fallback} instead"
        )
        return fallback
    
    def build(
        self,
        intervals: List[PriceInterval],
        categories: List[str],
        adjustment_pct: float = 0.0,
        auxiliary_data: Optional[AuxiliaryData] = None,
        sheet_categories: Optional[List[str]] = None
    ) -> PricingSheet:
        """
        Construit toutes les tables du template.
        
        Args:
            intervals: Intervalles analysés
            categories: Catégories sélectionnées
            adjustment_pct: Ajustement de prix en % (15 = +15 %)
            auxiliary_data: Séries {durée: {date: prix}} de la catégorie de référence
            sheet_categories: Lignes de la feuille (défaut: catégories sélectionnées)
            
        Returns:
            PricingSheet
        """
        reference = self.resolve_reference_category(categories)
        multiplier = price_multiplier(adjustment_pct)
        ordered = sorted(intervals, key=lambda interval: interval.start_date)
        
        normalized = normalize_linked_groups(ordered, self.linked_groups, raw_price_lookup)
        reference_rates = build_reference_rates(ordered, normalized, reference)
        
        sheet = PricingSheet(
            reference_category=reference,
            multiplier=multiplier,
            normalized_prices=normalized,
            reference_rates=reference_rates,
        )
        sheet.intervals = self._interval_table(ordered, normalized, reference, multiplier)
        sheet.category_rates = self._category_table(
            ordered, normalized, reference_rates,
            sheet_categories if sheet_categories is not None else categories,
            multiplier,
        )
        sheet.reserve_factors = self.reserve_factor_table(
            ordered, reference, auxiliary_data or {}, reference_rates
        )
        
        logger.info(
            f"Built pricing sheet for {len(ordered)} intervals "
            f"(reference: {reference}, multiplier: {multiplier:.2f})"
        )
        return sheet
    
    def _interval_table(
        self,
        intervals: List[PriceInterval],
        normalized: Dict[int, Dict[str, float]],
        reference: str,
        multiplier: float
    ) -> pd.DataFrame:
        rows = []
        for i, interval in enumerate(intervals):
            price = normalized.get(i, {}).get(reference)
            rows.append({
                "interval": i + 1,
                "start_date": interval.start_date,
                "end_date": interval.end_date,
                "reference_rate": (
                    price * self.settings.reference_days * multiplier
                    if price is not None else None
                ),
            })
        return pd.DataFrame(
            rows, columns=["interval", "start_date", "end_date", "reference_rate"]
        )
    
    def _category_table(
        self,
        intervals: List[PriceInterval],
        normalized: Dict[int, Dict[str, float]],
        reference_rates: Dict[int, Dict[date, float]],
        categories: List[str],
        multiplier: float
    ) -> pd.DataFrame:
        days = self.settings.reference_days
        rows = []
        
        for category in categories:
            for i, interval in enumerate(intervals):
                row = {"category": category, "interval": i + 1,
                       "weekly_rate": None, "percentage_diff": 0.0}
                
                if i not in reference_rates or i not in normalized:
                    logger.debug(f"Missing reference data for {category} in interval {i + 1}")
                    rows.append(row)
                    continue
                
                reference_rate = reference_rates[i][interval.start_date] * days
                
                if category in self.special_multipliers:
                    rate = reference_rate * self.special_multipliers[category]
                elif category in normalized[i]:
                    rate = normalized[i][category] * days
                else:
                    logger.debug(f"No price available for {category} in interval {i + 1}")
                    row["weekly_rate"] = 0.0
                    rows.append(row)
                    continue
                
                if reference_rate > 0:
                    row["percentage_diff"] = (rate - reference_rate) / reference_rate * 100
                row["weekly_rate"] = rate * multiplier
                rows.append(row)
        
        return pd.DataFrame(
            rows, columns=["category", "interval", "weekly_rate", "percentage_diff"]
        )
    
    def reserve_factor_table(
        self,
        intervals: List[PriceInterval],
        reference: str,
        auxiliary_data: AuxiliaryData,
        reference_rates: Dict[int, Dict[date, float]]
    ) -> pd.DataFrame:
        """
        Facteurs disponibles par (intervalle, durée) ; les sentinelles 0 sont omises.
        """
        rows = []
        for i, interval in enumerate(intervals):
            for length in range(1, self.settings.max_rental_length + 1):
                result = self.calculator.calculate(
                    interval, length, reference, auxiliary_data, reference_rates
                )
                if not result.is_available:
                    logger.debug(
                        f"No factor calculated for {length}D, interval {interval.label()}"
                    )
                    continue
                rows.append({
                    "interval": i + 1,
                    "start_date": interval.start_date,
                    "end_date": interval.end_date,
                    "rental_length": length,
                    "source_length": result.source_length,
                    "factor": result.factor,
                })
        return pd.DataFrame(rows, columns=[
            "interval", "start_date", "end_date", "rental_length", "source_length", "factor"
        ])
