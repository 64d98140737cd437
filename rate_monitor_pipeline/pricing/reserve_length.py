"""
Facteurs de majoration par durée de réservation (feuille RESERVE LENGTH).

Le facteur d'un intervalle pour une durée N exprime le surcoût d'une
location courte : prix de la série auxiliaire N jours de la catégorie de
référence, rapporté au prix de référence de l'intervalle.
"""

import logging
import math
from datetime import date
from typing import Dict, List, Mapping, Optional

from ..models.price_interval import PriceInterval
from ..models.reserve_factor import ReserveLengthFactor
from ..utils.date_utils import lookup_exact_or_nearest

logger = logging.getLogger(__name__)

# {durée de location: {date: prix de la catégorie de référence}}
AuxiliaryData = Mapping[int, Mapping[date, float]]

# {index d'intervalle: {date: prix de référence journalier}}
ReferenceRates = Mapping[int, Mapping[date, float]]

MIN_FACTOR = 1.0


def round_up_factor(factor: float) -> float:
    """
    Arrondit au centième supérieur.
    
    Le bruit binaire est neutralisé avant l'arrondi : 1.1 reste 1.10.
    """
    return math.ceil(round(factor * 100, 6)) / 100


def build_reference_rates(
    intervals: List[PriceInterval],
    prices_by_interval: Mapping[int, Mapping[str, float]],
    reference_category: str
) -> Dict[int, Dict[date, float]]:
    """
    Prix journalier de référence, pour chaque date de chaque intervalle.
    
    Args:
        intervals: Intervalles (même indexation que prices_by_interval)
        prices_by_interval: Prix par intervalle (ex: sortie de normalize_linked_groups)
        reference_category: Catégorie de référence (ex: 'ESMS')
        
    Returns:
        {index d'intervalle: {date: prix}} ; les intervalles sans prix de
        référence sont absents
    """
    rates: Dict[int, Dict[date, float]] = {}
    for i, interval in enumerate(intervals):
        price = prices_by_interval.get(i, {}).get(reference_category)
        if price is None:
            continue
        rates[i] = {day: price for day in interval.dates()}
    return rates


class ReserveLengthFactorCalculator:
    """
    Calcule les facteurs de durée de réservation (sans état).
    """
    
    def __init__(self, max_rental_length: int = 6):
        self.max_rental_length = max_rental_length
    
    def calculate(
        self,
        interval: PriceInterval,
        rental_length: int,
        reference_category: str,
        auxiliary_data: AuxiliaryData,
        reference_rates: ReferenceRates
    ) -> ReserveLengthFactor:
        """
        Facteur pour un intervalle et une durée de location.
        
        1. Série auxiliaire de la durée demandée, sinon la prochaine durée
           disponible jusqu'à la durée maximale.
        2. Prix auxiliaire à la date de début, sinon à la date la plus proche.
        3. Prix de référence : intervalle enregistré contenant la date de début.
        4. facteur = auxiliaire / référence, ramené à 1.0 si inférieur,
           arrondi au centième supérieur.
        
        Returns:
            ReserveLengthFactor (factor = 0 si données absentes)
        """
        label = f"{interval.label()}, {rental_length}D ({reference_category})"
        
        if not 1 <= rental_length <= self.max_rental_length:
            logger.warning(f"Rental length out of range for {label}")
            return ReserveLengthFactor.missing(rental_length)
        
        source_length = self._resolve_source_length(rental_length, auxiliary_data)
        if source_length is None:
            logger.debug(f"No data available for any rental length >= {rental_length}D")
            return ReserveLengthFactor.missing(rental_length)
        
        if source_length != rental_length:
            logger.debug(f"Using {source_length}D data for {rental_length}D factor")
        
        auxiliary_price = lookup_exact_or_nearest(
            dict(auxiliary_data[source_length]), interval.start_date
        )
        if auxiliary_price is None:
            logger.debug(f"No price data found for {source_length}D rental length")
            return ReserveLengthFactor.missing(rental_length, source_length)
        
        reference_price = self._resolve_reference_price(interval.start_date, reference_rates)
        if reference_price is None or reference_price <= 0:
            logger.debug(f"No reference price available for {label}")
            return ReserveLengthFactor.missing(rental_length, source_length, auxiliary_price)
        
        factor = auxiliary_price / reference_price
        if factor <= 0:
            return ReserveLengthFactor.missing(rental_length, source_length, auxiliary_price)
        
        if factor < MIN_FACTOR:
            logger.debug(f"Adjusting factor from {factor:.3f} to {MIN_FACTOR:.3f} for {label}")
            factor = MIN_FACTOR
        
        factor = round_up_factor(factor)
        logger.debug(
            f"Factor for {label}: {auxiliary_price:.1f} / {reference_price:.1f} -> {factor:.2f}"
        )
        
        return ReserveLengthFactor(
            factor=factor,
            requested_length=rental_length,
            source_length=source_length,
            auxiliary_price=auxiliary_price,
            reference_price=reference_price,
        )
    
    def _resolve_source_length(
        self,
        rental_length: int,
        auxiliary_data: AuxiliaryData
    ) -> Optional[int]:
        for length in range(rental_length, self.max_rental_length + 1):
            if length in auxiliary_data:
                return length
        return None
    
    @staticmethod
    def _resolve_reference_price(
        start_date: date,
        reference_rates: ReferenceRates
    ) -> Optional[float]:
        # D'abord l'enregistrement contenant la date exacte, puis l'intervalle
        # dont la plage de dates contient la date de début
        found = None
        for index in sorted(reference_rates):
            if start_date in reference_rates[index]:
                found = index
                break
        
        if found is None:
            for index in sorted(reference_rates):
                dates = reference_rates[index]
                if dates and min(dates) <= start_date <= max(dates):
                    found = index
                    break
        
        if found is None:
            return None
        
        return lookup_exact_or_nearest(dict(reference_rates[found]), start_date)


def compute_reserve_factor(
    interval: PriceInterval,
    rental_length: int,
    reference_category: str,
    auxiliary_data: AuxiliaryData,
    reference_rates: ReferenceRates,
    max_rental_length: int = 6
) -> ReserveLengthFactor:
    """
    Facteur de durée de réservation pour un intervalle.
    
    Returns:
        ReserveLengthFactor ; `factor` vaut 0 (pas de données) ou >= 1.00
    """
    calculator = ReserveLengthFactorCalculator(max_rental_length=max_rental_length)
    return calculator.calculate(
        interval, rental_length, reference_category, auxiliary_data, reference_rates
    )
