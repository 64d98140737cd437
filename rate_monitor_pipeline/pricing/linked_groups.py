"""
Alignement des prix des catégories liées.

Les catégories d'un même groupe (équivalentes mécaniquement ou
fonctionnellement) doivent porter le même prix dans un intervalle : le
plus élevé des membres présents.

La même primitive sert deux fois, avec des tables de groupes et des bases
de prix différentes :
- template de pricing : prix analysés bruts,
- export CSV : prix ajustés par le multiplicateur de devise.
"""

import logging
from typing import Callable, Collection, Dict, Iterable, List, Mapping

from ..models.price_interval import PriceInterval

logger = logging.getLogger(__name__)

PriceLookup = Callable[[int, PriceInterval], Mapping[str, float]]


def raw_price_lookup(index: int, interval: PriceInterval) -> Mapping[str, float]:
    """Base de prix brute : les prix échantillonnés de l'intervalle."""
    return interval.prices_by_category


def adjusted_price_lookup(
    multiplier: float,
    categories: Collection[str] = ()
) -> PriceLookup:
    """
    Base de prix ajustée : prix bruts x multiplicateur.
    
    Args:
        multiplier: Multiplicateur de devise / ajustement (ex: 1.15)
        categories: Restreint la base à ces catégories (vide = toutes)
    """
    def lookup(index: int, interval: PriceInterval) -> Mapping[str, float]:
        return {
            category: price * multiplier
            for category, price in interval.prices_by_category.items()
            if not categories or category in categories
        }
    return lookup


class LinkedGroupNormalizer:
    """
    Force les groupes de catégories liées à partager le prix maximal.
    """
    
    def __init__(self, group_table: Iterable[Collection[str]]):
        """
        Args:
            group_table: Groupes de codes Sipp devant avoir le même prix
        """
        self.group_table: List[Collection[str]] = list(group_table)
    
    def normalize(
        self,
        intervals: List[PriceInterval],
        price_lookup: PriceLookup = raw_price_lookup
    ) -> Dict[int, Dict[str, float]]:
        """
        Calcule les prix alignés par intervalle.
        
        Le maximum d'un groupe est lu dans la base de prix d'origine ; le
        résultat est toujours une copie (ni les intervalles ni la base ne
        sont modifiés).
        
        Args:
            intervals: Intervalles analysés
            price_lookup: Base de prix (index, intervalle) -> {catégorie: prix}
            
        Returns:
            {index d'intervalle: {catégorie: prix}}
        """
        bases = [price_lookup(i, interval) for i, interval in enumerate(intervals)]
        result = {i: dict(base) for i, base in enumerate(bases)}
        
        for group in self.group_table:
            logger.debug(f"Processing linked group: {', '.join(sorted(group))}")
            
            for i, base in enumerate(bases):
                present = [category for category in sorted(group) if category in base]
                if len(present) < 2:
                    continue
                
                highest = max(base[category] for category in present)
                for category in present:
                    if result[i][category] != highest:
                        logger.debug(
                            f"Interval {i + 1}: normalized {category} from "
                            f"{result[i][category]:.2f} to {highest:.2f}"
                        )
                        result[i][category] = highest
        
        return result


def normalize_linked_groups(
    intervals: List[PriceInterval],
    group_table: Iterable[Collection[str]],
    price_lookup: PriceLookup = raw_price_lookup
) -> Dict[int, Dict[str, float]]:
    """
    Prix par intervalle avec groupes liés alignés sur leur maximum.
    
    Args:
        intervals: Intervalles analysés
        group_table: Groupes de catégories liées
        price_lookup: Base de prix à normaliser
        
    Returns:
        Nouvelle table {index d'intervalle: {catégorie: prix}}
    """
    return LinkedGroupNormalizer(group_table).normalize(intervals, price_lookup)
