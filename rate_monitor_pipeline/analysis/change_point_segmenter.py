"""
Segmentation en intervalles de prix stables.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Set

import numpy as np

from ..models.price_interval import PriceInterval
from .raw_series_builder import PriceMatrix

logger = logging.getLogger(__name__)


class ChangePointSegmenter:
    """
    Détecte les dates de changement de prix et découpe l'axe des dates.
    
    Une date est une frontière si au moins une catégorie y diffère de la
    date précédente d'au moins le seuil. La première date de l'axe est
    toujours une frontière. Les intervalles se suivent sans trou ni
    chevauchement ; le dernier se termine à la dernière date de l'axe.
    """
    
    def __init__(self, threshold: float = 1.0):
        self.threshold = threshold
    
    def find_change_points(self, smoothed: PriceMatrix) -> Dict[date, Set[str]]:
        """
        Returns:
            {date de frontière: catégories ayant changé à cette date}
        """
        change_points: Dict[date, Set[str]] = {}
        
        for i, category in enumerate(smoothed.categories):
            row = smoothed.prices[i]
            defined = np.flatnonzero(~np.isnan(row))
            if len(defined) < 2:
                continue
            
            last_price = None
            for j in defined:
                current = float(row[j])
                if last_price is not None and abs(last_price - current) >= self.threshold:
                    change_points.setdefault(smoothed.dates[j], set()).add(category)
                last_price = current
        
        if smoothed.dates:
            change_points.setdefault(smoothed.dates[0], set())
        
        return change_points
    
    def segment(self, smoothed: PriceMatrix) -> List[PriceInterval]:
        """
        Construit les intervalles et échantillonne les prix à leur date de début.
        
        Args:
            smoothed: Matrice lissée (le masque `filled` provient du comblement)
            
        Returns:
            Intervalles triés par date de début
        """
        if not smoothed.dates:
            return []
        
        change_points = self.find_change_points(smoothed)
        boundaries = sorted(change_points)
        last_date = smoothed.dates[-1]
        
        intervals: List[PriceInterval] = []
        for k, start in enumerate(boundaries):
            if k < len(boundaries) - 1:
                end = boundaries[k + 1] - timedelta(days=1)
            else:
                end = last_date
            intervals.append(PriceInterval(
                start_date=start,
                end_date=end,
                changed_categories=change_points[start],
            ))
        
        for interval in intervals:
            self._sample_prices(interval, smoothed)
        
        logger.info(f"Identified {len(intervals)} price intervals")
        return intervals
    
    @staticmethod
    def _sample_prices(interval: PriceInterval, smoothed: PriceMatrix) -> None:
        column = smoothed.date_index(interval.start_date)
        for i, category in enumerate(smoothed.categories):
            price = smoothed.price_at(category, interval.start_date)
            if price is None:
                continue
            interval.prices_by_category[category] = price
            if smoothed.filled is not None:
                interval.is_filled_by_category[category] = bool(smoothed.filled[i, column])
