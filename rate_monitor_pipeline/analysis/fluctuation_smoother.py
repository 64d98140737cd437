"""
Lissage des fluctuations de prix inférieures au seuil.

Deux étapes par catégorie, dans cet ordre strict :
- A : fusion convergente des paires adjacentes (jusqu'au point fixe),
- B : correction des pics d'un seul jour (une seule passe).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .raw_series_builder import PriceMatrix

logger = logging.getLogger(__name__)


@dataclass
class SmoothingResult:
    """Matrice lissée et catégories n'ayant pas atteint le point fixe."""
    matrix: PriceMatrix
    unconverged: List[str] = field(default_factory=list)
    merge_passes: int = 0
    spike_corrections: int = 0


class FluctuationSmoother:
    """
    Élimine le bruit sous le seuil pour ne garder que les variations
    économiquement significatives.
    """
    
    def __init__(self, threshold: float = 1.0, max_passes: int = 10000):
        """
        Args:
            threshold: Écart minimal significatif (unité monétaire)
            max_passes: Nombre maximal de passes de fusion par catégorie
        """
        self.threshold = threshold
        self.max_passes = max_passes
    
    def smooth(self, filled: PriceMatrix) -> SmoothingResult:
        """
        Lisse chaque catégorie indépendamment.
        
        Args:
            filled: Matrice comblée
            
        Returns:
            SmoothingResult avec une nouvelle matrice (l'entrée n'est pas modifiée)
        """
        prices = filled.prices.copy()
        result = SmoothingResult(matrix=filled.with_prices(prices))
        
        for i, category in enumerate(filled.categories):
            row = prices[i]
            defined = np.flatnonzero(~np.isnan(row))
            
            if len(defined) < 2:
                continue
            
            values = [float(v) for v in row[defined]]
            
            passes, converged = self._merge_small_fluctuations(category, values, filled, defined)
            result.merge_passes += passes
            
            if not converged:
                logger.warning(
                    f"Smoothing did not converge for {category} after "
                    f"{self.max_passes} passes, keeping current prices"
                )
                result.unconverged.append(category)
            
            result.spike_corrections += self._fix_one_day_spikes(category, values, filled, defined)
            
            row[defined] = values
        
        return result
    
    def merge_pass(self, values: List[float]) -> List[Tuple[int, float]]:
        """
        Une passe ascendante de fusion, en place.
        
        Toute paire (jour, lendemain) d'écart < seuil prend le max des deux.
        
        Returns:
            Liste des (index du jour, prix retenu) modifiés pendant la passe
        """
        changes = []
        for i in range(len(values) - 1):
            today, tomorrow = values[i], values[i + 1]
            if abs(today - tomorrow) < self.threshold:
                highest = max(today, tomorrow)
                if today != highest or tomorrow != highest:
                    values[i] = highest
                    values[i + 1] = highest
                    changes.append((i, highest))
        return changes
    
    def _merge_small_fluctuations(
        self,
        category: str,
        values: List[float],
        matrix: PriceMatrix,
        defined: np.ndarray
    ) -> Tuple[int, bool]:
        passes = 0
        while passes < self.max_passes:
            passes += 1
            changes = self.merge_pass(values)
            if not changes:
                return passes, True
            for i, highest in changes:
                today = matrix.dates[defined[i]]
                tomorrow = matrix.dates[defined[i + 1]]
                logger.debug(
                    f"Fixed small fluctuation for {category}: {today:%Y-%m-%d} and "
                    f"{tomorrow:%Y-%m-%d} both set to {highest:.2f}"
                )
        # Le cap est atteint : stable seulement si une passe de plus ne change rien
        return passes, not self.merge_pass(list(values))
    
    def _fix_one_day_spikes(
        self,
        category: str,
        values: List[float],
        matrix: PriceMatrix,
        defined: np.ndarray
    ) -> int:
        # En place : la valeur corrigée sert de "veille" au jour suivant
        corrections = 0
        for i in range(1, len(values) - 1):
            yesterday, today, tomorrow = values[i - 1], values[i], values[i + 1]
            if (abs(today - yesterday) >= self.threshold
                    and abs(today - tomorrow) >= self.threshold):
                corrected = max(yesterday, tomorrow)
                values[i] = corrected
                corrections += 1
                logger.debug(
                    f"Fixed one-day fluctuation for {category} on "
                    f"{matrix.dates[defined[i]]:%Y-%m-%d}: {today:.2f} -> {corrected:.2f}"
                )
        return corrections
