"""
Comblement des prix manquants ou nuls.
"""

import logging

import numpy as np
import pandas as pd

from .raw_series_builder import PriceMatrix

logger = logging.getLogger(__name__)


class GapFiller:
    """
    Comble les trous de chaque catégorie, indépendamment.
    
    1. Passe causale (dates croissantes) : le dernier prix positif vu est
       reporté sur les dates manquantes.
    2. Passe anticausale : les dates encore vides (avant le premier prix)
       prennent le prochain prix positif.
    
    Une catégorie sans aucun prix positif reste vide (NaN).
    """
    
    def fill(self, raw: PriceMatrix) -> PriceMatrix:
        """
        Args:
            raw: Matrice brute (NaN = manquant)
            
        Returns:
            Nouvelle matrice avec le masque `filled` renseigné
        """
        if raw.is_empty:
            return raw.with_prices(raw.prices.copy(), np.zeros(raw.prices.shape, dtype=bool))
        
        # Colonnes = catégories, lignes = dates (ordre chronologique)
        frame = pd.DataFrame(raw.prices.T)
        completed = frame.ffill().bfill().to_numpy(dtype=float).T
        
        missing = np.isnan(raw.prices)
        filled = missing & ~np.isnan(completed)
        
        for i, category in enumerate(raw.categories):
            count = int(filled[i].sum())
            if count:
                logger.debug(f"Filled {count} missing prices for {category}")
            if np.isnan(completed[i]).any():
                logger.warning(f"No positive price to fill gaps for {category}")
        
        return raw.with_prices(completed, filled)
