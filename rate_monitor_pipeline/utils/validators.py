"""
Validateurs de données.
"""

import logging
from typing import Any, Dict, Iterable, List

import pandas as pd

logger = logging.getLogger(__name__)


def validate_data(data: Dict[str, Any], schema: Dict[str, type]) -> bool:
    """
    Valide des données selon un schéma.
    
    Args:
        data: Données à valider
        schema: Schéma avec {field: type}
        
    Returns:
        True si valides
    """
    for field, expected_type in schema.items():
        if field not in data:
            logger.warning(f"Missing field: {field}")
            return False
        
        if data[field] is not None and not isinstance(data[field], expected_type):
            logger.warning(
                f"Invalid type for {field}: expected {expected_type}, "
                f"got {type(data[field])}"
            )
            return False
    
    return True


def validate_columns(df: pd.DataFrame, required: Iterable[str]) -> List[str]:
    """
    Vérifie la présence des colonnes obligatoires d'un tableau.
    
    Args:
        df: Tableau lu depuis un rapport
        required: Noms de colonnes attendus (en-têtes exacts)
        
    Returns:
        Liste des colonnes manquantes (vide si le tableau est valide)
    """
    columns = {str(col) for col in df.columns}
    missing = [name for name in required if name not in columns]
    
    if missing:
        logger.warning(f"Missing required columns: {', '.join(missing)}")
    
    return missing
