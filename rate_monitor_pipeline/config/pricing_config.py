"""
Tables métier utilisées par les exports de pricing.

Ce module définit :
- les groupes de catégories liées (même prix dans un intervalle),
- les multiplicateurs spéciaux appliqués au tarif de référence.
"""

from typing import Dict, FrozenSet, List


# Groupes liés appliqués à l'export CSV (sur les prix ajustés)
CSV_LINKED_GROUPS: List[FrozenSet[str]] = [
    frozenset({"EMMS", "PSMS"}),
    frozenset({"PMMS", "PSAS"}),
]

# Groupes liés appliqués au template de pricing (sur les prix bruts)
TEMPLATE_LINKED_GROUPS: List[FrozenSet[str]] = []

# Catégories tarifées comme multiple du tarif de référence
SPECIAL_CATEGORY_MULTIPLIERS: Dict[str, float] = {
    "PMAS": 3.0,
    "SMAS": 4.0,
}

def price_multiplier(adjustment_pct: float) -> float:
    """
    Convertit un ajustement en pourcentage en multiplicateur.

    15 -> 1.15, -10 -> 0.90, 0 -> 1.0
    """
    return 1 + (adjustment_pct / 100)
