"""
Cotation journalière d'une catégorie de véhicule.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Quote:
    """
    Prix suggéré pour une catégorie (code Sipp) à une date de prise en charge.

    Le montant est déjà arrondi à 0.1 et la date déjà parsée par l'adaptateur
    d'extraction. Un montant nul signifie "pas de cotation".
    """
    quote_date: date
    category_code: str
    suggested_amount: float
    rule_description: str = ""
    location: str = ""
    lor: int = 0

    def __str__(self) -> str:
        return (
            f"{self.quote_date:%Y-%m-%d} - {self.category_code}: "
            f"{self.suggested_amount:.2f} ({self.rule_description})"
        )
