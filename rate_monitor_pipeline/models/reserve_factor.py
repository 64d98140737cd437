"""
Facteur de majoration par durée de réservation.
"""

from dataclasses import dataclass
from typing import Optional


NO_FACTOR = 0.0


@dataclass(frozen=True)
class ReserveLengthFactor:
    """
    Facteur pour un couple (intervalle, durée de location).

    Un facteur valide est toujours >= 1.00 ; la valeur 0 signifie
    "pas de données" et ne doit jamais être publiée.

    Attributes:
        factor: Facteur arrondi au centième supérieur, ou 0
        requested_length: Durée demandée (1..6)
        source_length: Durée dont la série auxiliaire a été utilisée
            (peut être supérieure à la durée demandée), None si aucune
        auxiliary_price: Prix auxiliaire retenu
        reference_price: Prix de référence retenu
    """
    factor: float
    requested_length: int
    source_length: Optional[int] = None
    auxiliary_price: Optional[float] = None
    reference_price: Optional[float] = None

    @property
    def is_available(self) -> bool:
        return self.factor > 0

    @property
    def used_fallback(self) -> bool:
        return self.source_length is not None and self.source_length != self.requested_length

    @classmethod
    def missing(
        cls,
        requested_length: int,
        source_length: Optional[int] = None,
        auxiliary_price: Optional[float] = None
    ) -> "ReserveLengthFactor":
        return cls(
            factor=NO_FACTOR,
            requested_length=requested_length,
            source_length=source_length,
            auxiliary_price=auxiliary_price,
        )
