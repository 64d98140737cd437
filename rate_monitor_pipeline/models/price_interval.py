"""
Intervalles de prix stables produits par l'analyse.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterator, List, Set


@dataclass
class PriceInterval:
    """
    Plage de dates contiguë pendant laquelle aucun prix ne change.

    Les prix et les indicateurs de comblement sont échantillonnés à la date
    de début. `changed_categories` contient les catégories dont le prix a
    changé à `start_date` (vide pour l'intervalle initial).
    """
    start_date: date
    end_date: date
    prices_by_category: Dict[str, float] = field(default_factory=dict)
    is_filled_by_category: Dict[str, bool] = field(default_factory=dict)
    changed_categories: Set[str] = field(default_factory=set)

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def is_initial(self) -> bool:
        return not self.changed_categories

    def dates(self) -> Iterator[date]:
        for offset in range(self.days):
            yield self.start_date + timedelta(days=offset)

    def label(self) -> str:
        return f"{self.start_date:%Y-%m-%d} to {self.end_date:%Y-%m-%d}"

    def is_filled(self, category: str) -> bool:
        return self.is_filled_by_category.get(category, False)

    def price_lines(self) -> List[str]:
        """Prix triés par catégorie, suffixés de '(filled)' s'ils ont été comblés."""
        lines = []
        for category in sorted(self.prices_by_category):
            suffix = " (filled)" if self.is_filled(category) else ""
            lines.append(f"{category}: {self.prices_by_category[category]:.2f}{suffix}")
        return lines

    def __str__(self) -> str:
        if self.is_initial:
            changes = " - Initial interval"
        else:
            changes = f" - Changes: {', '.join(sorted(self.changed_categories))}"
        return f"{self.label()} ({self.days} days){changes}"


@dataclass
class IntervalAnalysis:
    """
    Résultat complet d'une analyse.

    Attributes:
        intervals: Intervalles triés, partition exacte de l'axe des dates
        date_axis: Dates distinctes de toutes les cotations (triées)
        valid_categories: Catégories sélectionnées avec au moins un prix > 0
        ignored_categories: Catégories sélectionnées sans aucun prix > 0
        unconverged_categories: Catégories dont le lissage n'a pas convergé
    """
    intervals: List[PriceInterval] = field(default_factory=list)
    date_axis: List[date] = field(default_factory=list)
    valid_categories: List[str] = field(default_factory=list)
    ignored_categories: List[str] = field(default_factory=list)
    unconverged_categories: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.intervals
