"""
Fixtures partagées pour les tests.
"""

import pytest
from datetime import date, timedelta
from typing import Dict, List, Optional

from rate_monitor_pipeline.config.settings import Settings
from rate_monitor_pipeline.models.price_interval import PriceInterval
from rate_monitor_pipeline.models.quote import Quote

START = date(2025, 4, 1)


def day(n: int) -> date:
    """Date du n-ième jour (1 = START)."""
    return START + timedelta(days=n - 1)


@pytest.fixture
def make_quotes():
    """
    Fabrique de cotations : {catégorie: [prix jour 1, prix jour 2, ...]}.
    
    None = pas de cotation ce jour-là, 0 = cotation nulle.
    """
    def _make(series: Dict[str, List[Optional[float]]]) -> List[Quote]:
        quotes = []
        for category, amounts in series.items():
            for i, amount in enumerate(amounts):
                if amount is None:
                    continue
                quotes.append(Quote(
                    quote_date=day(i + 1),
                    category_code=category,
                    suggested_amount=amount,
                ))
        return quotes
    return _make


@pytest.fixture
def settings(tmp_path):
    """Settings isolés dans un répertoire temporaire."""
    return Settings(working_directory=str(tmp_path))


@pytest.fixture
def sample_intervals():
    """Deux intervalles contigus avec la catégorie de référence ESMS."""
    return [
        PriceInterval(
            start_date=day(1),
            end_date=day(2),
            prices_by_category={"ESMS": 10.0, "EMMS": 12.0},
            is_filled_by_category={"ESMS": False, "EMMS": False},
        ),
        PriceInterval(
            start_date=day(3),
            end_date=day(3),
            prices_by_category={"ESMS": 20.0},
            is_filled_by_category={"ESMS": False},
            changed_categories={"ESMS"},
        ),
    ]
