"""
Tests unitaires pour les exporteurs CSV et xlsx.
"""

import pytest
import pandas as pd
from datetime import date

from rate_monitor_pipeline.config.settings import Settings
from rate_monitor_pipeline.exporters.csv_exporter import (
    CsvIntervalExporter,
    adjustment_label,
)
from rate_monitor_pipeline.exporters.workbook_exporter import PricingWorkbookExporter
from rate_monitor_pipeline.models.price_interval import PriceInterval
from rate_monitor_pipeline.pricing.pricing_sheet import PricingSheet, PricingSheetBuilder


@pytest.fixture
def linked_intervals():
    """Un intervalle avec le groupe lié {EMMS, PSMS} désaligné."""
    return [
        PriceInterval(
            start_date=date(2025, 4, 1),
            end_date=date(2025, 4, 3),
            prices_by_category={"EMMS": 50.0, "PSMS": 60.0, "ESMS": 40.0},
        ),
        PriceInterval(
            start_date=date(2025, 4, 4),
            end_date=date(2025, 4, 4),
            prices_by_category={"EMMS": 70.0, "PSMS": 60.0, "ESMS": 40.0},
            changed_categories={"EMMS"},
        ),
    ]


class TestAdjustmentLabel:
    """Tests pour adjustment_label."""
    
    @pytest.mark.parametrize("pct,expected", [
        (15, "plus15"),
        (0, "plus0"),
        (-10, "minus10"),
        (2.5, "plus2.5"),
    ])
    def test_label(self, pct, expected):
        assert adjustment_label(pct) == expected


class TestCsvIntervalExporter:
    """Tests pour CsvIntervalExporter."""
    
    def test_build_table(self, linked_intervals):
        """Prix ajustés puis alignés sur le maximum du groupe lié."""
        table = CsvIntervalExporter().build_table(
            linked_intervals, ["PSMS", "ESMS", "EMMS", "PMMS"], adjustment_pct=10
        )
        rows = table.set_index("Sipp")
        first = "2025-04-01 to 2025-04-03"
        second = "2025-04-04 to 2025-04-04"
        
        assert list(table.columns) == ["Sipp", first, second]
        assert list(table["Sipp"]) == ["EMMS", "ESMS", "PMMS", "PSMS"]
        assert rows.loc["EMMS", first] == "66.00"
        assert rows.loc["PSMS", first] == "66.00"
        assert rows.loc["ESMS", first] == "44.00"
        assert rows.loc["EMMS", second] == "77.00"
        assert rows.loc["PSMS", second] == "77.00"
        assert rows.loc["PMMS", first] == "N/A"
    
    def test_unselected_category_not_used_as_group_base(self, linked_intervals):
        """Un membre lié non sélectionné n'influence pas les autres."""
        table = CsvIntervalExporter().build_table(linked_intervals, ["EMMS"])
        
        assert table.loc[0, "2025-04-01 to 2025-04-03"] == "50.00"
    
    def test_export_file(self, linked_intervals, tmp_path):
        """Fichier écrit avec l'ajustement dans le nom et le pied de page."""
        path = CsvIntervalExporter().export(
            linked_intervals, ["EMMS", "PSMS"], 10, str(tmp_path / "output")
        )
        
        assert path is not None
        assert path.exists()
        assert path.name.startswith("price_intervals_")
        assert path.name.endswith("_plus10.csv")
        
        content = path.read_text(encoding="utf-8")
        assert content.startswith("Sipp,")
        assert "Prices adjusted by 10% (1.10x multiplier)" in content
        assert "Linked Sipp categories (same prices):" in content
        assert "EMMS and PSMS" in content
        assert "PMMS and PSAS" in content
    
    def test_export_without_intervals(self, tmp_path):
        """Rien à exporter : aucun fichier."""
        path = CsvIntervalExporter().export([], ["EMMS"], 0, str(tmp_path))
        
        assert path is None
        assert list(tmp_path.iterdir()) == []


class TestPricingWorkbookExporter:
    """Tests pour PricingWorkbookExporter."""
    
    def test_export_workbook(self, sample_intervals, tmp_path):
        """Classeur avec les trois feuilles de pricing."""
        sheet = PricingSheetBuilder(Settings()).build(
            sample_intervals, ["ESMS", "EMMS"], auxiliary_data={1: {date(2025, 4, 1): 15.0}}
        )
        
        path = PricingWorkbookExporter().export(
            sheet, str(tmp_path / "Export"), run_date=date(2025, 4, 7)
        )
        
        assert path.name == "TUN Pricing 2025-04-07.xlsx"
        workbook = pd.ExcelFile(path)
        assert workbook.sheet_names == ["PRICING", "CATEGORIES", "RESERVE LENGTH"]
        factors = pd.read_excel(path, sheet_name="RESERVE LENGTH")
        assert list(factors["factor"]) == pytest.approx([1.5, 1.0])
    
    def test_empty_sheet(self, tmp_path):
        """Aucun intervalle : pas de classeur."""
        sheet = PricingSheet(reference_category="ESMS", multiplier=1.0)
        
        assert PricingWorkbookExporter().export(sheet, str(tmp_path)) is None
