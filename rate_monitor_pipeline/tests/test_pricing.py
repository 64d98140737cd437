"""
Tests unitaires pour les prix dérivés (groupes liés, facteurs de durée,
feuille de pricing).
"""

import pytest
from datetime import date, timedelta

from rate_monitor_pipeline.config.settings import Settings
from rate_monitor_pipeline.models.price_interval import PriceInterval
from rate_monitor_pipeline.pricing.linked_groups import (
    LinkedGroupNormalizer,
    adjusted_price_lookup,
    normalize_linked_groups,
    raw_price_lookup,
)
from rate_monitor_pipeline.pricing.pricing_sheet import PricingSheetBuilder
from rate_monitor_pipeline.pricing.reserve_length import (
    ReserveLengthFactorCalculator,
    build_reference_rates,
    compute_reserve_factor,
    round_up_factor,
)

START = date(2025, 4, 1)


def day(n):
    return START + timedelta(days=n - 1)


def interval(start, end, **prices):
    return PriceInterval(start_date=day(start), end_date=day(end), prices_by_category=prices)


class TestLinkedGroupNormalizer:
    """Tests pour LinkedGroupNormalizer."""
    
    def test_group_takes_maximum(self):
        """Groupe {A, B} : A=50, B=60 -> les deux à 60."""
        intervals = [interval(1, 3, A=50.0, B=60.0, C=70.0)]
        
        result = normalize_linked_groups(intervals, [{"A", "B"}])
        
        assert result[0] == {"A": 60.0, "B": 60.0, "C": 70.0}
    
    def test_absent_member_left_untouched(self):
        """Un membre absent de l'intervalle n'est ni ajouté ni modifié."""
        intervals = [interval(1, 1, A=50.0, C=70.0)]
        
        result = normalize_linked_groups(intervals, [{"A", "D"}])
        
        assert result[0] == {"A": 50.0, "C": 70.0}
        assert "D" not in result[0]
    
    def test_partial_group_uses_present_members(self):
        """Groupe de 3 avec 2 membres présents : alignement sur ces 2."""
        intervals = [interval(1, 1, A=50.0, B=55.0)]
        
        result = normalize_linked_groups(intervals, [{"A", "B", "Z"}])
        
        assert result[0] == {"A": 55.0, "B": 55.0}
    
    def test_original_intervals_not_mutated(self):
        """Le résultat est une nouvelle table."""
        intervals = [interval(1, 1, A=50.0, B=60.0)]
        
        LinkedGroupNormalizer([{"A", "B"}]).normalize(intervals, raw_price_lookup)
        
        assert intervals[0].prices_by_category == {"A": 50.0, "B": 60.0}
    
    def test_per_interval_maximum(self):
        """Le maximum est calculé intervalle par intervalle."""
        intervals = [
            interval(1, 1, A=50.0, B=60.0),
            interval(2, 2, A=80.0, B=60.0),
        ]
        
        result = normalize_linked_groups(intervals, [{"A", "B"}])
        
        assert result[0] == {"A": 60.0, "B": 60.0}
        assert result[1] == {"A": 80.0, "B": 80.0}
    
    def test_adjusted_price_base(self):
        """Même primitive sur une base ajustée par un multiplicateur."""
        intervals = [interval(1, 1, A=50.0, B=60.0, C=10.0)]
        
        result = normalize_linked_groups(
            intervals, [{"A", "B"}], adjusted_price_lookup(1.1, ["A", "B"])
        )
        
        assert set(result[0]) == {"A", "B"}
        assert result[0]["A"] == pytest.approx(66.0)
        assert result[0]["B"] == pytest.approx(66.0)
        assert intervals[0].prices_by_category["A"] == 50.0
    
    def test_empty_group_table(self):
        """Sans groupe : copie des prix d'origine."""
        intervals = [interval(1, 1, A=50.0)]
        
        result = normalize_linked_groups(intervals, [])
        
        assert result == {0: {"A": 50.0}}
        assert result[0] is not intervals[0].prices_by_category


class TestRoundUpFactor:
    """Tests pour round_up_factor."""
    
    @pytest.mark.parametrize("value,expected", [
        (1.5, 1.5),
        (1.1, 1.1),
        (1.234, 1.24),
        (1.001, 1.01),
        (2.0, 2.0),
    ])
    def test_round_up(self, value, expected):
        """Arrondi au centième supérieur, sans effet du bruit binaire."""
        assert round_up_factor(value) == pytest.approx(expected)


class TestReserveLengthFactorCalculator:
    """Tests pour ReserveLengthFactorCalculator."""
    
    @pytest.fixture
    def first_interval(self):
        return interval(1, 5, ESMS=100.0)
    
    @pytest.fixture
    def reference_rates(self, first_interval):
        return build_reference_rates([first_interval], {0: {"ESMS": 100.0}}, "ESMS")
    
    def test_factor_from_exact_dates(self, first_interval, reference_rates):
        """Auxiliaire 150, référence 100 -> 1.5."""
        result = compute_reserve_factor(
            first_interval, 1, "ESMS", {1: {day(1): 150.0}}, reference_rates
        )
        
        assert result.factor == 1.5
        assert result.is_available
        assert result.source_length == 1
        assert not result.used_fallback
        assert result.auxiliary_price == 150.0
        assert result.reference_price == 100.0
    
    def test_fallback_to_longer_rental_length(self, first_interval, reference_rates):
        """Pas de série 2 jours mais une série 3 jours."""
        result = compute_reserve_factor(
            first_interval, 2, "ESMS", {3: {day(1): 120.0}}, reference_rates
        )
        
        assert result.factor == pytest.approx(1.2)
        assert result.requested_length == 2
        assert result.source_length == 3
        assert result.used_fallback
    
    def test_no_longer_series_available(self, first_interval, reference_rates):
        """Seules des durées plus courtes existent : sentinelle 0."""
        result = compute_reserve_factor(
            first_interval, 2, "ESMS", {1: {day(1): 150.0}}, reference_rates
        )
        
        assert result.factor == 0
        assert not result.is_available
        assert result.source_length is None
    
    def test_no_auxiliary_data(self, first_interval, reference_rates):
        """Aucune série auxiliaire : sentinelle 0."""
        result = compute_reserve_factor(first_interval, 1, "ESMS", {}, reference_rates)
        
        assert result.factor == 0
    
    def test_empty_auxiliary_series(self, first_interval, reference_rates):
        """Série vide pour la durée retenue : sentinelle 0."""
        result = compute_reserve_factor(first_interval, 1, "ESMS", {1: {}}, reference_rates)
        
        assert result.factor == 0
        assert result.source_length == 1
    
    def test_nearest_auxiliary_date(self, first_interval, reference_rates):
        """Prix auxiliaire à la date la plus proche de la date de début."""
        auxiliary = {1: {day(1) - timedelta(days=3): 110.0, day(3): 130.0}}
        
        result = compute_reserve_factor(first_interval, 1, "ESMS", auxiliary, reference_rates)
        
        assert result.auxiliary_price == 130.0
        assert result.factor == pytest.approx(1.3)
    
    def test_nearest_date_tie_keeps_earlier(self, first_interval, reference_rates):
        """À distance égale, la date la plus ancienne l'emporte."""
        auxiliary = {1: {day(3): 130.0, day(1) - timedelta(days=2): 110.0}}
        
        result = compute_reserve_factor(first_interval, 1, "ESMS", auxiliary, reference_rates)
        
        assert result.auxiliary_price == 110.0
        assert result.factor == pytest.approx(1.1)
    
    def test_factor_below_one_is_clamped(self, first_interval, reference_rates):
        """Un facteur < 1 est ramené à 1.0."""
        result = compute_reserve_factor(
            first_interval, 1, "ESMS", {1: {day(1): 80.0}}, reference_rates
        )
        
        assert result.factor == 1.0
    
    def test_factor_rounded_up(self, first_interval, reference_rates):
        """100.1 / 100 -> 1.01."""
        result = compute_reserve_factor(
            first_interval, 1, "ESMS", {1: {day(1): 100.1}}, reference_rates
        )
        
        assert result.factor == pytest.approx(1.01)
    
    def test_zero_auxiliary_price_is_no_data(self, first_interval, reference_rates):
        """Un prix auxiliaire nul ne produit pas un facteur de 1.0."""
        result = compute_reserve_factor(
            first_interval, 1, "ESMS", {1: {day(1): 0.0}}, reference_rates
        )
        
        assert result.factor == 0
    
    def test_missing_reference_price(self, first_interval):
        """Sans prix de référence : sentinelle 0."""
        result = compute_reserve_factor(first_interval, 1, "ESMS", {1: {day(1): 150.0}}, {})
        
        assert result.factor == 0
        assert result.auxiliary_price == 150.0
    
    def test_zero_reference_price(self, first_interval):
        """Un prix de référence nul n'est pas exploitable."""
        result = compute_reserve_factor(
            first_interval, 1, "ESMS", {1: {day(1): 150.0}}, {0: {day(1): 0.0}}
        )
        
        assert result.factor == 0
    
    def test_reference_found_in_other_record(self, reference_rates):
        """La date de début est cherchée dans tous les enregistrements."""
        later = interval(3, 4, ESMS=100.0)
        
        result = compute_reserve_factor(later, 1, "ESMS", {1: {day(3): 150.0}}, reference_rates)
        
        assert result.reference_price == 100.0
        assert result.factor == 1.5
    
    def test_reference_from_containing_range(self):
        """Enregistrement clairsemé : plage contenant la date, puis date la plus proche."""
        sparse_rates = {0: {day(1): 100.0, day(5): 200.0}}
        target = interval(3, 3)
        
        result = compute_reserve_factor(target, 1, "ESMS", {1: {day(3): 150.0}}, sparse_rates)
        
        assert result.reference_price == 100.0
        assert result.factor == 1.5
    
    @pytest.mark.parametrize("rental_length", [0, 7])
    def test_rental_length_out_of_range(self, first_interval, reference_rates, rental_length):
        """Durées hors 1..6 : sentinelle 0."""
        auxiliary = {length: {day(1): 150.0} for length in range(1, 8)}
        
        result = compute_reserve_factor(
            first_interval, rental_length, "ESMS", auxiliary, reference_rates
        )
        
        assert result.factor == 0
    
    def test_calculator_is_stateless(self, first_interval, reference_rates):
        """Deux appels identiques donnent le même résultat."""
        calculator = ReserveLengthFactorCalculator()
        auxiliary = {1: {day(1): 150.0}}
        
        first = calculator.calculate(first_interval, 1, "ESMS", auxiliary, reference_rates)
        second = calculator.calculate(first_interval, 1, "ESMS", auxiliary, reference_rates)
        
        assert first == second


class TestBuildReferenceRates:
    """Tests pour build_reference_rates."""
    
    def test_every_date_of_interval(self):
        """Chaque date de l'intervalle reçoit le prix de référence."""
        intervals = [interval(1, 3, ESMS=40.0), interval(4, 4, EMMS=50.0)]
        prices = {0: {"ESMS": 45.0}, 1: {"EMMS": 50.0}}
        
        rates = build_reference_rates(intervals, prices, "ESMS")
        
        assert rates == {0: {day(1): 45.0, day(2): 45.0, day(3): 45.0}}


class TestPricingSheetBuilder:
    """Tests pour PricingSheetBuilder."""
    
    def test_reference_category_fallback(self):
        """Référence absente de la sélection : première catégorie."""
        builder = PricingSheetBuilder(Settings(reference_category="ESMS"))
        
        assert builder.resolve_reference_category(["EMMS", "PSMS"]) == "EMMS"
        assert builder.resolve_reference_category(["PSMS", "ESMS"]) == "ESMS"
        assert builder.resolve_reference_category([]) == "N/A"
    
    def test_reference_weekly_rates(self, sample_intervals):
        """Tarif hebdomadaire de référence ajusté."""
        sheet = PricingSheetBuilder(Settings()).build(
            sample_intervals, ["ESMS", "EMMS"], adjustment_pct=10
        )
        
        assert sheet.reference_category == "ESMS"
        assert sheet.multiplier == pytest.approx(1.1)
        assert list(sheet.intervals["reference_rate"]) == pytest.approx([77.0, 154.0])
    
    def test_category_rates_and_percentages(self, sample_intervals):
        """Tarif et écart en % par catégorie, multiplicateurs spéciaux inclus."""
        sheet = PricingSheetBuilder(Settings()).build(
            sample_intervals, ["ESMS", "EMMS", "PMAS"], adjustment_pct=10
        )
        rates = sheet.category_rates.set_index(["category", "interval"])
        
        assert rates.loc[("EMMS", 1), "weekly_rate"] == pytest.approx(92.4)
        assert rates.loc[("EMMS", 1), "percentage_diff"] == pytest.approx(20.0)
        assert rates.loc[("EMMS", 2), "weekly_rate"] == 0.0
        assert rates.loc[("EMMS", 2), "percentage_diff"] == 0.0
        assert rates.loc[("PMAS", 1), "weekly_rate"] == pytest.approx(231.0)
        assert rates.loc[("PMAS", 1), "percentage_diff"] == pytest.approx(200.0)
        assert rates.loc[("ESMS", 2), "percentage_diff"] == pytest.approx(0.0)
    
    def test_reserve_factor_table(self, sample_intervals):
        """Seuls les facteurs disponibles sont publiés."""
        auxiliary = {1: {date(2025, 4, 1): 15.0}}
        
        sheet = PricingSheetBuilder(Settings()).build(
            sample_intervals, ["ESMS", "EMMS"], auxiliary_data=auxiliary
        )
        factors = sheet.reserve_factors
        
        assert list(factors["interval"]) == [1, 2]
        assert list(factors["rental_length"]) == [1, 1]
        assert list(factors["factor"]) == pytest.approx([1.5, 1.0])
    
    def test_template_groups_use_raw_prices(self, sample_intervals):
        """Les groupes du template s'appliquent aux prix bruts."""
        builder = PricingSheetBuilder(Settings(), linked_groups=[{"ESMS", "EMMS"}])
        
        sheet = builder.build(sample_intervals, ["ESMS", "EMMS"])
        
        assert sheet.normalized_prices[0] == {"ESMS": 12.0, "EMMS": 12.0}
        assert sample_intervals[0].prices_by_category["ESMS"] == 10.0
    
    def test_no_intervals(self):
        """Aucun intervalle : tables vides."""
        sheet = PricingSheetBuilder(Settings()).build([], ["ESMS"])
        
        assert sheet.intervals.empty
        assert sheet.reserve_factors.empty
