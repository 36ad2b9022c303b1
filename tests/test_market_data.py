"""
Tests for simulated market context

Market figures are random; these tests pin the bounds and
reproducibility rather than specific numbers.
"""

import random

import pytest

from core.valuation import (
    BASE_RATES,
    MarketDataSynthesizer,
    PropertyType,
    PropertyValuationEngine,
    SimilarPropertiesGenerator,
    ValuationInput,
)


TRIALS = 10_000


class TestMarketDataSynthesizer:

    def test_bounds_hold_over_many_trials(self):
        synthesizer = MarketDataSynthesizer(seed=1234)
        base = BASE_RATES["Dhanmondi, Dhaka"]

        for _ in range(TRIALS):
            snapshot = synthesizer.synthesize("Dhanmondi, Dhaka")

            assert 50 <= snapshot.active_listing_count <= 199
            assert 20 <= snapshot.avg_days_on_market <= 79
            assert base * 0.9 - 1 <= snapshot.avg_price_per_sqft <= base * 1.1 + 1
            assert -4.5 <= snapshot.year_over_year_change_percent <= 10.5

    def test_trend_has_one_decimal(self):
        synthesizer = MarketDataSynthesizer(seed=7)

        for _ in range(200):
            trend = synthesizer.synthesize("Uttara, Dhaka").year_over_year_change_percent
            assert round(trend, 1) == trend

    def test_seed_reproduces_snapshot(self):
        first = MarketDataSynthesizer(seed=42).synthesize("Gulshan, Dhaka")
        second = MarketDataSynthesizer(seed=42).synthesize("Gulshan, Dhaka")

        assert first == second

    def test_unknown_location_uses_default_rate(self):
        snapshot = MarketDataSynthesizer(seed=3).synthesize("Nowhere")

        assert 5400 - 1 <= snapshot.avg_price_per_sqft <= 6600 + 1
        assert snapshot.location == "Nowhere"

    def test_shared_rng_is_used(self):
        rng = random.Random(99)
        synthesizer = MarketDataSynthesizer(rng=rng)
        synthesizer.synthesize("Gulshan, Dhaka")

        assert rng.getstate() != random.Random(99).getstate()


class TestSimilarPropertiesGenerator:

    def test_returns_four_comparables(self):
        comparables = SimilarPropertiesGenerator(seed=1).generate(
            "Banani, Dhaka", PropertyType.APARTMENT, 1500
        )

        assert len(comparables) == 4

    def test_title_uses_label_and_area_name(self):
        comparables = SimilarPropertiesGenerator(seed=1).generate(
            "Banani, Dhaka", PropertyType.COMMERCIAL, 1500
        )

        assert all(c.title == "Commercial Space in Banani" for c in comparables)

    def test_area_and_rate_variation_bounds(self):
        generator = SimilarPropertiesGenerator(seed=5)
        base = BASE_RATES["Mirpur, Dhaka"]

        for _ in range(500):
            for comp in generator.generate("Mirpur, Dhaka", PropertyType.HOUSE, 1000):
                assert 800 <= comp.area_sqft <= 1200
                rate = comp.price / comp.area_sqft
                assert base * 0.85 * 0.99 <= rate <= base * 1.15 * 1.01

    def test_seed_reproduces_comparables(self):
        first = SimilarPropertiesGenerator(seed=8).generate("Sylhet City", PropertyType.LAND, 5000)
        second = SimilarPropertiesGenerator(seed=8).generate("Sylhet City", PropertyType.LAND, 5000)

        assert first == second


class TestPropertyValuationEngine:

    @pytest.fixture
    def valuation_input(self):
        return ValuationInput(
            property_type="duplex",
            location="Bashundhara, Dhaka",
            area_sqft=2400,
            condition="good",
        )

    def test_appraise_includes_market_and_comparables(self, valuation_input):
        report = PropertyValuationEngine(seed=11).appraise(valuation_input)

        assert report.result.estimated_value == 10000 * 2400 * 1.25
        assert report.market is not None
        assert len(report.comparables) == 4

    def test_appraise_can_skip_simulated_data(self, valuation_input):
        report = PropertyValuationEngine().appraise(
            valuation_input, include_market=False, include_comparables=False
        )

        assert report.market is None
        assert report.comparables == []

    def test_seeded_engines_agree(self, valuation_input):
        first = PropertyValuationEngine(seed=21).appraise(valuation_input)
        second = PropertyValuationEngine(seed=21).appraise(valuation_input)

        assert first.to_dict() == second.to_dict()

    def test_estimate_unaffected_by_seed(self, valuation_input):
        first = PropertyValuationEngine(seed=1).appraise(valuation_input)
        second = PropertyValuationEngine(seed=2).appraise(valuation_input)

        assert first.result == second.result
