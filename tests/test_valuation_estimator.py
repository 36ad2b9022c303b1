"""
Tests for the Valuation Estimator

Tests covering:
1. Price range ordering (low < estimate < high)
2. Price per sq ft consistent with the estimate
3. Age depreciation floor
4. Amenity bonus cap
5. Known-answer scenarios
6. Unknown location fallback
"""

import logging
import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.valuation import (
    BASE_RATES,
    DEFAULT_RATE,
    Condition,
    InvalidValuationInput,
    PropertyType,
    ValuationEstimator,
    ValuationInput,
    ValuationResult,
    round_half_up,
)
from core.valuation.estimator import age_multiplier, amenities_bonus


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def estimator():
    return ValuationEstimator()


@pytest.fixture
def make_input():
    """Factory fixture for valuation inputs."""
    def _create(
        property_type="apartment",
        location="Gulshan, Dhaka",
        area_sqft=1500,
        condition="good",
        age_years=0,
        amenities=(),
        **kwargs,
    ) -> ValuationInput:
        return ValuationInput(
            property_type=property_type,
            location=location,
            area_sqft=area_sqft,
            condition=condition,
            age_years=age_years,
            amenities=tuple(amenities),
            **kwargs,
        )
    return _create


# =============================================================================
# Known-Answer Scenarios
# =============================================================================

class TestKnownScenarios:
    """Fixed inputs with hand-computed answers."""

    def test_gulshan_apartment_baseline(self, estimator, make_input):
        result = estimator.valuate(make_input())

        assert result.estimated_value == 33_000_000
        assert result.low_estimate == 29_700_000
        assert result.high_estimate == 36_300_000
        assert result.price_per_sqft == 22_000

    def test_needs_renovation_and_ten_years_old(self, estimator, make_input):
        result = estimator.valuate(
            make_input(condition="needs-renovation", age_years=10)
        )

        assert result.estimated_value == 19_635_000

    def test_villa_with_amenities(self, estimator, make_input):
        valuation_input = make_input(
            property_type="villa",
            location="Banani, Dhaka",
            area_sqft=3000,
            condition="excellent",
            age_years=4,
            amenities=["parking", "gym", "pool"],
        )
        expected = 18000 * 3000 * 1.4 * 1.2 * (1 - 4 * 0.015) * 1.06

        assert estimator.estimate(valuation_input) == pytest.approx(expected)
        assert estimator.valuate(valuation_input).estimated_value == round_half_up(expected)

    def test_bedrooms_do_not_affect_estimate(self, estimator, make_input):
        bare = estimator.valuate(make_input())
        with_rooms = estimator.valuate(make_input(bedrooms=4, bathrooms=3))

        assert bare.estimated_value == with_rooms.estimated_value


# =============================================================================
# Range Properties
# =============================================================================

class TestPriceRange:

    @pytest.mark.parametrize("property_type", [t.value for t in PropertyType])
    @pytest.mark.parametrize("condition", [c.value for c in Condition])
    def test_low_below_estimate_below_high(self, estimator, make_input, property_type, condition):
        result = estimator.valuate(
            make_input(property_type=property_type, condition=condition, area_sqft=850)
        )

        assert result.low_estimate < result.estimated_value < result.high_estimate

    @pytest.mark.parametrize("area", [1, 37, 850, 1234.5, 12000])
    def test_price_per_sqft_matches_estimate(self, estimator, make_input, area):
        result = estimator.valuate(make_input(location="Mirpur, Dhaka", area_sqft=area))

        # Per-sqft figure is rounded, so the product can drift by at most half a unit per sqft
        assert abs(result.price_per_sqft * area - result.estimated_value) <= area / 2 + 1

    def test_range_derived_from_rounded_value(self):
        result = ValuationResult.from_estimate(1000.5, 10)

        assert result.estimated_value == 1001
        assert result.low_estimate == round_half_up(1001 * 0.9)
        assert result.high_estimate == round_half_up(1001 * 1.1)
        assert result.price_per_sqft == 100

    def test_zero_estimate_rejected(self, estimator, make_input):
        tiny = make_input(property_type="land", location="Sylhet City", area_sqft=0.0001,
                          condition="needs-renovation", age_years=50)

        with pytest.raises(InvalidValuationInput):
            estimator.valuate(tiny)

    @pytest.mark.parametrize("value", [1, 2, 3, 4, 5])
    def test_estimates_without_a_distinct_range_rejected(self, estimator, make_input, value):
        tiny = make_input(area_sqft=value / 22_000)

        assert estimator.estimate(tiny) == pytest.approx(value)
        with pytest.raises(InvalidValuationInput) as exc:
            estimator.valuate(tiny)
        assert "price range" in str(exc.value)

    def test_smallest_estimate_with_a_distinct_range(self, estimator, make_input):
        result = estimator.valuate(make_input(area_sqft=6 / 22_000))

        assert (result.low_estimate, result.estimated_value, result.high_estimate) == (5, 6, 7)


# =============================================================================
# Age Depreciation
# =============================================================================

class TestAgeMultiplier:

    def test_linear_depreciation(self):
        assert age_multiplier(0) == 1.0
        assert age_multiplier(10) == pytest.approx(0.85)
        assert age_multiplier(20) == pytest.approx(0.7)

    @pytest.mark.parametrize("age", [21, 40, 100, 1000])
    def test_floor_at_seventy_percent(self, age):
        assert age_multiplier(age) == 0.7

    def test_very_old_property_keeps_seventy_percent(self, estimator, make_input):
        new = estimator.estimate(make_input(age_years=0))
        ancient = estimator.estimate(make_input(age_years=1000))

        assert ancient / new == pytest.approx(0.7)
        assert ancient / new >= 0.7 - 1e-12


# =============================================================================
# Amenities
# =============================================================================

class TestAmenitiesBonus:

    def test_two_percent_each(self):
        assert amenities_bonus(0) == 0
        assert amenities_bonus(3) == pytest.approx(0.06)

    def test_cap_reached_at_eight(self):
        assert amenities_bonus(7) == pytest.approx(0.14)
        assert amenities_bonus(8) == 0.15
        assert amenities_bonus(20) == 0.15

    def test_eight_and_twenty_amenities_value_equally(self, estimator, make_input):
        eight = [f"amenity-{i}" for i in range(8)]
        twenty = [f"amenity-{i}" for i in range(20)]

        assert estimator.estimate(make_input(amenities=eight)) == estimator.estimate(
            make_input(amenities=twenty)
        )

    def test_duplicate_amenities_count_once(self, estimator, make_input):
        once = estimator.estimate(make_input(amenities=["gym"]))
        repeated = estimator.estimate(make_input(amenities=["gym", "Gym ", "GYM"]))

        assert once == repeated

    def test_unknown_amenities_still_count(self, estimator, make_input):
        none = estimator.estimate(make_input())
        custom = estimator.estimate(make_input(amenities=["helipad"]))

        assert custom == pytest.approx(none * 1.02)


# =============================================================================
# Location Fallback
# =============================================================================

class TestLocationFallback:

    def test_unknown_location_uses_default_rate(self, estimator, make_input):
        result = estimator.valuate(make_input(location="Nowhere"))

        assert result.estimated_value == DEFAULT_RATE * 1500
        assert result.price_per_sqft == 6000

    def test_unknown_location_logs_warning(self, estimator, make_input, caplog):
        with caplog.at_level(logging.WARNING, logger="core.valuation.estimator"):
            estimator.valuate(make_input(location="Nowhere"))

        assert any("Nowhere" in r.getMessage() for r in caplog.records)

    def test_known_location_does_not_warn(self, estimator, make_input, caplog):
        with caplog.at_level(logging.WARNING, logger="core.valuation.estimator"):
            estimator.valuate(make_input())

        assert not caplog.records

    def test_breakdown_reports_location_known(self, estimator, make_input):
        assert estimator.breakdown(make_input()).location_known is True
        breakdown = estimator.breakdown(make_input(location="Nowhere"))
        assert breakdown.location_known is False
        assert breakdown.base_rate == DEFAULT_RATE

    def test_every_listed_location_has_a_rate(self):
        assert BASE_RATES["Gulshan, Dhaka"] == 22000
        assert BASE_RATES["Other"] == DEFAULT_RATE


# =============================================================================
# Input Model
# =============================================================================

class TestValuationInput:

    def test_enum_strings_coerced(self, make_input):
        valuation_input = make_input(property_type="Penthouse", condition="needs_renovation")

        assert valuation_input.property_type == PropertyType.PENTHOUSE
        assert valuation_input.condition == Condition.NEEDS_RENOVATION

    def test_unknown_condition_rejected(self, make_input):
        with pytest.raises(InvalidValuationInput) as exc:
            make_input(condition="pristine")
        assert "condition" in str(exc.value)

    def test_collects_all_errors(self, make_input):
        with pytest.raises(InvalidValuationInput) as exc:
            make_input(property_type="castle", area_sqft=0, age_years=-1)

        assert len(exc.value.errors) == 3

    def test_half_up_rounding(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-2.5) == -2

    @pytest.mark.parametrize("area", [float("inf"), float("nan"), -float("inf")])
    def test_non_finite_area_rejected(self, make_input, area):
        with pytest.raises(InvalidValuationInput) as exc:
            make_input(area_sqft=area)
        assert "area_sqft" in str(exc.value)

    def test_amenities_as_bare_string_rejected(self):
        with pytest.raises(InvalidValuationInput) as exc:
            ValuationInput(
                property_type="apartment",
                location="Gulshan, Dhaka",
                area_sqft=1500,
                condition="good",
                amenities="parking",
            )
        assert "amenities must be a list" in str(exc.value)

    def test_amenities_keep_first_seen_order(self, make_input):
        valuation_input = make_input(amenities=["Pool", "gym", " pool ", "Parking"])

        assert valuation_input.amenities == ("pool", "gym", "parking")
