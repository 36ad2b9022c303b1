"""
Valuation Estimator

Deterministic multiplicative model:

    estimate = base_rate(location) * area
               * type_multiplier
               * condition_multiplier
               * max(0.7, 1 - age * 0.015)
               * (1 + min(0.15, amenities * 0.02))

No I/O and no randomness. An unknown location falls back to the
default rate with a logged warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import InvalidValuationInput, ValuationInput, ValuationResult
from .rates import (
    AGE_DEPRECIATION_PER_YEAR,
    AGE_MULTIPLIER_FLOOR,
    AMENITY_BONUS_CAP,
    AMENITY_BONUS_EACH,
    CONDITION_MULTIPLIERS,
    DEFAULT_TYPE_MULTIPLIER,
    TYPE_MULTIPLIERS,
    base_rate_for,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EstimateBreakdown:
    """Individual factors behind a point estimate."""
    base_rate: int
    location_known: bool
    area_sqft: float
    type_multiplier: float
    condition_multiplier: float
    age_multiplier: float
    amenities_bonus: float

    @property
    def estimate(self) -> float:
        """Raw point estimate before rounding."""
        return (
            self.base_rate
            * self.area_sqft
            * self.type_multiplier
            * self.condition_multiplier
            * self.age_multiplier
            * (1 + self.amenities_bonus)
        )

    def to_dict(self) -> dict:
        return {
            "base_rate": self.base_rate,
            "location_known": self.location_known,
            "area_sqft": self.area_sqft,
            "type_multiplier": self.type_multiplier,
            "condition_multiplier": self.condition_multiplier,
            "age_multiplier": self.age_multiplier,
            "amenities_bonus": self.amenities_bonus,
        }


def age_multiplier(age_years: int) -> float:
    """Linear depreciation floored at AGE_MULTIPLIER_FLOOR."""
    return max(AGE_MULTIPLIER_FLOOR, 1 - age_years * AGE_DEPRECIATION_PER_YEAR)


def amenities_bonus(amenity_count: int) -> float:
    """Per-amenity bonus capped at AMENITY_BONUS_CAP."""
    return min(AMENITY_BONUS_CAP, amenity_count * AMENITY_BONUS_EACH)


class ValuationEstimator:
    """
    Computes point estimates and rounded valuation results.

    Usage:
        estimator = ValuationEstimator()
        result = estimator.valuate(valuation_input)
    """

    def breakdown(self, valuation_input: ValuationInput) -> EstimateBreakdown:
        """
        Resolve every factor of the model for an input.

        Args:
            valuation_input: Validated property attributes

        Returns:
            EstimateBreakdown with all multipliers
        """
        base_rate, known = base_rate_for(valuation_input.location)
        if not known:
            logger.warning(
                "Unknown location %r, using default base rate %d",
                valuation_input.location,
                base_rate,
            )

        return EstimateBreakdown(
            base_rate=base_rate,
            location_known=known,
            area_sqft=valuation_input.area_sqft,
            type_multiplier=TYPE_MULTIPLIERS.get(
                valuation_input.property_type, DEFAULT_TYPE_MULTIPLIER
            ),
            condition_multiplier=CONDITION_MULTIPLIERS[valuation_input.condition],
            age_multiplier=age_multiplier(valuation_input.age_years),
            amenities_bonus=amenities_bonus(valuation_input.amenity_count),
        )

    def estimate(self, valuation_input: ValuationInput) -> float:
        """Return the raw point estimate (pre-rounding)."""
        return self.breakdown(valuation_input).estimate

    def valuate(self, valuation_input: ValuationInput) -> ValuationResult:
        """
        Compute the rounded valuation and its range.

        Raises:
            InvalidValuationInput: If the estimate is too small for a low/high
                range strictly either side of it
        """
        estimate = self.estimate(valuation_input)
        result = ValuationResult.from_estimate(estimate, valuation_input.area_sqft)

        if result.estimated_value <= 0:
            raise InvalidValuationInput(["Estimated value must be positive"])
        if not result.low_estimate < result.estimated_value < result.high_estimate:
            raise InvalidValuationInput(["Estimated value is too small to produce a price range"])

        logger.debug(
            "Valuated %s in %s (%.0f sqft): %d",
            valuation_input.property_type.value,
            valuation_input.location,
            valuation_input.area_sqft,
            result.estimated_value,
        )
        return result
