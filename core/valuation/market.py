"""
Simulated market context for the valuation panel.

Market snapshots and comparable listings are generated from random
variation around the location base rate. They are cosmetic: nothing
here reads stored listings, and every call yields fresh numbers.
Pass a seed or a random.Random to reproduce a sequence.
"""

from __future__ import annotations

import math
import random
from typing import List, Optional

from .models import ComparableListing, MarketSnapshot, PropertyType, round_half_up
from .rates import base_rate_for, type_label


# Snapshot bounds
PRICE_VARIATION = 0.1
TREND_OFFSET = 0.3
TREND_SCALE = 15
LISTING_COUNT_SPAN = 150
LISTING_COUNT_MIN = 50
DAYS_ON_MARKET_SPAN = 60
DAYS_ON_MARKET_MIN = 20

# Comparable bounds
COMPARABLE_COUNT = 4
AREA_VARIATION = (0.8, 1.2)
RATE_VARIATION = (0.85, 1.15)


def _make_rng(seed: Optional[int], rng: Optional[random.Random]) -> random.Random:
    if rng is not None:
        return rng
    return random.Random(seed)


class MarketDataSynthesizer:
    """Fabricates a MarketSnapshot for a location."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        """
        Args:
            seed: Optional random seed for reproducible results.
            rng: Optional generator to draw from (takes precedence over seed).
        """
        self._rng = _make_rng(seed, rng)

    def synthesize(self, location: str) -> MarketSnapshot:
        """
        Generate market figures around the location's base rate.

        - avg price/sqft within +/-10% of base
        - year-over-year change in [-4.5, 10.5), one decimal
        - active listings in [50, 199]
        - days on market in [20, 79]
        """
        base, _ = base_rate_for(location)
        rng = self._rng

        avg_price = round_half_up(base * (1 + rng.uniform(-PRICE_VARIATION, PRICE_VARIATION)))
        trend = round_half_up((rng.random() - TREND_OFFSET) * TREND_SCALE * 10) / 10
        listings = math.floor(rng.random() * LISTING_COUNT_SPAN) + LISTING_COUNT_MIN
        days = math.floor(rng.random() * DAYS_ON_MARKET_SPAN) + DAYS_ON_MARKET_MIN

        return MarketSnapshot(
            location=location,
            avg_price_per_sqft=avg_price,
            year_over_year_change_percent=trend,
            active_listing_count=listings,
            avg_days_on_market=days,
        )


class SimilarPropertiesGenerator:
    """Fabricates comparable listings for a subject property."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self._rng = _make_rng(seed, rng)

    def generate(
        self,
        location: str,
        property_type: PropertyType,
        area_sqft: float,
    ) -> List[ComparableListing]:
        """
        Generate four comparables with +/-20% area and +/-15% rate variation.

        No two calls are guaranteed distinct and no deduplication is done.
        """
        base, _ = base_rate_for(location)
        area_name = location.split(",")[0].strip()
        title = f"{type_label(property_type)} in {area_name}"

        comparables = []
        for _ in range(COMPARABLE_COUNT):
            area_variation = area_sqft * self._rng.uniform(*AREA_VARIATION)
            price_variation = base * self._rng.uniform(*RATE_VARIATION)
            comparables.append(ComparableListing(
                title=title,
                location=location,
                property_type=property_type,
                area_sqft=round_half_up(area_variation),
                price=round_half_up(price_variation * area_variation),
            ))
        return comparables
