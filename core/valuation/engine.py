"""
Property Valuation Engine

Pipeline order:
1. ESTIMATE - Deterministic point estimate and range
2. MARKET - Simulated market snapshot for the location
3. COMPARE - Synthetic comparable listings

Steps 2 and 3 are independent of the estimate and random on every call.
"""

from __future__ import annotations

import random
from typing import Optional

from .estimator import ValuationEstimator
from .market import MarketDataSynthesizer, SimilarPropertiesGenerator
from .models import ValuationInput, ValuationReport


class PropertyValuationEngine:
    """Runs the complete valuation pipeline for one request."""

    def __init__(
        self,
        estimator: Optional[ValuationEstimator] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialise the engine.

        Args:
            estimator: Estimator to use (default: ValuationEstimator())
            seed: Optional seed shared by the market and comparables generators
        """
        self._estimator = estimator or ValuationEstimator()
        rng = random.Random(seed)
        self._market = MarketDataSynthesizer(rng=rng)
        self._similar = SimilarPropertiesGenerator(rng=rng)

    @property
    def estimator(self) -> ValuationEstimator:
        return self._estimator

    def appraise(
        self,
        valuation_input: ValuationInput,
        include_market: bool = True,
        include_comparables: bool = True,
    ) -> ValuationReport:
        """
        Perform a complete valuation.

        Args:
            valuation_input: Validated property attributes
            include_market: Attach a simulated market snapshot
            include_comparables: Attach synthetic comparable listings

        Returns:
            ValuationReport with result, market context and comparables

        Raises:
            InvalidValuationInput: If the estimate is not positive
        """
        result = self._estimator.valuate(valuation_input)

        market = None
        if include_market:
            market = self._market.synthesize(valuation_input.location)

        comparables = []
        if include_comparables:
            comparables = self._similar.generate(
                valuation_input.location,
                valuation_input.property_type,
                valuation_input.area_sqft,
            )

        return ValuationReport(
            valuation_input=valuation_input,
            result=result,
            market=market,
            comparables=comparables,
        )
