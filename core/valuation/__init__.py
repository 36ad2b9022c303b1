"""
Valuation Engine

Deterministic property valuation (base rate per location with type,
condition, age and amenity adjustments) plus simulated market context
for display.
"""

from .models import (
    ValuationError,
    InvalidValuationInput,
    PropertyType,
    Condition,
    ValuationInput,
    ValuationResult,
    MarketSnapshot,
    ComparableListing,
    ValuationReport,
    round_half_up,
)
from .rates import (
    BASE_RATES,
    DEFAULT_RATE,
    TYPE_MULTIPLIERS,
    CONDITION_MULTIPLIERS,
    base_rate_for,
)
from .estimator import EstimateBreakdown, ValuationEstimator
from .market import MarketDataSynthesizer, SimilarPropertiesGenerator
from .engine import PropertyValuationEngine
from .validation import (
    REQUIRED_VALUATION_FIELDS,
    ValuationValidationResult,
    validate_valuation_data,
    create_valuation_input,
)

__all__ = [
    # Models
    "ValuationError",
    "InvalidValuationInput",
    "PropertyType",
    "Condition",
    "ValuationInput",
    "ValuationResult",
    "MarketSnapshot",
    "ComparableListing",
    "ValuationReport",
    "round_half_up",
    # Rates
    "BASE_RATES",
    "DEFAULT_RATE",
    "TYPE_MULTIPLIERS",
    "CONDITION_MULTIPLIERS",
    "base_rate_for",
    # Engine
    "EstimateBreakdown",
    "ValuationEstimator",
    "MarketDataSynthesizer",
    "SimilarPropertiesGenerator",
    "PropertyValuationEngine",
    # Validation
    "REQUIRED_VALUATION_FIELDS",
    "ValuationValidationResult",
    "validate_valuation_data",
    "create_valuation_input",
]

__version__ = "1.0"
