"""
Haven Homes - Core Business Logic

This package provides the valuation pipeline:
1. Input validation (ValuationInput)
2. Deterministic estimate (base rate x type x condition x age x amenities)
3. Simulated market context and comparable listings
4. Saved valuation history and price-change alerts
5. Mortgage payment calculator
"""

from .valuation import (
    PropertyType,
    Condition,
    ValuationInput,
    ValuationResult,
    ValuationReport,
    InvalidValuationInput,
    ValuationEstimator,
    PropertyValuationEngine,
    validate_valuation_data,
    create_valuation_input,
)
from .history import (
    ValuationRecord,
    ValuationSubscription,
    ValuationRepository,
    SubscriptionRepository,
    ValuationChangeMonitor,
    AlertDispatcher,
)
from .mortgage import MortgageQuote, calculate_mortgage

__all__ = [
    # Valuation
    "PropertyType",
    "Condition",
    "ValuationInput",
    "ValuationResult",
    "ValuationReport",
    "InvalidValuationInput",
    "ValuationEstimator",
    "PropertyValuationEngine",
    "validate_valuation_data",
    "create_valuation_input",
    # History
    "ValuationRecord",
    "ValuationSubscription",
    "ValuationRepository",
    "SubscriptionRepository",
    "ValuationChangeMonitor",
    "AlertDispatcher",
    # Mortgage
    "MortgageQuote",
    "calculate_mortgage",
]
