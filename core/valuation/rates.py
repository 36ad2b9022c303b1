"""
Rate Tables for the Valuation Engine

Static base rates (BDT per sq ft) and multipliers. Values are fixed;
changing any of them changes every estimate.
"""

from __future__ import annotations

from typing import Final

from .models import Condition, PropertyType


# =============================================================================
# Base Rates
# =============================================================================

DEFAULT_RATE: Final[int] = 6000

BASE_RATES: Final[dict[str, int]] = {
    "Gulshan, Dhaka": 22000,
    "Banani, Dhaka": 18000,
    "Dhanmondi, Dhaka": 16000,
    "Uttara, Dhaka": 12000,
    "Bashundhara, Dhaka": 10000,
    "Mirpur, Dhaka": 8000,
    "Mohammadpur, Dhaka": 9000,
    "Chittagong City": 8000,
    "Sylhet City": 7000,
    "Other": DEFAULT_RATE,
}


# =============================================================================
# Multipliers
# =============================================================================

TYPE_MULTIPLIERS: Final[dict[PropertyType, float]] = {
    PropertyType.APARTMENT: 1.0,
    PropertyType.HOUSE: 1.15,
    PropertyType.VILLA: 1.4,
    PropertyType.DUPLEX: 1.25,
    PropertyType.PENTHOUSE: 1.5,
    PropertyType.COMMERCIAL: 1.3,
    PropertyType.LAND: 0.6,
}
DEFAULT_TYPE_MULTIPLIER: Final[float] = 1.0

# No default: every Condition member must have an entry
CONDITION_MULTIPLIERS: Final[dict[Condition, float]] = {
    Condition.EXCELLENT: 1.2,
    Condition.GOOD: 1.0,
    Condition.AVERAGE: 0.85,
    Condition.NEEDS_RENOVATION: 0.7,
}

# Age depreciation: 1.5% per year, never below 70% of base
AGE_DEPRECIATION_PER_YEAR: Final[float] = 0.015
AGE_MULTIPLIER_FLOOR: Final[float] = 0.7

# Amenities: 2% each, capped at 15%
AMENITY_BONUS_EACH: Final[float] = 0.02
AMENITY_BONUS_CAP: Final[float] = 0.15


# =============================================================================
# Display Labels
# =============================================================================

TYPE_LABELS: Final[dict[PropertyType, str]] = {
    PropertyType.APARTMENT: "Apartment",
    PropertyType.HOUSE: "House",
    PropertyType.VILLA: "Villa",
    PropertyType.DUPLEX: "Duplex",
    PropertyType.PENTHOUSE: "Penthouse",
    PropertyType.COMMERCIAL: "Commercial Space",
    PropertyType.LAND: "Land Plot",
}

CONDITION_LABELS: Final[dict[Condition, str]] = {
    Condition.EXCELLENT: "Excellent",
    Condition.GOOD: "Good",
    Condition.AVERAGE: "Average",
    Condition.NEEDS_RENOVATION: "Needs Renovation",
}

# Known amenities offered on the valuation form. Unknown amenities
# still count towards the bonus.
AMENITY_LABELS: Final[dict[str, str]] = {
    "parking": "Parking",
    "elevator": "Elevator",
    "security": "24/7 Security",
    "gym": "Gym",
    "pool": "Swimming Pool",
    "garden": "Garden",
    "rooftop": "Rooftop Access",
    "generator": "Generator Backup",
}


def base_rate_for(location: str) -> tuple[int, bool]:
    """
    Look up the base rate for a location.

    Returns:
        Tuple of (rate, known). Unknown locations get DEFAULT_RATE.
    """
    rate = BASE_RATES.get(location)
    if rate is None:
        return DEFAULT_RATE, False
    return rate, True


def type_label(property_type: PropertyType) -> str:
    """Human-readable label for a property type."""
    return TYPE_LABELS.get(property_type, property_type.value.title())


def amenity_label(amenity: str) -> str:
    """Human-readable label for an amenity."""
    return AMENITY_LABELS.get(amenity, amenity.replace("-", " ").title())
