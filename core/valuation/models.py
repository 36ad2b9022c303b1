"""
Data models for the Valuation Engine

Defines the property attributes accepted by the estimator, the rounded
valuation result, and the display-only market context (snapshot and
synthetic comparables).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional


# =============================================================================
# Errors
# =============================================================================


class ValuationError(Exception):
    """Base class for valuation engine errors."""


class InvalidValuationInput(ValuationError, ValueError):
    """
    Raised when property attributes cannot produce a meaningful estimate.

    Carries every problem found so callers can report them together.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors = tuple(errors)
        super().__init__("; ".join(self.errors) or "Invalid valuation input")


# =============================================================================
# Enums
# =============================================================================


class PropertyType(Enum):
    """Property type classification used for the type multiplier."""
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    DUPLEX = "duplex"
    PENTHOUSE = "penthouse"
    COMMERCIAL = "commercial"
    LAND = "land"

    @classmethod
    def from_string(cls, value: str) -> Optional["PropertyType"]:
        """Convert string to PropertyType, case-insensitive."""
        normalised = value.lower().strip()
        for member in cls:
            if member.value == normalised:
                return member
        return None


class Condition(Enum):
    """
    Property condition.

    Closed set: an unrecognised condition is rejected at the boundary
    rather than falling through the multiplier lookup.
    """
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    NEEDS_RENOVATION = "needs-renovation"

    @classmethod
    def from_string(cls, value: str) -> Optional["Condition"]:
        """Convert string to Condition, accepting '_' or ' ' for '-'."""
        normalised = "-".join(value.lower().replace("_", " ").split())
        for member in cls:
            if member.value == normalised:
                return member
        return None


# =============================================================================
# Helpers
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (JavaScript Math.round)."""
    return int(math.floor(value + 0.5))


def normalise_amenities(amenities: Optional[Iterable[str]]) -> tuple[str, ...]:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""
    if not amenities:
        return ()
    cleaned = (str(a).strip().lower() for a in amenities)
    return tuple(dict.fromkeys(a for a in cleaned if a))


# =============================================================================
# Input
# =============================================================================


@dataclass(frozen=True)
class ValuationInput:
    """
    Property attributes for a single valuation request.

    Bedrooms and bathrooms are carried for display and storage only;
    the estimate does not use them.
    """
    property_type: PropertyType
    location: str
    area_sqft: float
    condition: Condition
    age_years: int = 0
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    amenities: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Coerce enum strings and validate at construction."""
        errors: list[str] = []

        property_type = self.property_type
        if isinstance(property_type, str):
            property_type = PropertyType.from_string(property_type)
        if not isinstance(property_type, PropertyType):
            errors.append(f"Unknown property type: {self.property_type!r}")
        else:
            object.__setattr__(self, "property_type", property_type)

        condition = self.condition
        if isinstance(condition, str):
            condition = Condition.from_string(condition)
        if not isinstance(condition, Condition):
            errors.append(f"Unknown condition: {self.condition!r}")
        else:
            object.__setattr__(self, "condition", condition)

        if not self.location or not str(self.location).strip():
            errors.append("location is required")
        else:
            object.__setattr__(self, "location", str(self.location).strip())

        if self.area_sqft is None or not self.area_sqft > 0:
            errors.append("area_sqft must be positive")
        elif not math.isfinite(self.area_sqft):
            errors.append("area_sqft must be a finite number")

        if self.age_years is None:
            object.__setattr__(self, "age_years", 0)
        elif self.age_years < 0:
            errors.append("age_years cannot be negative")

        if self.bedrooms is not None and self.bedrooms < 0:
            errors.append("bedrooms cannot be negative")
        if self.bathrooms is not None and self.bathrooms < 0:
            errors.append("bathrooms cannot be negative")

        if self.amenities is not None and not isinstance(self.amenities, (list, tuple, set, frozenset)):
            errors.append("amenities must be a list of names")

        if errors:
            raise InvalidValuationInput(errors)

        object.__setattr__(self, "amenities", normalise_amenities(self.amenities))

    @property
    def amenity_count(self) -> int:
        """Number of distinct amenities."""
        return len(self.amenities)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "property_type": self.property_type.value,
            "location": self.location,
            "area_sqft": self.area_sqft,
            "condition": self.condition.value,
            "age_years": self.age_years,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "amenities": list(self.amenities),
        }


# =============================================================================
# Output
# =============================================================================


LOW_ESTIMATE_FACTOR = 0.9
HIGH_ESTIMATE_FACTOR = 1.1


@dataclass(frozen=True)
class ValuationResult:
    """
    Rounded valuation with its derived range.

    Every derived figure is computed from the rounded estimate,
    never from the raw float.
    """
    estimated_value: int
    low_estimate: int
    high_estimate: int
    price_per_sqft: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_estimate(cls, estimate: float, area_sqft: float) -> "ValuationResult":
        """Round the point estimate and derive low/high/per-sqft figures."""
        value = round_half_up(estimate)
        return cls(
            estimated_value=value,
            low_estimate=round_half_up(value * LOW_ESTIMATE_FACTOR),
            high_estimate=round_half_up(value * HIGH_ESTIMATE_FACTOR),
            price_per_sqft=round_half_up(value / area_sqft),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "estimated_value": self.estimated_value,
            "low_estimate": self.low_estimate,
            "high_estimate": self.high_estimate,
            "price_per_sqft": self.price_per_sqft,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class MarketSnapshot:
    """
    Simulated market context for a location.

    Regenerated on every request; not derived from stored listings.
    """
    location: str
    avg_price_per_sqft: int
    year_over_year_change_percent: float
    active_listing_count: int
    avg_days_on_market: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "location": self.location,
            "avg_price_per_sqft": self.avg_price_per_sqft,
            "year_over_year_change_percent": self.year_over_year_change_percent,
            "active_listing_count": self.active_listing_count,
            "avg_days_on_market": self.avg_days_on_market,
        }


@dataclass(frozen=True)
class ComparableListing:
    """A synthetic comparable listing used for display only."""
    title: str
    location: str
    property_type: PropertyType
    area_sqft: int
    price: int

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "location": self.location,
            "property_type": self.property_type.value,
            "area_sqft": self.area_sqft,
            "price": self.price,
        }


@dataclass
class ValuationReport:
    """Everything a display or export layer needs for one valuation."""
    valuation_input: ValuationInput
    result: ValuationResult
    market: Optional[MarketSnapshot] = None
    comparables: List[ComparableListing] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "input": self.valuation_input.to_dict(),
            "result": self.result.to_dict(),
            "market": self.market.to_dict() if self.market else None,
            "comparables": [c.to_dict() for c in self.comparables],
        }
