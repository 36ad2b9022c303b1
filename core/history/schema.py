"""
Valuation History Schema - Stored Valuation Records

A record captures the property attributes and the rounded result of one
valuation, owned by a single user. Records are immutable once stored.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from core.valuation.models import (
    Condition,
    PropertyType,
    ValuationInput,
    ValuationResult,
)


def generate_valuation_id() -> str:
    """Generate a unique valuation record ID."""
    return f"VAL-{uuid.uuid4().hex[:12].upper()}"


def generate_subscription_id() -> str:
    """Generate a unique subscription ID."""
    return f"SUBS-{uuid.uuid4().hex[:12].upper()}"


@dataclass(frozen=True)
class ValuationRecord:
    """
    Immutable stored valuation.

    Holds the result fields plus bedrooms/bathrooms/age/condition/amenities
    as metadata for the history view.
    """

    record_id: str
    user_id: str
    property_type: PropertyType
    location: str
    area_sqft: float
    condition: Condition
    age_years: int
    bedrooms: Optional[int]
    bathrooms: Optional[int]
    amenities: tuple[str, ...]
    estimated_value: int
    low_estimate: int
    high_estimate: int
    price_per_sqft: int
    created_at: datetime

    @classmethod
    def create(
        cls,
        user_id: str,
        valuation_input: ValuationInput,
        result: ValuationResult,
        created_at: Optional[datetime] = None,
    ) -> "ValuationRecord":
        """Create a new record, assigning its ID and timestamp."""
        if not user_id or not str(user_id).strip():
            raise ValueError("user_id is required")

        return cls(
            record_id=generate_valuation_id(),
            user_id=str(user_id).strip(),
            property_type=valuation_input.property_type,
            location=valuation_input.location,
            area_sqft=valuation_input.area_sqft,
            condition=valuation_input.condition,
            age_years=valuation_input.age_years,
            bedrooms=valuation_input.bedrooms,
            bathrooms=valuation_input.bathrooms,
            amenities=valuation_input.amenities,
            estimated_value=result.estimated_value,
            low_estimate=result.low_estimate,
            high_estimate=result.high_estimate,
            price_per_sqft=result.price_per_sqft,
            created_at=created_at or datetime.utcnow(),
        )

    @property
    def valuation_input(self) -> ValuationInput:
        """Rebuild the input attributes for re-display or export."""
        return ValuationInput(
            property_type=self.property_type,
            location=self.location,
            area_sqft=self.area_sqft,
            condition=self.condition,
            age_years=self.age_years,
            bedrooms=self.bedrooms,
            bathrooms=self.bathrooms,
            amenities=self.amenities,
        )

    @property
    def result(self) -> ValuationResult:
        """The stored result, stamped with its creation time."""
        return ValuationResult(
            estimated_value=self.estimated_value,
            low_estimate=self.low_estimate,
            high_estimate=self.high_estimate,
            price_per_sqft=self.price_per_sqft,
            created_at=self.created_at,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialisation."""
        return {
            "record_id": self.record_id,
            "user_id": self.user_id,
            "property_type": self.property_type.value,
            "location": self.location,
            "area_sqft": self.area_sqft,
            "condition": self.condition.value,
            "age_years": self.age_years,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "amenities": list(self.amenities),
            "estimated_value": self.estimated_value,
            "low_estimate": self.low_estimate,
            "high_estimate": self.high_estimate,
            "price_per_sqft": self.price_per_sqft,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ValuationRecord":
        """Restore a record from its serialised form."""
        return cls(
            record_id=data["record_id"],
            user_id=data["user_id"],
            property_type=PropertyType(data["property_type"]),
            location=data["location"],
            area_sqft=data["area_sqft"],
            condition=Condition(data["condition"]),
            age_years=data.get("age_years") or 0,
            bedrooms=data.get("bedrooms"),
            bathrooms=data.get("bathrooms"),
            amenities=tuple(data.get("amenities") or ()),
            estimated_value=data["estimated_value"],
            low_estimate=data["low_estimate"],
            high_estimate=data["high_estimate"],
            price_per_sqft=data["price_per_sqft"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )


DEFAULT_THRESHOLD_PERCENTAGE = 5.0


@dataclass
class ValuationSubscription:
    """
    A user's request to be alerted when average valuations in a
    location move by at least threshold_percentage.
    """

    user_id: str
    location: str
    email: str
    threshold_percentage: float = DEFAULT_THRESHOLD_PERCENTAGE
    subscription_id: str = field(default_factory=generate_subscription_id)
    created_at: datetime = field(default_factory=datetime.utcnow)
    last_notified_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate required fields at construction."""
        if not self.user_id or not self.user_id.strip():
            raise ValueError("user_id is required")
        if not self.location or not self.location.strip():
            raise ValueError("location is required")
        if not self.email or "@" not in self.email:
            raise ValueError(f"Invalid email address: {self.email}")
        if self.threshold_percentage is None or self.threshold_percentage <= 0:
            raise ValueError("threshold_percentage must be positive")

        self.location = self.location.strip()
        self.email = self.email.strip().lower()

    def to_dict(self) -> dict:
        return {
            "subscription_id": self.subscription_id,
            "user_id": self.user_id,
            "location": self.location,
            "email": self.email,
            "threshold_percentage": self.threshold_percentage,
            "created_at": self.created_at.isoformat(),
            "last_notified_at": (
                self.last_notified_at.isoformat() if self.last_notified_at else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ValuationSubscription":
        last_notified = data.get("last_notified_at")
        return cls(
            user_id=data["user_id"],
            location=data["location"],
            email=data["email"],
            threshold_percentage=data.get(
                "threshold_percentage", DEFAULT_THRESHOLD_PERCENTAGE
            ),
            subscription_id=data["subscription_id"],
            created_at=datetime.fromisoformat(data["created_at"]),
            last_notified_at=datetime.fromisoformat(last_notified) if last_notified else None,
        )
