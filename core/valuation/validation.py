"""
Valuation Validation - Validation Logic for Raw Valuation Requests

Checks form or JSON payloads before a ValuationInput is built.
Error messages are written in plain English for end-user display.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Final, Optional

from .models import Condition, InvalidValuationInput, PropertyType, ValuationInput


REQUIRED_VALUATION_FIELDS: Final[tuple[str, ...]] = (
    "property_type",
    "location",
    "area_sqft",
    "condition",
)


# =============================================================================
# Validation Result
# =============================================================================


@dataclass(frozen=True)
class ValuationValidationResult:
    """Result of valuation payload validation."""

    valid: bool
    missing_fields: tuple[str, ...]
    errors: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "missing_fields": list(self.missing_fields),
            "errors": list(self.errors),
        }


# =============================================================================
# Helpers
# =============================================================================


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_count(value: Any) -> Optional[int]:
    """Parse a small count such as bedrooms; '6+' is read as 6."""
    if _is_blank(value):
        return None
    text = str(value).strip().rstrip("+")
    try:
        return int(text)
    except ValueError:
        return None


# =============================================================================
# Validation Functions
# =============================================================================


def validate_valuation_data(data: dict[str, Any]) -> ValuationValidationResult:
    """
    Validate a raw valuation payload.

    Args:
        data: Raw payload dictionary

    Returns:
        ValuationValidationResult with validation outcome
    """
    errors: list[str] = []
    missing_fields: list[str] = []

    property_type = data.get("property_type")
    if _is_blank(property_type):
        missing_fields.append("property_type")
        errors.append("Please select a property type")
    elif not isinstance(property_type, PropertyType) and (
        not isinstance(property_type, str) or PropertyType.from_string(property_type) is None
    ):
        errors.append("Please select a valid property type from the list")

    if _is_blank(data.get("location")):
        missing_fields.append("location")
        errors.append("Please select a location")

    area = data.get("area_sqft")
    if _is_blank(area):
        missing_fields.append("area_sqft")
        errors.append("Please enter the property area in square feet")
    else:
        parsed_area = _parse_number(area)
        if parsed_area is None:
            errors.append("Area must be a number")
        elif parsed_area <= 0:
            errors.append("Area must be greater than zero")

    condition = data.get("condition")
    if _is_blank(condition):
        missing_fields.append("condition")
        errors.append("Please select the property condition")
    elif not isinstance(condition, Condition) and (
        not isinstance(condition, str) or Condition.from_string(condition) is None
    ):
        errors.append("Please select a valid condition from the list")

    age = data.get("age_years")
    if not _is_blank(age):
        parsed_age = _parse_number(age)
        if parsed_age is None or parsed_age != int(parsed_age):
            errors.append("Property age must be a whole number of years")
        elif parsed_age < 0:
            errors.append("Property age cannot be negative")

    for key, label in (("bedrooms", "Bedrooms"), ("bathrooms", "Bathrooms")):
        value = data.get(key)
        if _is_blank(value):
            continue
        count = _parse_count(value)
        if count is None:
            errors.append(f"{label} must be a whole number")
        elif count < 0:
            errors.append(f"{label} cannot be negative")

    amenities = data.get("amenities")
    if amenities is not None and (
        not isinstance(amenities, (list, tuple, set, frozenset))
        or not all(isinstance(a, str) for a in amenities)
    ):
        errors.append("Amenities must be a list of names")

    return ValuationValidationResult(
        valid=not errors,
        missing_fields=tuple(missing_fields),
        errors=tuple(errors),
    )


def create_valuation_input(data: dict[str, Any]) -> ValuationInput:
    """
    Build a ValuationInput from a raw payload.

    Args:
        data: Raw payload dictionary

    Returns:
        ValuationInput

    Raises:
        InvalidValuationInput: If validation fails
    """
    validation = validate_valuation_data(data)
    if not validation.valid:
        raise InvalidValuationInput(validation.errors)

    age = data.get("age_years")
    return ValuationInput(
        property_type=data["property_type"],
        location=data["location"],
        area_sqft=float(data["area_sqft"]),
        condition=data["condition"],
        age_years=0 if _is_blank(age) else int(float(age)),
        bedrooms=_parse_count(data.get("bedrooms")),
        bathrooms=_parse_count(data.get("bathrooms")),
        amenities=tuple(data.get("amenities") or ()),
    )
