"""
Tests for valuation payload validation

Raw form payloads are checked field by field so every problem can be
reported at once.
"""

import pytest

from core.valuation import (
    Condition,
    InvalidValuationInput,
    PropertyType,
    create_valuation_input,
    validate_valuation_data,
)


@pytest.fixture
def valid_payload():
    return {
        "property_type": "apartment",
        "location": "Dhanmondi, Dhaka",
        "area_sqft": "1200",
        "condition": "average",
        "age_years": "5",
        "bedrooms": "3",
        "bathrooms": "6+",
        "amenities": ["parking", "Elevator", "parking"],
    }


class TestValidateValuationData:

    def test_valid_payload(self, valid_payload):
        result = validate_valuation_data(valid_payload)

        assert result.valid is True
        assert result.errors == ()
        assert result.missing_fields == ()

    def test_required_fields_reported_as_missing(self):
        result = validate_valuation_data({})

        assert result.valid is False
        assert set(result.missing_fields) == {"property_type", "location", "area_sqft", "condition"}
        assert len(result.errors) == 4

    def test_blank_strings_count_as_missing(self, valid_payload):
        valid_payload["location"] = "   "

        result = validate_valuation_data(valid_payload)

        assert "location" in result.missing_fields

    @pytest.mark.parametrize("area", ["0", -10, "abc", float("nan"), float("inf"), True])
    def test_bad_area_rejected(self, valid_payload, area):
        valid_payload["area_sqft"] = area

        assert validate_valuation_data(valid_payload).valid is False

    def test_unknown_property_type(self, valid_payload):
        valid_payload["property_type"] = "castle"

        result = validate_valuation_data(valid_payload)

        assert result.valid is False
        assert any("property type" in e for e in result.errors)

    def test_unknown_condition(self, valid_payload):
        valid_payload["condition"] = "pristine"

        assert validate_valuation_data(valid_payload).valid is False

    @pytest.mark.parametrize("age", ["-1", "2.5", "old"])
    def test_bad_age_rejected(self, valid_payload, age):
        valid_payload["age_years"] = age

        assert validate_valuation_data(valid_payload).valid is False

    def test_age_is_optional(self, valid_payload):
        del valid_payload["age_years"]

        assert validate_valuation_data(valid_payload).valid is True

    def test_bad_bedroom_count(self, valid_payload):
        valid_payload["bedrooms"] = "many"

        result = validate_valuation_data(valid_payload)

        assert result.errors == ("Bedrooms must be a whole number",)

    def test_amenities_must_be_a_list_of_names(self, valid_payload):
        valid_payload["amenities"] = "parking"

        assert validate_valuation_data(valid_payload).valid is False

    def test_to_dict(self):
        data = validate_valuation_data({}).to_dict()

        assert data["valid"] is False
        assert isinstance(data["errors"], list)


class TestCreateValuationInput:

    def test_builds_typed_input(self, valid_payload):
        valuation_input = create_valuation_input(valid_payload)

        assert valuation_input.property_type == PropertyType.APARTMENT
        assert valuation_input.condition == Condition.AVERAGE
        assert valuation_input.area_sqft == 1200.0
        assert valuation_input.age_years == 5
        assert valuation_input.bedrooms == 3
        assert valuation_input.bathrooms == 6
        assert valuation_input.amenities == ("parking", "elevator")

    def test_missing_age_defaults_to_zero(self, valid_payload):
        valid_payload["age_years"] = None

        assert create_valuation_input(valid_payload).age_years == 0

    def test_invalid_payload_raises_with_errors(self):
        with pytest.raises(InvalidValuationInput) as exc:
            create_valuation_input({"property_type": "apartment"})

        assert len(exc.value.errors) == 3
        assert isinstance(exc.value, ValueError)
