"""Tests for the Filters model."""

import pytest
from pydantic import ValidationError

from propsearch.ai.filters import Filters, PropertyType


def test_absent_fields_stay_absent():
    filters = Filters.from_dict({"bedrooms": 2, "propertyType": "apartment"})

    assert filters.radius is None
    assert filters.min_price is None
    assert filters.max_price is None
    assert filters.bedrooms == 2
    assert filters.property_type is PropertyType.APARTMENT
    assert filters.to_dict() == {"bedrooms": 2, "propertyType": "apartment"}


def test_wire_names_are_camel_case():
    filters = Filters(min_price=1000000, max_price=2500000, radius=5)

    assert filters.to_dict() == {"radius": 5.0, "minPrice": 1000000.0, "maxPrice": 2500000.0}


def test_empty():
    assert Filters.from_dict(None).is_empty()
    assert not Filters(bedrooms=0).is_empty()


def test_unknown_keys_ignored():
    assert Filters.from_dict({"location": "Laureles"}).is_empty()


def test_whole_float_bedrooms_accepted():
    assert Filters.from_dict({"bedrooms": 3.0}).bedrooms == 3


@pytest.mark.parametrize("data", [
    {"bedrooms": -1},
    {"propertyType": "castle"},
    {"radius": 0},
    {"minPrice": -5},
])
def test_rejects_invalid_values(data):
    with pytest.raises(ValidationError):
        Filters.from_dict(data)


def test_filters_are_frozen():
    filters = Filters(bedrooms=2)

    with pytest.raises(ValidationError):
        filters.radius = 5

    widened = filters.model_copy(update={"radius": 5})
    assert widened.radius == 5
    assert filters.radius is None
