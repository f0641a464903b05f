"""Unit tests for source path resolution."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from forcemap.core.exceptions import FieldAccessError
from forcemap.mappers import is_empty, resolve_path
from tests.fixtures.records import Address, Customer, Order


pytestmark = pytest.mark.unit


class TestIsEmpty:
    """Tests for is_empty()."""

    @pytest.mark.parametrize(
        "value",
        [None, "", 0, 0.0, Decimal(0), False, [], {}, ()],
    )
    def test_zero_values_are_empty(self, value: Any) -> None:
        """Should treat zero values as absent."""
        assert is_empty(value) is True

    @pytest.mark.parametrize(
        "value",
        ["x", 1, -1, 0.5, True, ["a"], {"a": 1}, Address()],
    )
    def test_non_zero_values(self, value: Any) -> None:
        """Should treat anything else as present."""
        assert is_empty(value) is False


class TestResolvePath:
    """Tests for resolve_path()."""

    def test_single_segment_on_object(self) -> None:
        """Should read an attribute."""
        assert resolve_path(Order(last_order_at=42), "last_order_at") == 42

    def test_nested_segments_on_objects(self) -> None:
        """Should recurse one segment at a time."""
        order = Order(customer=Customer(address=Address(country="France")))

        assert resolve_path(order, "customer.address.country") == "France"

    def test_mapping_source(self) -> None:
        """Should look keys up in mappings."""
        source = {"customer": {"address": {"country": "Spain"}}}

        assert resolve_path(source, "customer.address.country") == "Spain"

    def test_mixed_mapping_and_object(self) -> None:
        """Should walk objects nested in mappings and vice versa."""
        source = {"order": Order(customer=Customer(surname="Doe"))}

        assert resolve_path(source, "order.customer.surname") == "Doe"

    def test_missing_mapping_key_is_none(self) -> None:
        """Should return None for a missing key."""
        assert resolve_path({"a": 1}, "b") is None
        assert resolve_path({"a": {}}, "a.b.c") is None

    def test_empty_intermediate_stops(self) -> None:
        """Should stop at an empty intermediate value."""
        assert resolve_path({"customer": None}, "customer.surname") is None
        assert resolve_path(Order(customer=Customer(id="")), "customer.id.x") is None

    def test_missing_attribute_raises(self) -> None:
        """Should raise FieldAccessError for a missing attribute."""
        with pytest.raises(FieldAccessError) as exc_info:
            resolve_path(Order(), "customer.nickname")

        assert exc_info.value.segment == "nickname"
        assert exc_info.value.path == "customer.nickname"
