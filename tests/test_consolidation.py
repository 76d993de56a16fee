"""Tests for merging orders by address."""

from decimal import Decimal

import pytest

from tcg_easypost.consolidation import address_key, merge_orders_by_address
from tcg_easypost.errors import MalformedRowError


class TestMergeOrdersByAddress:
    """Test consolidation of orders into shipments."""

    def test_same_address_is_merged(self, make_order):
        orders = [
            make_order("1001", item_count=3, value_of_products="10.00"),
            make_order("1002", item_count=5, value_of_products="45.00"),
        ]
        merged, groups = merge_orders_by_address(orders)

        assert len(merged) == 1
        assert merged[0].order_number == "1001"
        assert merged[0].item_count == 8
        assert merged[0].value_of_products == Decimal("55.00")
        assert groups == {"1001": ["1001", "1002"]}

    def test_distinct_addresses_stay_separate(self, make_order):
        orders = [
            make_order("1001", address1="1 A St"),
            make_order("1002", address1="2 B St"),
            make_order("1003", address1="1 A St"),
        ]
        merged, groups = merge_orders_by_address(orders)

        assert [m.order_number for m in merged] == ["1001", "1002"]
        assert groups == {"1001": ["1001", "1003"], "1002": ["1002"]}

    def test_match_is_exact(self, make_order):
        """Case and punctuation differences are different addresses."""
        orders = [
            make_order("1001", address1="123 Main St"),
            make_order("1002", address1="123 main st"),
            make_order("1003", address1="123 Main St."),
            make_order("1004", postal_code="62701-0000"),
        ]
        merged, _ = merge_orders_by_address(orders)
        assert len(merged) == 4

    def test_address2_is_part_of_key(self, make_order):
        orders = [
            make_order("1001", address2="Apt 1"),
            make_order("1002", address2="Apt 2"),
        ]
        merged, _ = merge_orders_by_address(orders)
        assert len(merged) == 2

    def test_expedited_order_upgrades_merge(self, make_order):
        orders = [
            make_order("1001", shipping_method="Standard"),
            make_order("1002", shipping_method="Expedited"),
            make_order("1003", shipping_method="Standard"),
        ]
        merged, _ = merge_orders_by_address(orders)
        assert merged[0].shipping_method == "Expedited"

    def test_first_order_supplies_identity(self, make_order):
        orders = [
            make_order("1001", first_name="Jane", shipping_method="Expedited"),
            make_order("1002", first_name="John", shipping_method="Standard"),
        ]
        merged, _ = merge_orders_by_address(orders)
        assert merged[0].first_name == "Jane"
        assert merged[0].shipping_method == "Expedited"

    def test_value_sum_has_no_float_drift(self, make_order):
        orders = [make_order(str(i), value_of_products="0.10") for i in range(1000)]
        merged, groups = merge_orders_by_address(orders)
        assert merged[0].value_of_products == Decimal("100.00")
        assert len(groups["0"]) == 1000

    def test_empty_order_numbers_are_dropped(self, make_order):
        orders = [make_order("1001"), make_order(""), make_order("1002")]
        _, groups = merge_orders_by_address(orders)
        assert groups == {"1001": ["1001", "1002"]}

    def test_same_groups_in_any_order(self, make_order):
        orders = [
            make_order("1001", address1="1 A St", item_count=1),
            make_order("1002", address1="2 B St", item_count=2),
            make_order("1003", address1="1 A St", item_count=4),
        ]
        forward, _ = merge_orders_by_address(orders)
        backward, _ = merge_orders_by_address(list(reversed(orders)))

        def totals(merged):
            return {(m.address1, m.item_count) for m in merged}

        assert totals(forward) == totals(backward)
        assert backward[0].order_number == "1003"

    def test_no_orders(self):
        assert merge_orders_by_address([]) == ([], {})

    def test_order_number_at_two_addresses_raises(self, make_order):
        orders = [
            make_order("1001", address1="1 A St"),
            make_order("1002", address1="1 A St"),
            make_order("1001", address1="2 B St"),
        ]
        with pytest.raises(MalformedRowError) as exc_info:
            merge_orders_by_address(orders)
        assert exc_info.value.order_number == "1001"
        assert exc_info.value.field == "Order #"

    def test_repeated_order_number_at_same_address(self, make_order):
        orders = [make_order("1001", item_count=1), make_order("1001", item_count=2)]
        merged, groups = merge_orders_by_address(orders)
        assert merged[0].item_count == 3
        assert groups == {"1001": ["1001", "1001"]}


class TestAddressKey:
    """Test the address key."""

    def test_uses_raw_postal_code(self, make_order):
        assert address_key(make_order(postal_code="62701"))[-1] == "62701"
