"""Tests for service and package selection."""

from dataclasses import replace
from decimal import Decimal

import pytest

from tcg_easypost.models import NO_SIGNATURE, SIGNATURE
from tcg_easypost.rules import calculate_package_type, calculate_service, delivery_confirmation

STANDARD = "Standard"
EXPEDITED = "Expedited"


class TestCalculatePackageType:
    """Test package classification."""

    def test_small_cheap_order_is_letter(self, config):
        assert calculate_package_type(24, Decimal("49.99"), STANDARD, config) == "Letter"

    def test_over_letter_cap_is_flat(self, config):
        assert calculate_package_type(25, Decimal("49.99"), STANDARD, config) == "Flat"

    def test_at_flat_cap_is_flat(self, config):
        assert calculate_package_type(100, Decimal("0"), STANDARD, config) == "Flat"

    def test_over_flat_cap_is_parcel(self, config):
        assert calculate_package_type(101, Decimal("0"), STANDARD, config) == "Parcel"

    def test_value_at_ceiling_is_parcel(self, config):
        assert calculate_package_type(24, Decimal("50.00"), STANDARD, config) == "Parcel"

    @pytest.mark.parametrize("item_count, value", [(0, "0"), (1, "1.00"), (50, "10.00"), (500, "999")])
    def test_expedited_is_always_parcel(self, config, item_count, value):
        assert calculate_package_type(item_count, Decimal(value), EXPEDITED, config) == "Parcel"

    def test_uses_configured_caps(self, config):
        config = replace(config, letter=replace(config.letter, max_item_count=10))
        assert calculate_package_type(11, Decimal("1"), STANDARD, config) == "Flat"


class TestCalculateService:
    """Test service selection."""

    def test_small_cheap_order_is_first_class(self, config):
        assert calculate_service(24, Decimal("49.99"), STANDARD, config) == "First"

    def test_flat_is_first_class(self, config):
        assert calculate_service(25, Decimal("49.99"), STANDARD, config) == "First"

    def test_value_at_ceiling_is_ground_advantage(self, config):
        assert calculate_service(24, Decimal("50.00"), STANDARD, config) == "GroundAdvantage"

    def test_over_flat_cap_is_ground_advantage(self, config):
        assert calculate_service(101, Decimal("1"), STANDARD, config) == "GroundAdvantage"

    @pytest.mark.parametrize("item_count, value", [(0, "0"), (50, "10.00"), (500, "999")])
    def test_expedited_is_ground_advantage(self, config, item_count, value):
        assert calculate_service(item_count, Decimal(value), EXPEDITED, config) == "GroundAdvantage"

    def test_uses_flat_value_ceiling(self, config):
        config = replace(config, flat=replace(config.flat, max_value=Decimal("20")))
        assert calculate_service(1, Decimal("20"), STANDARD, config) == "GroundAdvantage"
        assert calculate_package_type(1, Decimal("20"), STANDARD, config) == "Parcel"


class TestDeliveryConfirmation:
    """Test signature requirement."""

    def test_below_threshold(self):
        assert delivery_confirmation(Decimal("249.99")) == NO_SIGNATURE

    def test_at_threshold(self):
        assert delivery_confirmation(Decimal("250.00")) == SIGNATURE

    def test_above_threshold(self):
        assert delivery_confirmation(Decimal("1000")) == SIGNATURE
