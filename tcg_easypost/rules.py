"""Business rules for choosing a USPS service and mailer for an order.

The two choices are made independently. Each walks its own list of checks
in a fixed order and the first check that matches decides.
"""

from decimal import Decimal

from tcg_easypost.models import (
    NO_SIGNATURE,
    PACKAGE_FLAT,
    PACKAGE_LETTER,
    PACKAGE_PARCEL,
    SERVICE_FIRST,
    SERVICE_GROUND_ADVANTAGE,
    SIGNATURE,
    ShippingConfig,
)
from tcg_easypost.tcgplayer import is_expedited

SIGNATURE_THRESHOLD = Decimal("250.00")


def calculate_service(
    item_count: int,
    value_of_products: Decimal,
    shipping_method: str,
    config: ShippingConfig,
) -> str:
    """Return the USPS service for an order."""
    if is_expedited(shipping_method):
        return SERVICE_GROUND_ADVANTAGE
    if value_of_products >= config.flat.max_value:
        return SERVICE_GROUND_ADVANTAGE
    if item_count > config.flat.max_item_count:
        return SERVICE_GROUND_ADVANTAGE
    return SERVICE_FIRST


def calculate_package_type(
    item_count: int,
    value_of_products: Decimal,
    shipping_method: str,
    config: ShippingConfig,
) -> str:
    """Return the predefined package (Letter, Flat or Parcel) for an order."""
    if item_count > config.flat.max_item_count:
        return PACKAGE_PARCEL
    if is_expedited(shipping_method):
        return PACKAGE_PARCEL
    if value_of_products >= config.flat.max_value:
        return PACKAGE_PARCEL
    if item_count > config.letter.max_item_count:
        return PACKAGE_FLAT
    return PACKAGE_LETTER


def delivery_confirmation(value_of_products: Decimal) -> str:
    if value_of_products >= SIGNATURE_THRESHOLD:
        return SIGNATURE
    return NO_SIGNATURE
