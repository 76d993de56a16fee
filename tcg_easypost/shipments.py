"""Building EasyPost shipments from merged orders."""

import logging
from decimal import ROUND_CEILING, Decimal

from tcg_easypost.models import (
    PACKAGE_FLAT,
    PACKAGE_LETTER,
    MergedOrder,
    PackageConfig,
    Parcel,
    Shipment,
    ShipmentOptions,
    ShippingConfig,
)
from tcg_easypost.rules import calculate_package_type, calculate_service, delivery_confirmation
from tcg_easypost.tcgplayer import order_to_address

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def ceil_weight(weight: Decimal) -> Decimal:
    """Round *weight* up to two decimal places.

    USPS rejects labels whose declared weight is under the real weight, so
    this never rounds down.
    """
    return Decimal(str(weight)).quantize(_CENT, rounding=ROUND_CEILING)


def _package_config(package_type: str, config: ShippingConfig) -> PackageConfig:
    if package_type == PACKAGE_LETTER:
        return config.letter
    if package_type == PACKAGE_FLAT:
        return config.flat
    return config.parcel


def build_parcel(item_count: int, package_type: str, config: ShippingConfig) -> Parcel:
    package = _package_config(package_type, config)
    return Parcel(
        length=package.length,
        width=package.width,
        height=package.height,
        weight=ceil_weight(package.base_weight + item_count * package.per_item_weight),
        predefined_package=package_type,
    )


def build_shipment(order: MergedOrder, config: ShippingConfig) -> Shipment:
    """Build the shipment for one merged order.

    Raises:
        InvalidFormatError: If the order's ZIP code cannot be normalized.
    """
    to_address = order_to_address(order)

    service = calculate_service(
        order.item_count, order.value_of_products, order.shipping_method, config
    )
    package_type = calculate_package_type(
        order.item_count, order.value_of_products, order.shipping_method, config
    )
    logger.debug(
        "Order %s: %d item(s), $%s, %s -> %s / %s",
        order.order_number,
        order.item_count,
        order.value_of_products,
        order.shipping_method,
        package_type,
        service,
    )

    return Shipment(
        reference=order.order_number,
        to_address=to_address,
        from_address=config.from_address,
        parcel=build_parcel(order.item_count, package_type, config),
        service=service,
        options=ShipmentOptions(
            label_format=config.label_format,
            label_size=_package_config(package_type, config).label_size,
            invoice_number=order.order_number,
            delivery_confirmation=delivery_confirmation(order.value_of_products),
        ),
    )


def build_shipments(orders: list[MergedOrder], config: ShippingConfig) -> list[Shipment]:
    """Build a shipment for every merged order, failing on the first bad one."""
    return [build_shipment(order, config) for order in orders]
