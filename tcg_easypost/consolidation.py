"""Merging orders that ship to the same address into a single shipment."""

import logging
from dataclasses import replace

from tcg_easypost.errors import MalformedRowError
from tcg_easypost.models import MergedOrder, RawOrder
from tcg_easypost.tcgplayer import is_expedited

logger = logging.getLogger(__name__)

# Maps a merged order's reference to every order number folded into it.
OrderGroupIndex = dict[str, list[str]]


def address_key(order: RawOrder) -> tuple[str, str, str, str, str]:
    """Return the key two orders must share exactly to be merged.

    Raw exported strings, not normalized ones: "123 Main St" and
    "123 Main St." are different addresses here.
    """
    return (order.address1, order.address2, order.city, order.state, str(order.postal_code))


def _start_merge(order: RawOrder) -> MergedOrder:
    return MergedOrder(
        order_number=order.order_number,
        first_name=order.first_name,
        last_name=order.last_name,
        address1=order.address1,
        address2=order.address2,
        city=order.city,
        state=order.state,
        postal_code=order.postal_code,
        country=order.country,
        shipping_method=order.shipping_method,
        item_count=order.item_count,
        value_of_products=order.value_of_products,
    )


def _absorb(merged: MergedOrder, order: RawOrder) -> MergedOrder:
    shipping_method = merged.shipping_method
    if is_expedited(order.shipping_method) and not is_expedited(shipping_method):
        shipping_method = order.shipping_method

    return replace(
        merged,
        item_count=merged.item_count + order.item_count,
        value_of_products=merged.value_of_products + order.value_of_products,
        shipping_method=shipping_method,
    )


def merge_orders_by_address(
    orders: list[RawOrder],
) -> tuple[list[MergedOrder], OrderGroupIndex]:
    """Fold orders with identical addresses into one MergedOrder each.

    The first order seen at an address supplies the reference number,
    recipient name and country. Later orders add their item counts and
    product values, and upgrade the shipping method if they were expedited.
    Orders with an empty order number are ignored.

    Args:
        orders: Orders in export order.

    Returns:
        The merged orders in order of first appearance, and an index from
        each merged order's reference to the order numbers it contains.

    Raises:
        MalformedRowError: If an order number appears at two different
            addresses.
    """
    merged: dict[tuple, MergedOrder] = {}
    groups: OrderGroupIndex = {}
    seen: dict[str, tuple] = {}

    for order in orders:
        if not order.order_number:
            continue

        key = address_key(order)
        if seen.setdefault(order.order_number, key) != key:
            raise MalformedRowError(
                order.order_number, "Order #", "appears at more than one address"
            )
        current = merged.get(key)
        if current is None:
            merged[key] = _start_merge(order)
            groups[order.order_number] = [order.order_number]
            continue

        merged[key] = _absorb(current, order)
        groups[current.order_number].append(order.order_number)
        logger.debug("Merged order %s into %s", order.order_number, current.order_number)

    logger.info("Consolidated %d order(s) into %d shipment(s)", len(orders), len(merged))
    return list(merged.values()), groups
