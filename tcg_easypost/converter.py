"""End-to-end conversion of an order export into shipments."""

import logging
from dataclasses import dataclass

from tcg_easypost.consolidation import OrderGroupIndex, merge_orders_by_address
from tcg_easypost.models import MergedOrder, RawOrder, Shipment, ShippingConfig
from tcg_easypost.shipments import build_shipments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    merged_orders: list[MergedOrder]
    order_groups: OrderGroupIndex
    shipments: list[Shipment]

    def merged_order(self, reference: str) -> MergedOrder | None:
        """Return the merged order a shipment was built from."""
        return next((o for o in self.merged_orders if o.order_number == reference), None)


def convert_orders(orders: list[RawOrder], config: ShippingConfig) -> ConversionResult:
    """Consolidate *orders* by address and build one shipment per address.

    Any order that cannot be converted aborts the whole batch, so a partial
    set of labels is never produced.
    """
    merged_orders, order_groups = merge_orders_by_address(orders)
    shipments = build_shipments(merged_orders, config)
    logger.info("Built %d shipment(s) from %d order(s)", len(shipments), len(orders))
    return ConversionResult(
        merged_orders=merged_orders,
        order_groups=order_groups,
        shipments=shipments,
    )
