#!/usr/bin/env python3
"""CLI entry point for converting TCGplayer exports into EasyPost import files."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from tcg_easypost.converter import ConversionResult, convert_orders
from tcg_easypost.export import partition_by_label_size, write_shipment_exports
from tcg_easypost.models import SIGNATURE, Address
from tcg_easypost.settings import (
    SETTINGS_KEY,
    default_shipping_config,
    load_shipping_config,
    save_shipping_config,
)
from tcg_easypost.settings_store import JsonFileSettingsStore
from tcg_easypost.tcgplayer import read_orders

load_dotenv()


def _format_address(address: Address) -> list[str]:
    lines = [address.name]
    if address.company:
        lines.append(address.company)
    if address.street1:
        lines.append(address.street1)
    if address.street2:
        lines.append(address.street2)
    lines.append(f"{address.city}, {address.state} {address.zip}")
    return lines


def _print_report(result: ConversionResult):
    """Print every shipment with the orders it covers to stdout."""
    print(f"\n{'=' * 70}")
    print("  EASYPOST SHIPMENTS")
    print(f"  {len(result.shipments)} shipment(s) from "
          f"{sum(len(g) for g in result.order_groups.values())} order(s)")
    print(f"{'=' * 70}\n")

    for shipment in result.shipments:
        order = result.merged_order(shipment.reference)
        parcel = shipment.parcel
        print(f"  Shipment {shipment.reference}")
        print(f"    Orders:  {', '.join(result.order_groups.get(shipment.reference, []))}")
        print(f"    To:      {' / '.join(_format_address(shipment.to_address))}")
        print(f"    From:    {' / '.join(_format_address(shipment.from_address))}")
        if order is not None:
            print(f"    Order Total: ${order.value_of_products:,.2f}")
            print(f"    Item Count:  {order.item_count}")
        print(f"    Size (in):   {parcel.length} x {parcel.width} x {parcel.height}")
        print(f"    Weight (oz): {parcel.weight}")
        print(f"    Package:     {parcel.predefined_package} via {shipment.service}, "
              f"{shipment.options.label_size} label")
        if shipment.options.delivery_confirmation == SIGNATURE:
            print("    Signature Required")
        else:
            print("    No Signature Required")
        print()


def _init_settings(store: JsonFileSettingsStore):
    if store.get(SETTINGS_KEY) is not None:
        print(f"Settings already exist in {store.path}")
        return
    save_shipping_config(store, default_shipping_config())
    print(f"Default settings written to {store.path}")


def main():
    parser = argparse.ArgumentParser(
        description="Convert a TCGplayer shipping export into EasyPost bulk import CSVs.",
    )
    parser.add_argument(
        "orders_csv",
        nargs="?",
        metavar="ORDERS_CSV",
        help="TCGplayer shipping export to convert.",
    )
    parser.add_argument(
        "--settings",
        default=os.getenv("TCG_EASYPOST_SETTINGS", "easypost_settings.json"),
        help="Shipping settings JSON file (overrides TCG_EASYPOST_SETTINGS env var).",
    )
    parser.add_argument(
        "--output-dir",
        default=os.getenv("TCG_EASYPOST_OUTPUT_DIR", "."),
        help="Directory for the EasyPost CSVs (overrides TCG_EASYPOST_OUTPUT_DIR env var).",
    )
    parser.add_argument(
        "--delimiter",
        default=",",
        help='Field delimiter of the input and output CSVs (default: ",").',
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the shipments without writing any files.",
    )
    parser.add_argument(
        "--init-settings",
        action="store_true",
        help="Write the default shipping settings to the settings file and exit.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every merge and package decision.",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = JsonFileSettingsStore(args.settings)

    if args.init_settings:
        _init_settings(store)
        sys.exit(0)

    if not args.orders_csv:
        parser.error("ORDERS_CSV is required unless --init-settings is given")

    try:
        config = load_shipping_config(store)
        text = Path(args.orders_csv).read_text(encoding="utf-8-sig")
        orders = read_orders(text, delimiter=args.delimiter)
        result = convert_orders(orders, config)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if not result.shipments:
        print("No orders found in the export.")
        sys.exit(0)

    _print_report(result)

    if args.dry_run:
        for label_size, group in partition_by_label_size(result.shipments).items():
            print(f"Would export {len(group)} {label_size} shipment(s).")
        return

    try:
        paths = write_shipment_exports(
            result.shipments, args.output_dir, delimiter=args.delimiter,
        )
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    for path in paths:
        print(f"Shipments exported to {path}")


if __name__ == "__main__":
    main()
