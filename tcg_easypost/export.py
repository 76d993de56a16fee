"""Grouping shipments by label size and writing EasyPost import CSVs."""

import csv
import io
import logging
from datetime import datetime, timezone
from pathlib import Path

from tcg_easypost.models import Address, Shipment

logger = logging.getLogger(__name__)

_ADDRESS_FIELDS = (
    "name", "company", "phone", "email",
    "street1", "street2", "city", "state", "zip", "country",
)

CSV_COLUMNS = (
    ["reference"]
    + [f"to_address.{f}" for f in _ADDRESS_FIELDS]
    + [f"from_address.{f}" for f in _ADDRESS_FIELDS]
    + [
        "parcel.length", "parcel.width", "parcel.height",
        "parcel.weight", "parcel.predefined_package",
        "carrier", "service",
        "options.label_format", "options.label_size",
        "options.invoice_number", "options.delivery_confirmation",
    ]
)


def partition_by_label_size(shipments: list[Shipment]) -> dict[str, list[Shipment]]:
    """Group shipments by label size.

    Groups appear in the order their label size is first seen and keep the
    input order of their shipments. Label sizes with no shipments are not
    present.
    """
    groups: dict[str, list[Shipment]] = {}
    for shipment in shipments:
        groups.setdefault(shipment.options.label_size, []).append(shipment)
    return groups


def _address_columns(prefix: str, address: Address) -> dict:
    return {
        f"{prefix}.{field}": getattr(address, field) or ""
        for field in _ADDRESS_FIELDS
    }


def shipment_to_row(shipment: Shipment) -> dict:
    """Flatten a shipment into the dotted columns EasyPost's import expects."""
    row = {"reference": shipment.reference}
    row.update(_address_columns("to_address", shipment.to_address))
    row.update(_address_columns("from_address", shipment.from_address))
    row.update({
        "parcel.length": shipment.parcel.length,
        "parcel.width": shipment.parcel.width,
        "parcel.height": shipment.parcel.height,
        "parcel.weight": str(shipment.parcel.weight),
        "parcel.predefined_package": shipment.parcel.predefined_package,
        "carrier": shipment.carrier,
        "service": shipment.service,
        "options.label_format": shipment.options.label_format,
        "options.label_size": shipment.options.label_size,
        "options.invoice_number": shipment.options.invoice_number,
        "options.delivery_confirmation": shipment.options.delivery_confirmation,
    })
    return row


def shipments_to_csv(
    shipments: list[Shipment],
    delimiter: str = ",",
    line_terminator: str = "\r\n",
) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(
        buf, fieldnames=CSV_COLUMNS, delimiter=delimiter, lineterminator=line_terminator,
    )
    writer.writeheader()
    for shipment in shipments:
        writer.writerow(shipment_to_row(shipment))
    return buf.getvalue()


def export_filename(label_size: str, generated_at: datetime) -> str:
    """Return the file name for one label size's import file.

    The timestamp is the UTC ISO time with ``-``, ``:`` and ``T`` swapped
    for dots, e.g. ``EasyPostShipmentImport_4x6_2026.10.19.17.37.00.000Z.csv``.
    """
    utc = generated_at.astimezone(timezone.utc)
    stamp = utc.strftime("%Y.%m.%d.%H.%M.%S") + f".{utc.microsecond // 1000:03d}Z"
    return f"EasyPostShipmentImport_{label_size}_{stamp}.csv"


def write_shipment_exports(
    shipments: list[Shipment],
    output_dir: str | Path,
    generated_at: datetime | None = None,
    delimiter: str = ",",
    line_terminator: str = "\r\n",
) -> list[Path]:
    """Write one EasyPost import CSV per label size.

    Either every file is written or none is: if a write fails, the files
    already written by this call are removed before the error propagates.

    Returns:
        Paths of the files written, one per non-empty label size group.

    Raises:
        OSError: If the output directory or a file cannot be written.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    output_dir = Path(output_dir)
    exports = [
        (output_dir / export_filename(label_size, generated_at), label_size, group,
         shipments_to_csv(group, delimiter, line_terminator))
        for label_size, group in partition_by_label_size(shipments).items()
    ]
    if not exports:
        return []

    output_dir.mkdir(parents=True, exist_ok=True)

    paths: list[Path] = []
    try:
        for path, label_size, group, text in exports:
            with open(path, "x", newline="", encoding="utf-8") as f:
                paths.append(path)
                f.write(text)
            logger.info("Wrote %d %s shipment(s) to %s", len(group), label_size, path)
    except OSError:
        for path in paths:
            path.unlink(missing_ok=True)
        raise

    return paths
