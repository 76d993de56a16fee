"""Reading TCGplayer shipping exports and mapping orders to addresses."""

import csv
import io
import logging
from decimal import Decimal, InvalidOperation

from tcg_easypost.errors import MalformedRowError
from tcg_easypost.models import Address, RawOrder
from tcg_easypost.zip_codes import normalize_zip_code

logger = logging.getLogger(__name__)

# TCGplayer has shipped both capitalizations of this header.
_VALUE_COLUMNS = ("Value Of Products", "Value of Products")

_REQUIRED_COLUMNS = ("Address1", "PostalCode", "Shipping Method", "Item Count")

# Expedited orders arrive as "Expedited ..." and, in older exports, "Priority".
_ELEVATED_PREFIXES = ("Expedited", "Priority")


def is_expedited(shipping_method: str) -> bool:
    """Return True if the shipping method tag is an expedited tier."""
    return shipping_method.startswith(_ELEVATED_PREFIXES)


def parse_money(raw) -> Decimal:
    """Parse a currency amount such as ``"$1,234.50"`` into a Decimal."""
    text = str(raw if raw is not None else "").strip().replace("$", "").replace(",", "")
    if not text:
        return Decimal("0")
    return Decimal(text)


def _parse_item_count(order_number: str, raw) -> int:
    try:
        count = Decimal(str(raw).strip())
    except InvalidOperation:
        raise MalformedRowError(order_number, "Item Count", f"is not a number: {raw!r}") from None
    if not count.is_finite() or count != count.to_integral_value() or count < 0:
        raise MalformedRowError(order_number, "Item Count", f"must be a whole number >= 0: {raw!r}")
    return int(count)


def _parse_value(order_number: str, row: dict) -> Decimal:
    column = next((c for c in _VALUE_COLUMNS if c in row), None)
    if column is None or row[column] is None:
        raise MalformedRowError(order_number, "Value Of Products", "is missing")
    try:
        value = parse_money(row[column])
    except InvalidOperation:
        value = None
    if value is None or not value.is_finite():
        raise MalformedRowError(
            order_number, "Value Of Products", f"is not a currency amount: {row[column]!r}"
        )
    return value


def parse_order_row(row: dict) -> RawOrder | None:
    """Convert one export row into a RawOrder.

    Returns ``None`` for the blank trailer rows TCGplayer appends to its
    exports (rows with an empty ``Order #``).

    Raises:
        MalformedRowError: If a required column is missing or unreadable.
    """
    order_number = (row.get("Order #") or "").strip()
    if not order_number:
        return None

    for column in _REQUIRED_COLUMNS:
        if row.get(column) is None:
            raise MalformedRowError(order_number, column, "is missing")
    if not row["Address1"].strip():
        raise MalformedRowError(order_number, "Address1", "is empty")

    return RawOrder(
        order_number=order_number,
        first_name=row.get("FirstName") or "",
        last_name=row.get("LastName") or "",
        address1=row["Address1"],
        address2=row.get("Address2") or "",
        city=row.get("City") or "",
        state=row.get("State") or "",
        postal_code=row["PostalCode"],
        country=row.get("Country") or "",
        shipping_method=row["Shipping Method"].strip(),
        item_count=_parse_item_count(order_number, row["Item Count"]),
        value_of_products=_parse_value(order_number, row),
    )


def read_orders(text: str, delimiter: str = ",") -> list[RawOrder]:
    """Parse the text of a TCGplayer shipping export.

    Rows may end in CRLF or LF. Blank trailer rows are skipped.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff"), newline=""), delimiter=delimiter)
    if reader.fieldnames and "Order #" not in reader.fieldnames:
        raise MalformedRowError("", "Order #", "column is missing from the export")

    orders: list[RawOrder] = []
    skipped = 0

    for row in reader:
        order = parse_order_row(row)
        if order is None:
            skipped += 1
            continue
        orders.append(order)

    logger.info("Read %d order(s), skipped %d blank row(s)", len(orders), skipped)
    return orders


def order_to_address(order) -> Address:
    """Build the recipient address for an order.

    Works on both RawOrder and MergedOrder. Only the ZIP code is normalized;
    names and cities are passed through as exported.
    """
    return Address(
        name=f"{order.first_name} {order.last_name}",
        street1=order.address1,
        street2=order.address2,
        city=order.city,
        state=order.state,
        zip=normalize_zip_code(order.postal_code),
        country=order.country,
    )
