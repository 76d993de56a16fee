from decimal import Decimal

import pytest

from tcg_easypost.models import Address, RawOrder
from tcg_easypost.settings import default_shipping_config

HEADER = (
    "Order #,FirstName,LastName,Address1,Address2,City,State,PostalCode,Country,"
    "Order Date,Product Weight,Shipping Method,Item Count,Value Of Products,"
    "Shipping Fee Paid,Tracking #,Carrier"
)


@pytest.fixture
def config():
    return default_shipping_config()


@pytest.fixture
def sender():
    return Address(
        name="Card Shop",
        street1="1 Warehouse Way",
        city="Portland",
        state="OR",
        zip="97201-0000",
        country="US",
    )


@pytest.fixture
def make_order():
    """Factory for RawOrder with sensible defaults."""

    def _make(order_number="1001", **overrides):
        fields = dict(
            order_number=order_number,
            first_name="Jane",
            last_name="Doe",
            address1="123 Main St",
            address2="",
            city="Springfield",
            state="IL",
            postal_code="62701",
            country="US",
            shipping_method="Standard (7-10 days)",
            item_count=1,
            value_of_products=Decimal("1.00"),
        )
        fields.update(overrides)
        if isinstance(fields["value_of_products"], str):
            fields["value_of_products"] = Decimal(fields["value_of_products"])
        return RawOrder(**fields)

    return _make


@pytest.fixture
def export_csv():
    """Build the text of a TCGplayer export from row value lists."""

    def _build(*rows):
        lines = [HEADER] + [",".join(row) for row in rows]
        return "\r\n".join(lines) + "\r\n"

    return _build


def export_row(order_number, address1, postal_code, method, item_count, value, city="Springfield"):
    return [
        order_number, "Jane", "Doe", address1, "", city, "IL", postal_code, "US",
        "2026-10-01", "0.1", method, str(item_count), value, "0.00", "", "",
    ]
