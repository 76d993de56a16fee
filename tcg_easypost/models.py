"""Shared data models for converting marketplace orders into EasyPost shipments."""

from dataclasses import dataclass
from decimal import Decimal

CARRIER = "USPS"

SERVICE_FIRST = "First"
SERVICE_GROUND_ADVANTAGE = "GroundAdvantage"

PACKAGE_LETTER = "Letter"
PACKAGE_FLAT = "Flat"
PACKAGE_PARCEL = "Parcel"

LABEL_SIZES = ("4x6", "7x3", "6x4")
LABEL_FORMATS = ("PDF", "PNG")

SIGNATURE = "SIGNATURE"
NO_SIGNATURE = "NO_SIGNATURE"


@dataclass(frozen=True)
class RawOrder:
    """One line of a TCGplayer shipping export."""

    order_number: str
    first_name: str
    last_name: str
    address1: str
    address2: str
    city: str
    state: str
    postal_code: str
    country: str
    shipping_method: str
    item_count: int
    value_of_products: Decimal


@dataclass(frozen=True)
class Address:
    """A recipient or sender address in the shape EasyPost imports."""

    name: str
    street1: str
    city: str
    state: str
    zip: str
    country: str
    street2: str | None = None
    company: str | None = None
    phone: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class MergedOrder:
    """All orders shipping to one address, folded into a single record.

    The identity and address fields come from the first order seen at the
    address; ``item_count`` and ``value_of_products`` are totals.
    """

    order_number: str
    first_name: str
    last_name: str
    address1: str
    address2: str
    city: str
    state: str
    postal_code: str
    country: str
    shipping_method: str
    item_count: int
    value_of_products: Decimal


@dataclass(frozen=True)
class PackageConfig:
    """Dimensions, weights and limits for one mailer profile.

    Weights are in ounces and dimensions in inches. ``max_item_count`` and
    ``max_value`` are ``None`` for the parcel profile, which takes whatever
    overflows the letter and flat profiles.
    """

    label_size: str
    base_weight: Decimal
    per_item_weight: Decimal
    length: float
    width: float
    height: float
    max_item_count: int | None = None
    max_value: Decimal | None = None


@dataclass(frozen=True)
class ShippingConfig:
    from_address: Address
    letter: PackageConfig
    flat: PackageConfig
    parcel: PackageConfig
    label_format: str = "PDF"


@dataclass(frozen=True)
class Parcel:
    length: float
    width: float
    height: float
    weight: Decimal
    predefined_package: str


@dataclass(frozen=True)
class ShipmentOptions:
    label_format: str
    label_size: str
    invoice_number: str
    delivery_confirmation: str


@dataclass(frozen=True)
class Shipment:
    """A single EasyPost shipment ready for bulk label purchase."""

    reference: str
    to_address: Address
    from_address: Address
    parcel: Parcel
    service: str
    options: ShipmentOptions
    carrier: str = CARRIER
