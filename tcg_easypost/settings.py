"""Shipping settings: defaults, (de)serialization and persistence."""

import logging
from decimal import Decimal, InvalidOperation

from tcg_easypost.errors import SettingsError
from tcg_easypost.models import (
    LABEL_FORMATS,
    LABEL_SIZES,
    Address,
    PackageConfig,
    ShippingConfig,
)
from tcg_easypost.settings_store import SettingsStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = "shippingSettings"

# Packing material weights in ounces.
SLEEVED_CARD_OZ = Decimal("0.09")
NO_10_ENVELOPE_OZ = Decimal("0.20")
TEAM_BAG_OZ = Decimal("0.03")
PACKING_SLIP_OZ = Decimal("0.08")
BUBBLE_MAILER_5X7_OZ = Decimal("0.30")
BUBBLE_MAILER_7X9_OZ = Decimal("0.45")
RACK_CARD_OZ = Decimal("0.18")
BINDER_PAGE_OZ = Decimal("0.14")
LETTER_PAPER_OZ = Decimal("0.20")

DEFAULT_PER_ITEM_WEIGHT = SLEEVED_CARD_OZ
DEFAULT_LETTER_BASE_WEIGHT = NO_10_ENVELOPE_OZ + RACK_CARD_OZ + BINDER_PAGE_OZ + PACKING_SLIP_OZ
DEFAULT_FLAT_BASE_WEIGHT = BUBBLE_MAILER_5X7_OZ + TEAM_BAG_OZ * 2 + PACKING_SLIP_OZ
DEFAULT_PARCEL_BASE_WEIGHT = (
    BUBBLE_MAILER_7X9_OZ + TEAM_BAG_OZ * 4 + LETTER_PAPER_OZ + PACKING_SLIP_OZ
)
DEFAULT_MAX_LETTER_ITEM_COUNT = 24
DEFAULT_MAX_FLAT_ITEM_COUNT = 100
DEFAULT_MAX_LETTER_VALUE = Decimal("50")
DEFAULT_MAX_FLAT_VALUE = Decimal("50")

_ADDRESS_KEYS = (
    "name", "company", "phone", "email",
    "street1", "street2", "city", "state", "zip", "country",
)


def default_shipping_config() -> ShippingConfig:
    """Return the settings used when nothing has been saved yet."""
    return ShippingConfig(
        from_address=Address(name="", street1="", city="", state="", zip="", country="US"),
        letter=PackageConfig(
            label_size="7x3",
            base_weight=DEFAULT_LETTER_BASE_WEIGHT,
            per_item_weight=DEFAULT_PER_ITEM_WEIGHT,
            max_item_count=DEFAULT_MAX_LETTER_ITEM_COUNT,
            max_value=DEFAULT_MAX_LETTER_VALUE,
            length=9.5,
            width=4.125,
            height=0.25,
        ),
        flat=PackageConfig(
            label_size="4x6",
            base_weight=DEFAULT_FLAT_BASE_WEIGHT,
            per_item_weight=DEFAULT_PER_ITEM_WEIGHT,
            max_item_count=DEFAULT_MAX_FLAT_ITEM_COUNT,
            max_value=DEFAULT_MAX_FLAT_VALUE,
            length=5.0,
            width=7.0,
            height=0.75,
        ),
        parcel=PackageConfig(
            label_size="4x6",
            base_weight=DEFAULT_PARCEL_BASE_WEIGHT,
            per_item_weight=DEFAULT_PER_ITEM_WEIGHT,
            length=7.0,
            width=9.0,
            height=0.75,
        ),
        label_format="PDF",
    )


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _decimal(section: str, key: str, value) -> Decimal:
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise SettingsError(f"{section}.{key} must be a number, got {value!r}") from None
    if not result.is_finite():
        raise SettingsError(f"{section}.{key} must be a number, got {value!r}")
    return result


def _int(section: str, key: str, value) -> int:
    result = _decimal(section, key, value)
    if result != result.to_integral_value():
        raise SettingsError(f"{section}.{key} must be a whole number, got {value!r}")
    return int(result)


def _choice(section: str, key: str, value, choices: tuple[str, ...]) -> str:
    if value not in choices:
        raise SettingsError(f"{section}.{key} must be one of {', '.join(choices)}, got {value!r}")
    return value


def _section(data: dict, key: str) -> dict:
    value = data[key]
    if not isinstance(value, dict):
        raise SettingsError(f"{key} must be an object, got {type(value).__name__}")
    return value


def _package_from_dict(section: str, data: dict, with_limits: bool) -> PackageConfig:
    return PackageConfig(
        label_size=_choice(section, "labelSize", data.get("labelSize"), LABEL_SIZES),
        base_weight=_decimal(section, "baseWeight", data.get("baseWeight")),
        per_item_weight=_decimal(section, "perItemWeight", data.get("perItemWeight")),
        length=float(_decimal(section, "length", data.get("length"))),
        width=float(_decimal(section, "width", data.get("width"))),
        height=float(_decimal(section, "height", data.get("height"))),
        max_item_count=_int(section, "maxItemCount", data.get("maxItemCount")) if with_limits else None,
        max_value=_decimal(section, "maxValue", data.get("maxValue")) if with_limits else None,
    )


def _address_from_dict(data: dict) -> Address:
    def text(key):
        value = data.get(key)
        return "" if value is None else str(value)

    def optional(key):
        value = data.get(key)
        return str(value) if value else None

    return Address(
        name=text("name"),
        company=optional("company"),
        phone=optional("phone"),
        email=optional("email"),
        street1=text("street1"),
        street2=optional("street2"),
        city=text("city"),
        state=text("state"),
        zip=text("zip"),
        country=text("country"),
    )


def shipping_config_to_dict(config: ShippingConfig) -> dict:
    """Serialize *config* into the JSON layout the settings store holds."""

    def package(p: PackageConfig) -> dict:
        data = {
            "labelSize": p.label_size,
            "baseWeight": float(p.base_weight),
            "perItemWeight": float(p.per_item_weight),
            "length": p.length,
            "width": p.width,
            "height": p.height,
        }
        if p.max_item_count is not None:
            data["maxItemCount"] = p.max_item_count
        if p.max_value is not None:
            data["maxValue"] = float(p.max_value)
        return data

    address = {
        key: getattr(config.from_address, key)
        for key in _ADDRESS_KEYS
        if getattr(config.from_address, key) is not None
    }
    return {
        "fromAddress": address,
        "letter": package(config.letter),
        "flat": package(config.flat),
        "parcel": package(config.parcel),
        "labelFormat": config.label_format,
    }


def shipping_config_from_dict(data: dict) -> ShippingConfig:
    """Build a ShippingConfig from saved settings.

    Saved values are laid over the defaults, so a partial dict only changes
    what it names. Numbers may be given as strings.

    Raises:
        SettingsError: If a value has the wrong type or is not an allowed choice.
    """
    if not isinstance(data, dict):
        raise SettingsError(f"Shipping settings must be an object, got {type(data).__name__}")

    merged = _deep_merge(shipping_config_to_dict(default_shipping_config()), data)
    return ShippingConfig(
        from_address=_address_from_dict(_section(merged, "fromAddress")),
        letter=_package_from_dict("letter", _section(merged, "letter"), with_limits=True),
        flat=_package_from_dict("flat", _section(merged, "flat"), with_limits=True),
        parcel=_package_from_dict("parcel", _section(merged, "parcel"), with_limits=False),
        label_format=_choice("settings", "labelFormat", merged["labelFormat"], LABEL_FORMATS),
    )


def load_shipping_config(store: SettingsStore) -> ShippingConfig:
    """Return the saved shipping settings, or the defaults if none are saved."""
    data = store.get(SETTINGS_KEY)
    if data is None:
        logger.info("No saved shipping settings, using defaults")
        return default_shipping_config()
    return shipping_config_from_dict(data)


def save_shipping_config(store: SettingsStore, config: ShippingConfig) -> None:
    store.set(SETTINGS_KEY, shipping_config_to_dict(config))
