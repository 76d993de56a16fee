"""Errors raised while converting an order export.

All of them are ``ValueError`` subclasses: each one means the input data or
the saved settings are wrong, never that the operation might succeed on a
retry.
"""


class InvalidFormatError(ValueError):
    """A postal code cannot be normalized to ZIP+4."""


class MalformedRowError(ValueError):
    """An order row is missing a required field or has an unreadable value."""

    def __init__(self, order_number: str, field: str, detail: str):
        self.order_number = order_number
        self.field = field
        super().__init__(f"Order {order_number or '<unknown>'}: {field} {detail}")


class SettingsError(ValueError):
    """Saved shipping settings cannot be read or contain invalid values."""
