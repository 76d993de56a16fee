"""ZIP code normalization."""

import re

from tcg_easypost.errors import InvalidFormatError

_NON_ZIP_CHARS = re.compile(r"[^0-9-]")


def normalize_zip_code(zip_code: str | int | float) -> str:
    """Return *zip_code* in ``XXXXX-YYYY`` form.

    Everything except digits and a dash is stripped, then the dash is
    dropped. Short codes are left-padded to five digits (spreadsheets eat
    leading zeros) and right-padded to nine, so a plain five digit ZIP comes
    back with a ``-0000`` suffix.

    Whole-number floats, as spreadsheet readers produce, are treated as
    integers so ``2134.0`` becomes ``02134-0000``.

    Raises:
        InvalidFormatError: If more than nine digits remain, or *zip_code*
            is a float with a fractional part.
    """
    if isinstance(zip_code, float):
        if not zip_code.is_integer():
            raise InvalidFormatError(f"Invalid ZIP code format: {zip_code!r}")
        zip_code = int(zip_code)

    zip_str = _NON_ZIP_CHARS.sub("", str(zip_code)).replace("-", "", 1)

    if len(zip_str) < 5:
        zip_str = zip_str.rjust(5, "0")
    if len(zip_str) < 9:
        zip_str = zip_str.ljust(9, "0")

    if len(zip_str) != 9 or not zip_str.isdigit():
        raise InvalidFormatError(f"Invalid ZIP code format: {zip_code!r}")

    return f"{zip_str[:5]}-{zip_str[5:]}"
