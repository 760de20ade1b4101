"""Reusable validation utilities for input sanitization and record coercion.

Two families live here. The ``validate_*`` functions are strict: they guard
the API write path and raise ``ValueError`` on bad input. The ``coerce_*``
functions are tolerant: they run when records are read back from a store and
map malformed fields to a safe default instead of raising, so a single bad
document never aborts a reconciliation run.
"""

import enum
import re
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from shopledger.utils.datetime import to_utc_naive

if TYPE_CHECKING:
    from shopledger.models.enums import OrderStatus

ZERO = Decimal("0")

# Epoch numbers above this are milliseconds (JS Date.getTime()), below it seconds
_EPOCH_MS_THRESHOLD = 100_000_000_000


def validate_currency(
    value: Decimal | float | str, max_value: Decimal = Decimal("9999999999.99")
) -> Decimal:
    """
    Validate currency input.

    Args:
        value: Currency value to validate
        max_value: Maximum allowed value (default matches NUMERIC(12, 2))

    Returns:
        Validated Decimal

    Raises:
        ValueError: If value is not a number, negative or exceeds max
    """
    try:
        decimal_value = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid currency format: {value}") from e

    if not decimal_value.is_finite():
        raise ValueError(f"Invalid currency format: {value}")

    if decimal_value < 0:
        raise ValueError("Currency value cannot be negative")

    if decimal_value > max_value:
        raise ValueError(f"Currency value exceeds maximum allowed: {max_value}")

    return decimal_value


def validate_positive_amount(value: Decimal | float | str, field_name: str = "Amount") -> Decimal:
    """Validate a transaction or payment amount: a currency value strictly above zero."""
    amount = validate_currency(value)
    if amount <= 0:
        raise ValueError(f"{field_name} must be greater than zero")
    return amount


def validate_name(
    value: str,
    field_name: str = "Name",
    max_length: int = 200,
) -> str:
    """
    Validate a customer or supplier name.

    Letters (any script), digits, spaces and the punctuation found in shop
    and hotel names (. , - ' & /) are allowed.
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    cleaned = re.sub(r"\s+", " ", value.strip())

    if len(cleaned) > max_length:
        raise ValueError(f"{field_name} cannot exceed {max_length} characters")

    if not re.match(r"^[\w\s.,\-'&/]+$", cleaned):
        raise ValueError(f"{field_name} can only contain letters, numbers, spaces and .,-'&/")

    return cleaned


def validate_phone(value: str | None) -> str | None:
    """
    Validate phone number format.

    Args:
        value: Phone number to validate

    Returns:
        Validated phone or None if empty

    Raises:
        ValueError: If format is invalid
    """
    if not value or not value.strip():
        return None

    cleaned = value.strip()

    if not re.match(r"^[0-9\s+\-()]+$", cleaned):
        raise ValueError("Phone can only contain digits, spaces, +, -, (, )")

    digits_only = re.sub(r"[^0-9]", "", cleaned)
    if len(digits_only) < 5:
        raise ValueError("Phone must contain at least 5 digits")

    return cleaned


def sanitize_html(value: str | None) -> str | None:
    """Strip HTML tags and escape what is left. Empty results become None."""
    if not value:
        return None

    cleaned = re.sub(r"<[^>]+>", "", value)
    cleaned = (
        cleaned.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )

    return cleaned.strip() if cleaned.strip() else None


def coerce_amount(value: Any) -> Decimal:
    """
    Read a monetary or quantity field from a stored record.

    Missing, non-numeric, NaN and infinite values become 0. Booleans are not
    treated as numbers. Floats go through ``str`` so 0.1 stays 0.1.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    else:
        return ZERO

    if not amount.is_finite():
        return ZERO
    return amount


def coerce_text(value: Any) -> str:
    """
    Read an id, reference or name field from a stored record.

    None becomes "", enums give their value and other scalars go through
    ``str``, so a numeric id 42 reads as "42" and a null reference reads as
    an id no record has.
    """
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        value = value.value
    return str(value).strip()


def coerce_optional_text(value: Any) -> str | None:
    """Like coerce_text, but missing or blank stays None (contacts, descriptions)."""
    return coerce_text(value) or None


def coerce_order_status(value: Any) -> "OrderStatus":
    """Only an explicit ``paid`` counts as paid; missing or unknown status is pending."""
    # models imports this module, so the enum is resolved at call time
    from shopledger.models.enums import OrderStatus

    if isinstance(value, str) and value.strip().lower() == OrderStatus.PAID.value:
        return OrderStatus.PAID
    return OrderStatus.PENDING


def coerce_date(value: Any) -> datetime | None:
    """
    Read a date field from a stored record as naive UTC.

    Accepts datetimes, dates, ISO-8601 strings, epoch seconds or milliseconds
    and Firestore-style ``{"seconds": ..., "nanoseconds": ...}`` mappings.
    Anything else, including a missing value, becomes None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return to_utc_naive(value)

    if isinstance(value, date):
        return datetime.combine(value, time.min)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return to_utc_naive(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            return None

    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if seconds is None:
            return None
        nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
        return _from_epoch(coerce_amount(seconds) + coerce_amount(nanos) / Decimal("1e9"))

    if isinstance(value, (int, float, Decimal)):
        number = coerce_amount(value)
        if abs(number) >= _EPOCH_MS_THRESHOLD:
            number = number / 1000
        return _from_epoch(number)

    return None


def _from_epoch(seconds: Decimal) -> datetime | None:
    try:
        return datetime.fromtimestamp(float(seconds), tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return None


def in_date_range(value: datetime | None, start: date | None, end: date | None) -> bool:
    """
    Inclusive date filter for date-filtered views.

    Records without a date never match a filter, but with no bounds at all
    every record matches.
    """
    if start is None and end is None:
        return True
    if value is None:
        return False
    day = value.date()
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True
