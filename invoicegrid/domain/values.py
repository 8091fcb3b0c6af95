"""Field lookup and display formatting for template values."""

from __future__ import annotations

import datetime
import json
import logging
import math
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
UNKNOWN_VALUE = "Unknown value"
DEFAULT_DATE_FORMAT = "%x"


class _Missing:
    """Sentinel for a path that does not resolve to a value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def lookup_path(data: Any, path: str) -> Any:
    """Walk a dotted path through nested mappings.

    Returns ``MISSING`` when a key is absent or an intermediate value is not a
    mapping. An explicit ``None`` stored in the data is returned as is.
    """
    current = data
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return MISSING
        current = current[key]
    return current


def is_missing(value: Any) -> bool:
    """Check whether a resolved value should display as not available."""
    return value is MISSING or value is None


def to_number(value: Any) -> int | Decimal:
    """Coerce a raw value to a number, falling back to zero."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, Decimal)):
        if isinstance(value, Decimal) and not value.is_finite():
            return 0
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return Decimal(repr(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = Decimal(text)
        except InvalidOperation:
            return 0
        return number if number.is_finite() else 0
    return 0


def format_number(value: int | float | Decimal) -> str:
    """Format a number the way it is displayed on an invoice."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal) and value.is_finite():
        if value == value.to_integral_value():
            return str(int(value))
        return format(value.normalize(), "f")
    return str(value)


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime.date, Decimal)):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def format_value(value: Any, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a resolved value as display text."""
    if is_missing(value):
        return NOT_AVAILABLE
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)):
        return format_number(value)
    if isinstance(value, datetime.datetime):
        return value.date().strftime(date_format)
    if isinstance(value, datetime.date):
        return value.strftime(date_format)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v, date_format) for v in value) + "]"
    if isinstance(value, Mapping):
        try:
            return json.dumps(
                dict(value), separators=(",", ":"), default=_json_default
            )
        except (TypeError, ValueError):
            logger.debug("Value could not be serialized: %r", value)
            return UNKNOWN_VALUE
    return UNKNOWN_VALUE


def resolve_value(
    field_name: str,
    invoice_data: Any,
    global_values: Mapping[str, int | float | Decimal],
    explicit_value: Any = MISSING,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Resolve a field to its display text.

    An explicit value (for example a list item attribute already looked up by
    the caller) wins. Otherwise a global with the same name takes precedence
    over the invoice data path.
    """
    if explicit_value is not MISSING:
        value = explicit_value
    elif field_name in global_values:
        value = global_values[field_name]
    else:
        value = lookup_path(invoice_data, field_name)
    return format_value(value, date_format)
