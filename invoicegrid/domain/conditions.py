"""Evaluation of conditional template elements.

Comparisons are loose: a numeric string and a number compare by their numeric
value, booleans compare as 0/1, and two strings compare lexically.
"""

from __future__ import annotations

import datetime
import logging
import math
import operator
from decimal import Decimal, InvalidOperation
from typing import Any

from ..template.model import Condition
from .values import MISSING, lookup_path

logger = logging.getLogger(__name__)

_NUMERIC = (int, float, Decimal)

_RELATIONAL = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


def _coerce_number(value: Any) -> float:
    """Convert a value to a float, returning NaN when it is not numeric."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, _NUMERIC):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(Decimal(text))
        except InvalidOperation:
            return math.nan
    return math.nan


def loose_equals(left: Any, right: Any) -> bool:
    """Compare two values for equality with type coercion."""
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        if isinstance(left, bool) and isinstance(right, bool):
            return left == right
        return _coerce_number(left) == _coerce_number(right)
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if isinstance(left, _NUMERIC) and isinstance(right, (str, *_NUMERIC)):
        return _coerce_number(left) == _coerce_number(right)
    if isinstance(right, _NUMERIC) and isinstance(left, str):
        return _coerce_number(left) == _coerce_number(right)
    return left == right


def loose_compare(left: Any, op: str, right: Any) -> bool:
    """Apply a relational operator with type coercion."""
    compare = _RELATIONAL[op]
    if isinstance(left, str) and isinstance(right, str):
        return compare(left, right)
    if isinstance(left, datetime.date) and isinstance(right, datetime.date):
        return compare(left, right)
    a, b = _coerce_number(left), _coerce_number(right)
    if math.isnan(a) or math.isnan(b):
        return False
    return compare(a, b)


def evaluate_condition(condition: Condition, invoice_data: Any) -> bool | None:
    """Evaluate a condition against invoice data.

    Returns ``None`` when the field is absent from the data, in which case the
    conditional content is not rendered at all.
    """
    value = lookup_path(invoice_data, condition.field)
    if value is MISSING:
        logger.debug(f"Condition field '{condition.field}' not found in data.")
        return None

    if condition.op == "==":
        return loose_equals(value, condition.value)
    if condition.op == "!=":
        return not loose_equals(value, condition.value)
    return loose_compare(value, condition.op, condition.value)
