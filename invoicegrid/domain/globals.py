"""Global calculations evaluated once per render."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from ..template.model import GlobalCalculation
from .values import lookup_path, to_number

logger = logging.getLogger(__name__)

LINE_TOTAL_FIELD = "total_price"


def _resolve_source(field: str, invoice_data: Any, default_amount_field: str):
    """Find the array a calculation runs over and the amount field to sum."""
    items = lookup_path(invoice_data, field)
    if isinstance(items, list):
        return items, default_amount_field

    if "." in field:
        list_path, amount_field = field.rsplit(".", 1)
        items = lookup_path(invoice_data, list_path)
        if isinstance(items, list):
            return items, amount_field

    return None, default_amount_field


def calculate_global(
    calculation: GlobalCalculation,
    invoice_data: Any,
    line_total_field: str = LINE_TOTAL_FIELD,
) -> int | Decimal:
    """Compute the value of a single global calculation."""
    expression = calculation.expression
    items, amount_field = _resolve_source(
        expression.field, invoice_data, line_total_field
    )

    if items is None:
        logger.debug(
            f"Global '{calculation.name}' has no array at '{expression.field}'."
        )
        return 0

    if expression.operation == "sum":
        total: int | Decimal = 0
        for item in items:
            amount = item.get(amount_field) if isinstance(item, Mapping) else None
            total += to_number(amount)
        return total
    if expression.operation == "count":
        return len(items)

    logger.warning(
        f"Unsupported operation '{expression.operation}' "
        f"for global '{calculation.name}'."
    )
    return 0


def compute_globals(
    calculations: Iterable[GlobalCalculation],
    invoice_data: Any,
    line_total_field: str = LINE_TOTAL_FIELD,
) -> dict[str, int | Decimal]:
    """Compute all global calculations, keyed by name."""
    global_values: dict[str, int | Decimal] = {}
    for calculation in calculations:
        if calculation.type != "calculation":
            continue
        global_values[calculation.name] = calculate_global(
            calculation, invoice_data, line_total_field
        )
    return global_values
