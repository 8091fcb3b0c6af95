"""Grouping and aggregation of list items."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from .values import format_number, to_number

UNCATEGORIZED = "Uncategorized"


def group_key(item: Any, group_by: str) -> str:
    """Return the display key of the group an item belongs to."""
    value = item.get(group_by) if isinstance(item, Mapping) else None
    if not value:
        return UNCATEGORIZED
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true"
    if isinstance(value, (int, float, Decimal)):
        return format_number(value)
    return str(value)


def group_items(items: Sequence[Any], group_by: str) -> dict[str, list[Any]]:
    """Partition items by a key, keeping groups in first-seen order.

    Items with a missing or falsy key fall into the ``Uncategorized`` group.
    """
    groups: dict[str, list[Any]] = {}
    for item in items:
        groups.setdefault(group_key(item, group_by), []).append(item)
    return groups


def aggregate(
    items: Sequence[Any], aggregation: str, field: str | None
) -> int | float | Decimal:
    """Aggregate a group of items.

    ``sum`` and ``avg`` treat missing or non-numeric values as zero; ``avg``
    divides the raw sum once by the item count, in floating point.
    """
    if aggregation == "count":
        return len(items)

    total: int | Decimal = 0
    for item in items:
        value = item.get(field) if field and isinstance(item, Mapping) else None
        total += to_number(value)

    if aggregation == "sum":
        return total
    if aggregation == "avg":
        if not items:
            return 0
        return float(total) / len(items)

    raise ValueError(f"Unknown aggregation: {aggregation}")
