"""Grid geometry for template sections."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..template.model import ListElement, Position, Section, Span
from .grouping import group_items
from .values import lookup_path

logger = logging.getLogger(__name__)

LIST_COLUMNS = 12
ROW_MIN_HEIGHT = "12px"
GRID_GAP = "8px"


@dataclass(frozen=True)
class Placement:
    """Resolved grid placement of an element."""

    column: int = 1
    row: int = 1
    column_span: int = 1
    row_span: int = 1

    @classmethod
    def of(cls, position: Position | None, span: Span | None) -> "Placement":
        """Build a placement, defaulting to column 1, row 1 and a 1x1 span."""
        return cls(
            column=position.column if position else 1,
            row=position.row if position else 1,
            column_span=span.column_span if span else 1,
            row_span=span.row_span if span else 1,
        )


@dataclass(frozen=True)
class SectionGeometry:
    """Row accounting for a rendered section."""

    columns: int
    content_rows: int
    actual_rows: int
    filler_rows: int


def list_items(element: ListElement, invoice_data: Any) -> list[Any] | None:
    """Return the array a list element iterates over, or None."""
    items = lookup_path(invoice_data, element.name)
    return items if isinstance(items, list) else None


def item_row_extent(element: ListElement) -> int:
    """Number of rows a single item of an ungrouped list occupies."""
    extent = 1
    for child in element.content:
        position = getattr(child, "position", None)
        if position is None:
            continue
        span = getattr(child, "span", None)
        extent = max(extent, position.row + (span.row_span if span else 1) - 1)
    return extent


def calculate_list_rows(element: ListElement, invoice_data: Any) -> int:
    """Estimate the number of rows a list needs."""
    items = list_items(element, invoice_data)
    if items is None:
        return 0

    base_rows = 1
    if element.aggregation:
        base_rows += 1

    if element.group_by:
        groups = group_items(items, element.group_by)
        return (base_rows - 1) + sum(1 + len(group) for group in groups.values())

    return base_rows + len(items) * item_row_extent(element)


def calculate_content_rows(content: Sequence[Any], invoice_data: Any) -> int:
    """Number of rows covered by a section's elements.

    Elements occupy overlapping row ranges, so this is the largest extent of any
    single element rather than a sum.
    """
    max_row = 0
    for element in content:
        extent = 1
        position = getattr(element, "position", None)
        if position is not None:
            span = getattr(element, "span", None)
            extent = position.row + (span.row_span if span else 1)
        elif isinstance(element, ListElement):
            extent = calculate_list_rows(element, invoice_data)
        max_row = max(max_row, extent, 1)
    return max_row


def section_geometry(section: Section, invoice_data: Any) -> SectionGeometry:
    """Compute the rows of a section, respecting its minimum row count.

    Summary sections size exactly to their content and never get filler rows.
    """
    content_rows = calculate_content_rows(section.content, invoice_data)
    actual_rows = max(section.grid.min_rows, content_rows)
    filler_rows = 0 if section.type == "summary" else actual_rows - content_rows
    return SectionGeometry(
        columns=section.grid.columns,
        content_rows=content_rows,
        actual_rows=actual_rows,
        filler_rows=filler_rows,
    )
