"""Serializable rendering of invoice templates to HTML and CSS."""

from __future__ import annotations

import html
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..domain.globals import LINE_TOTAL_FIELD
from ..domain.layout import (
    GRID_GAP,
    LIST_COLUMNS,
    ROW_MIN_HEIGHT,
    Placement,
    SectionGeometry,
)
from ..domain.values import DEFAULT_DATE_FORMAT
from ..template.model import InvoiceTemplate, Section
from .engine import TemplateRenderer, render_metadata, style_to_string, utc_now


@dataclass(frozen=True)
class RenderedTemplate:
    """HTML markup and style sheet of a rendered invoice."""

    html: str
    styles: str
    metadata: dict[str, str]

    def to_document(self, title: str = "Invoice") -> str:
        """Wrap the markup and styles in a standalone HTML document."""
        return (
            "<!DOCTYPE html>\n"
            '<html>\n<head>\n<meta charset="utf-8">\n'
            f"<title>{html.escape(title)}</title>\n"
            f"<style>\n{self.styles}\n</style>\n"
            f"</head>\n<body>\n{self.html}\n</body>\n</html>\n"
        )


def _grid_area(placement: Placement) -> str:
    return (
        f"grid-column: {placement.column} / span {placement.column_span}; "
        f"grid-row: {placement.row} / span {placement.row_span};"
    )


class HtmlEmitter:
    """Emit template elements as HTML fragments."""

    def field(self, text: str, placement: Placement, index: int) -> str:
        return (
            f'<div data-key="{index}" style="{_grid_area(placement)}">'
            f"{html.escape(text)}</div>"
        )

    def static_text(
        self,
        text: str,
        placement: Placement,
        style: Mapping[str, str | int | float],
        index: int,
    ) -> str:
        inline = _grid_area(placement)
        if style:
            inline += " " + style_to_string(style)
        return (
            f'<div data-key="{index}" style="{html.escape(inline)}">'
            f"{html.escape(text)}</div>"
        )

    def list_field(self, text: str, column: int, column_span: int, key: str) -> str:
        return (
            f'<div data-key="{key}" style="grid-column: {column} / span '
            f'{column_span}; grid-row: auto; padding: 5px 0;">'
            f"{html.escape(text)}</div>"
        )

    def _aggregation(self, aggregation: str | None) -> str:
        if aggregation is None:
            return ""
        return f'<span class="aggregation"> ({html.escape(aggregation)})</span>'

    def simple_list(
        self, cells: list[str], aggregation: str | None, index: int
    ) -> str:
        footer = (
            f'<div class="aggregationRow" style="grid-column: 1 / -1;">'
            f"{self._aggregation(aggregation)}</div>"
            if aggregation is not None
            else ""
        )
        return (
            f'<div data-key="{index}" style="grid-column: 1 / -1; display: grid; '
            f"grid-template-columns: repeat({LIST_COLUMNS}, 1fr); "
            f'gap: {GRID_GAP};">{"".join(cells)}{footer}</div>'
        )

    def group(self, label: str, aggregation: str | None, cells: list[str]) -> str:
        return (
            f'<div class="groupHeader">{html.escape(label)}'
            f"{self._aggregation(aggregation)}</div>{''.join(cells)}"
        )

    def grouped_list(self, groups: list[str], index: int) -> str:
        return "".join(groups)

    def missing_list(self, name: str, index: int) -> str:
        return f'<div data-key="{index}">No data for list: {html.escape(name)}</div>'

    def conditional(self, children: list[str], index: int) -> str:
        return f'<div data-key="{index}">{"".join(children)}</div>'

    def filler(self, index: int) -> str:
        return (
            f'<div data-key="empty-row-{index}" '
            'style="grid-column: 1 / -1; height: 12px;"></div>'
        )

    def empty(self) -> str:
        return ""

    def section(
        self,
        section: Section,
        index: int,
        geometry: SectionGeometry,
        children: list[str],
    ) -> str:
        grid_style = style_to_string(
            {
                "display": "grid",
                "grid-template-columns": f"repeat({geometry.columns}, 1fr)",
                "grid-template-rows": (
                    f"repeat({geometry.actual_rows}, minmax({ROW_MIN_HEIGHT}, auto))"
                ),
                "gap": GRID_GAP,
            }
        )
        section_type = html.escape(section.type)
        return (
            f"<!-- Section {index + 1}: {section_type} -->\n"
            f'<div id="section-{section_type}" '
            f'class="invoice-section {section_type}-section" '
            f'style="{grid_style}">{"".join(children)}</div>'
        )


def render_html(
    template: InvoiceTemplate,
    invoice_data: Any,
    date_format: str = DEFAULT_DATE_FORMAT,
    line_total_field: str = LINE_TOTAL_FIELD,
    clock: Callable[[], str] = utc_now,
) -> RenderedTemplate:
    """Render a template to HTML markup and a style sheet."""
    renderer = TemplateRenderer(HtmlEmitter(), date_format, line_total_field)
    result = renderer.render(template, invoice_data)

    return RenderedTemplate(
        html="\n".join(result.sections),
        styles=result.styles,
        metadata=render_metadata(template, invoice_data, clock),
    )
