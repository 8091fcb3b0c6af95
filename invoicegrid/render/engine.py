"""Backend-agnostic template rendering.

The renderer walks the template AST, works out the grid geometry of every
section and hands each element to an emitter, which turns it into the target
representation (HTML markup, a node tree, ...).
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Generic, Protocol, TypeVar

from ..domain.conditions import evaluate_condition
from ..domain.globals import LINE_TOTAL_FIELD, compute_globals
from ..domain.grouping import aggregate, group_items
from ..domain.layout import Placement, SectionGeometry, list_items, section_geometry
from ..domain.values import (
    DEFAULT_DATE_FORMAT,
    format_number,
    format_value,
    lookup_path,
    resolve_value,
)
from ..template.model import (
    ConditionalElement,
    FieldElement,
    InvoiceTemplate,
    ListElement,
    Section,
    StaticTextElement,
    StyleElement,
    UnknownElement,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Emitter(Protocol[T]):
    """Output backend used by :class:`TemplateRenderer`."""

    def field(self, text: str, placement: Placement, index: int) -> T: ...

    def static_text(
        self,
        text: str,
        placement: Placement,
        style: Mapping[str, str | int | float],
        index: int,
    ) -> T: ...

    def list_field(self, text: str, column: int, column_span: int, key: str) -> T: ...

    def simple_list(
        self, cells: list[T], aggregation: str | None, index: int
    ) -> T: ...

    def group(self, label: str, aggregation: str | None, cells: list[T]) -> T: ...

    def grouped_list(self, groups: list[T], index: int) -> T: ...

    def missing_list(self, name: str, index: int) -> T: ...

    def conditional(self, children: list[T], index: int) -> T: ...

    def filler(self, index: int) -> T: ...

    def empty(self) -> T: ...

    def section(
        self,
        section: Section,
        index: int,
        geometry: SectionGeometry,
        children: list[T],
    ) -> T: ...


@dataclass(frozen=True)
class RenderResult(Generic[T]):
    """Emitted sections plus the compiled style sheet of one render call."""

    sections: list[T]
    styles: str


@dataclass(frozen=True)
class _RenderContext:
    invoice_data: Any
    global_values: Mapping[str, int | Decimal]
    styles: Sequence[StyleElement]


def iter_styles(content: Iterable[Any]) -> Iterator[StyleElement]:
    """Yield style rules in document order, including nested conditionals."""
    for element in content:
        if isinstance(element, StyleElement):
            yield element
        elif isinstance(element, ConditionalElement):
            yield from iter_styles(element.content)


def create_style_string(style: StyleElement) -> str:
    """Compile a style element into a CSS rule."""
    selector = ", ".join(style.elements)
    properties = " ".join(
        f"{key}: {_format_prop(value)};" for key, value in style.props.items()
    )
    return f"{selector} {{ {properties} }}"


def style_to_string(style: Mapping[str, str | int | float]) -> str:
    """Serialize style properties into an inline declaration list."""
    return " ".join(f"{key}: {_format_prop(value)};" for key, value in style.items())


def _format_prop(value: str | int | float) -> str:
    if isinstance(value, str):
        return value
    return format_number(value)


def find_text_style(
    text_id: str | None, styles: Iterable[StyleElement]
) -> StyleElement | None:
    """Return the first style addressing a static text element by id."""
    if not text_id:
        return None
    for style in styles:
        if f"text:{text_id}" in style.elements or text_id in style.elements:
            return style
    return None


def utc_now() -> str:
    """Return the current UTC time as an ISO-8601 timestamp."""
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def render_metadata(
    template: InvoiceTemplate, invoice_data: Any, clock: Callable[[], str]
) -> dict[str, str]:
    """Describe one render call: template, invoice and time of rendering."""
    invoice_id = (
        invoice_data.get("invoice_id") if isinstance(invoice_data, Mapping) else None
    )
    return {
        "templateId": template.template_id or "",
        "invoiceId": str(invoice_id) if invoice_id else "",
        "renderedAt": clock(),
    }


class TemplateRenderer(Generic[T]):
    """Render invoice templates through an emitter.

    A renderer holds no per-call state, so one instance can serve concurrent
    renders.
    """

    def __init__(
        self,
        emitter: Emitter[T],
        date_format: str = DEFAULT_DATE_FORMAT,
        line_total_field: str = LINE_TOTAL_FIELD,
    ):
        self.emitter = emitter
        self.date_format = date_format
        self.line_total_field = line_total_field

    def render(self, template: InvoiceTemplate, invoice_data: Any) -> RenderResult[T]:
        """Render every section of a template against invoice data.

        Raises ValueError when either the invoice data or the parsed template
        structure is missing.
        """
        if invoice_data is None:
            raise ValueError("Invoice data is required for rendering")
        if template.parsed is None:
            raise ValueError("Template parsed data is required for rendering")

        parsed = template.parsed
        global_values = compute_globals(
            parsed.globals, invoice_data, self.line_total_field
        )
        styles = [
            style
            for section in parsed.sections
            for style in iter_styles(section.content)
        ]
        context = _RenderContext(invoice_data, global_values, styles)

        logger.debug(
            f"Rendering template '{template.template_id}' "
            f"with {len(parsed.sections)} sections."
        )

        sections = [
            self.render_section(section, index, context)
            for index, section in enumerate(parsed.sections)
        ]

        return RenderResult(
            sections=sections,
            styles="\n".join(create_style_string(style) for style in styles),
        )

    def render_section(
        self, section: Section, index: int, context: _RenderContext
    ) -> T:
        """Render a section with its content and filler rows."""
        geometry = section_geometry(section, context.invoice_data)
        children = [
            self.render_element(element, i, context)
            for i, element in enumerate(section.content)
        ]
        children.extend(self.emitter.filler(i) for i in range(geometry.filler_rows))
        return self.emitter.section(section, index, geometry, children)

    def render_element(self, element: Any, index: int, context: _RenderContext) -> T:
        """Render a single element, isolating any failure to that element."""
        try:
            if isinstance(element, FieldElement):
                return self.render_field(element, index, context)
            if isinstance(element, ListElement):
                return self.render_list(element, index, context)
            if isinstance(element, ConditionalElement):
                return self.render_conditional(element, index, context)
            if isinstance(element, StaticTextElement):
                return self.render_static_text(element, index, context)
            if isinstance(element, UnknownElement):
                logger.warning(
                    f"Unknown element type '{element.type}' at index {index}."
                )
            elif not isinstance(element, StyleElement):
                logger.debug(f"Skipping element of type '{element.type}'.")
        except Exception:
            logger.exception(
                f"Failed to render {getattr(element, 'type', 'unknown')} "
                f"element at index {index}."
            )
        return self.emitter.empty()

    def render_field(
        self, element: FieldElement, index: int, context: _RenderContext
    ) -> T:
        text = resolve_value(
            element.name,
            context.invoice_data,
            context.global_values,
            date_format=self.date_format,
        )
        return self.emitter.field(
            text, Placement.of(element.position, element.span), index
        )

    def render_static_text(
        self, element: StaticTextElement, index: int, context: _RenderContext
    ) -> T:
        style = find_text_style(element.id, context.styles)
        return self.emitter.static_text(
            element.content,
            Placement.of(element.position, element.span),
            style.props if style else {},
            index,
        )

    def render_conditional(
        self, element: ConditionalElement, index: int, context: _RenderContext
    ) -> T:
        if not evaluate_condition(element.condition, context.invoice_data):
            return self.emitter.empty()
        children = [
            self.render_element(child, i, context)
            for i, child in enumerate(element.content)
        ]
        return self.emitter.conditional(children, index)

    def render_list(
        self, element: ListElement, index: int, context: _RenderContext
    ) -> T:
        items = list_items(element, context.invoice_data)
        if items is None:
            logger.warning(f"No data for list '{element.name}'.")
            return self.emitter.missing_list(element.name, index)

        if element.group_by:
            groups = [
                self.emitter.group(
                    f"{element.group_by}: {group_name}",
                    self._aggregation_text(element, group),
                    self._render_items(element, group),
                )
                for group_name, group in group_items(items, element.group_by).items()
            ]
            return self.emitter.grouped_list(groups, index)

        return self.emitter.simple_list(
            self._render_items(element, items),
            self._aggregation_text(element, items),
            index,
        )

    def _render_items(self, element: ListElement, items: Sequence[Any]) -> list[T]:
        cells: list[T] = []
        for item_index, item in enumerate(items):
            for element_index, child in enumerate(element.content):
                if not isinstance(child, FieldElement):
                    logger.warning(
                        f"Unsupported element type '{child.type}' "
                        f"in list '{element.name}'."
                    )
                    continue
                placement = Placement.of(child.position, child.span)
                cells.append(
                    self.emitter.list_field(
                        format_value(lookup_path(item, child.name), self.date_format),
                        placement.column,
                        placement.column_span,
                        f"{item_index}-{element_index}",
                    )
                )
        return cells

    def _aggregation_text(
        self, element: ListElement, items: Sequence[Any]
    ) -> str | None:
        if not element.aggregation:
            return None
        value = aggregate(items, element.aggregation, element.aggregation_field)
        return format_number(value)
