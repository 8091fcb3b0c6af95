"""Interactive rendering of invoice templates into a node tree."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..domain.globals import LINE_TOTAL_FIELD
from ..domain.layout import LIST_COLUMNS, Placement, SectionGeometry
from ..domain.values import DEFAULT_DATE_FORMAT
from ..template.model import InvoiceTemplate, Section
from .engine import TemplateRenderer, render_metadata, utc_now


@dataclass(frozen=True)
class Node:
    """A renderable node handed to the hosting UI."""

    kind: str
    key: str = ""
    text: str | None = None
    placement: Placement | None = None
    style: Mapping[str, str | int | float] = field(default_factory=dict)
    attrs: Mapping[str, Any] = field(default_factory=dict)
    children: tuple[Node, ...] = ()

    def walk(self) -> Iterator[Node]:
        """Iterate over this node and all its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, kind: str) -> list[Node]:
        """Return all nodes of a kind in this subtree."""
        return [node for node in self.walk() if node.kind == kind]

    def texts(self) -> list[str]:
        """Return every text in this subtree in document order."""
        return [node.text for node in self.walk() if node.text is not None]


EMPTY = Node("empty")


@dataclass(frozen=True)
class RenderedTree:
    """Node tree and style sheet of a rendered invoice."""

    sections: list[Node]
    styles: str
    metadata: dict[str, str]

    def texts(self) -> list[str]:
        return [text for section in self.sections for text in section.texts()]


class TreeEmitter:
    """Emit template elements as :class:`Node` objects."""

    def field(self, text: str, placement: Placement, index: int) -> Node:
        return Node("field", key=str(index), text=text, placement=placement)

    def static_text(
        self,
        text: str,
        placement: Placement,
        style: Mapping[str, str | int | float],
        index: int,
    ) -> Node:
        return Node(
            "static-text",
            key=str(index),
            text=text,
            placement=placement,
            style=dict(style),
        )

    def list_field(self, text: str, column: int, column_span: int, key: str) -> Node:
        return Node(
            "list-field",
            key=key,
            text=text,
            attrs={"column": column, "column_span": column_span},
        )

    def simple_list(
        self, cells: list[Node], aggregation: str | None, index: int
    ) -> Node:
        children = list(cells)
        if aggregation is not None:
            children.append(Node("aggregation", text=f" ({aggregation})"))
        return Node(
            "list",
            key=str(index),
            attrs={"columns": LIST_COLUMNS},
            children=tuple(children),
        )

    def group(self, label: str, aggregation: str | None, cells: list[Node]) -> Node:
        header_children = (
            (Node("aggregation", text=f" ({aggregation})"),)
            if aggregation is not None
            else ()
        )
        header = Node("group-header", text=label, children=header_children)
        return Node("group", key=label, children=(header, *cells))

    def grouped_list(self, groups: list[Node], index: int) -> Node:
        return Node("grouped-list", key=str(index), children=tuple(groups))

    def missing_list(self, name: str, index: int) -> Node:
        return Node("missing-list", key=str(index), text=f"No data for list: {name}")

    def conditional(self, children: list[Node], index: int) -> Node:
        return Node("conditional", key=str(index), children=tuple(children))

    def filler(self, index: int) -> Node:
        return Node("filler", key=f"empty-row-{index}")

    def empty(self) -> Node:
        return EMPTY

    def section(
        self,
        section: Section,
        index: int,
        geometry: SectionGeometry,
        children: list[Node],
    ) -> Node:
        return Node(
            "section",
            key=f"section-{section.type}",
            attrs={
                "type": section.type,
                "index": index,
                "columns": geometry.columns,
                "rows": geometry.actual_rows,
                "content_rows": geometry.content_rows,
            },
            children=tuple(children),
        )


def render_tree(
    template: InvoiceTemplate,
    invoice_data: Any,
    date_format: str = DEFAULT_DATE_FORMAT,
    line_total_field: str = LINE_TOTAL_FIELD,
    clock: Callable[[], str] = utc_now,
) -> RenderedTree:
    """Render a template to a tree of nodes."""
    renderer = TemplateRenderer(TreeEmitter(), date_format, line_total_field)
    result = renderer.render(template, invoice_data)

    return RenderedTree(
        sections=result.sections,
        styles=result.styles,
        metadata=render_metadata(template, invoice_data, clock),
    )
