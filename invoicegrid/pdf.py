"""PDF output for rendered invoice templates."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from fpdf import FPDF

from .domain.layout import LIST_COLUMNS
from .render.tree import Node, RenderedTree

logger = logging.getLogger(__name__)

_ALIGN = {"left": "L", "center": "C", "right": "R", "justify": "J"}


def _latin1(text: str) -> str:
    """Replace characters the core PDF fonts cannot encode."""
    return text.encode("latin-1", "replace").decode("latin-1")


def _hex_to_rgb(value: str) -> tuple[int, int, int] | None:
    value = value.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    if len(value) != 6:
        return None
    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    except ValueError:
        return None


class PDF(FPDF):
    """Paint rendered invoice node trees onto PDF pages.

    Each section keeps its grid: the printable width is split into the
    section's columns and every row is ``row_height`` tall.
    """

    def __init__(
        self,
        orientation="portrait",
        unit="mm",
        format="A4",
        row_height: float = 6.0,
        font_family: str = "helvetica",
        font_size: int = 10,
    ):
        """Initialize the PDF with page and grid settings."""
        super().__init__(orientation, unit, format)
        self.row_height = row_height
        self.font_family_name = font_family
        self.font_size_default = font_size
        self.set_creator("invoicegrid")
        self.set_auto_page_break(True, margin=15)
        self.set_font(font_family, size=font_size)

    def add_invoice(
        self,
        rendered: RenderedTree,
        title: str | None = None,
        create_toc_entry: bool = False,
    ) -> None:
        """Add a rendered invoice starting on a new page."""
        self.add_page()
        if create_toc_entry and title:
            self.start_section(_latin1(title), level=0)

        for section in rendered.sections:
            self.print_section(section)

    def print_section(self, section: Node) -> None:
        """Print one section, reserving its full row count."""
        columns = section.attrs.get("columns", 1)
        rows = section.attrs.get("rows", 0)
        reserved = rows * self.row_height

        if reserved and self.will_page_break(reserved):
            self.add_page()

        top = self.get_y()
        column_width = self.epw / columns
        flow_y = top

        for child in section.children:
            flow_y = self._print_node(child, top, column_width, flow_y)

        self.set_y(max(top + reserved, flow_y))
        self.ln(2)

    def _apply_style(self, style: Mapping[str, str | int | float]) -> str:
        """Set font and color from style properties and return the alignment."""
        emphasis = ""
        if str(style.get("font-weight", "")).lower() in ("bold", "700", "800", "900"):
            emphasis += "B"
        if str(style.get("font-style", "")).lower() == "italic":
            emphasis += "I"

        size = style.get("font-size", self.font_size_default)
        try:
            size = float(str(size).removesuffix("px").removesuffix("pt"))
        except ValueError:
            size = self.font_size_default
        self.set_font(self.font_family_name, style=emphasis, size=size)

        color = style.get("color")
        rgb = _hex_to_rgb(color) if isinstance(color, str) else None
        self.set_text_color(*(rgb or (0, 0, 0)))

        return _ALIGN.get(str(style.get("text-align", "left")).lower(), "L")

    def _reset_style(self) -> None:
        self.set_font(self.font_family_name, style="", size=self.font_size_default)
        self.set_text_color(0, 0, 0)

    def _print_line(self, text: str, y: float, style: str = "") -> float:
        self.set_font(self.font_family_name, style=style, size=self.font_size_default)
        self.set_xy(self.l_margin, y)
        self.cell(self.epw, self.row_height, _latin1(text))
        self._reset_style()
        return y + self.row_height

    def _print_list_cells(self, cells: tuple[Node, ...], columns: int, y: float) -> float:
        column_width = self.epw / columns
        fields = [cell for cell in cells if cell.kind == "list-field"]
        current_item = None
        row_y = y
        for cell in fields:
            # keys are "<item>-<element>"; a new item starts a new row
            item = cell.key.split("-", 1)[0]
            if current_item is not None and item != current_item:
                row_y += self.row_height
            current_item = item
            column = cell.attrs.get("column", 1)
            span = cell.attrs.get("column_span", 1)
            self.set_xy(self.l_margin + (column - 1) * column_width, row_y)
            self.cell(column_width * span, self.row_height, _latin1(cell.text or ""))
        if fields:
            row_y += self.row_height

        for cell in cells:
            if cell.kind == "aggregation":
                row_y = self._print_line((cell.text or "").strip(), row_y, "B")
        return row_y

    def _print_node(
        self, node: Node, top: float, column_width: float, flow_y: float
    ) -> float:
        if node.kind in ("field", "static-text"):
            placement = node.placement
            x = self.l_margin + (placement.column - 1) * column_width
            y = top + (placement.row - 1) * self.row_height
            align = self._apply_style(node.style)
            self.set_xy(x, y)
            self.cell(
                column_width * placement.column_span,
                self.row_height * placement.row_span,
                _latin1(node.text or ""),
                align=align,
            )
            self._reset_style()
            return max(flow_y, y + self.row_height * placement.row_span)

        if node.kind == "list":
            return self._print_list_cells(
                node.children, node.attrs.get("columns", LIST_COLUMNS), flow_y
            )

        if node.kind == "grouped-list":
            for group in node.children:
                header, *cells = group.children
                label = "".join(header.texts())
                flow_y = self._print_line(label, flow_y, "B")
                flow_y = self._print_list_cells(tuple(cells), LIST_COLUMNS, flow_y)
            return flow_y

        if node.kind == "missing-list":
            return self._print_line(node.text or "", flow_y, "I")

        if node.kind == "conditional":
            for child in node.children:
                flow_y = self._print_node(child, top, column_width, flow_y)
            return flow_y

        return flow_y


def render_pdf(
    documents: list[tuple[str, RenderedTree]],
    format: str = "A4",
    row_height: float = 6.0,
    title: str | None = None,
) -> bytearray:
    """Render one or more invoices into a single PDF."""
    pdf = PDF(format=format, row_height=row_height)
    if title:
        pdf.set_title(title)

    for name, rendered in documents:
        logger.debug(f"Adding invoice {name} to PDF.")
        pdf.add_invoice(rendered, title=name, create_toc_entry=len(documents) > 1)

    return pdf.output()
