"""Worker functions for invoice rendering (suitable for ProcessPool)."""

from __future__ import annotations

from typing import Any
import logging
from ..config.model import Config
from ..pdf import render_pdf
from ..render.html import render_html
from ..render.tree import RenderedTree, render_tree
from ..template.model import InvoiceTemplate

logger = logging.getLogger(__name__)


def invoice_number(invoice_data: dict[str, Any]) -> str:
    """Return the identifier used to name an invoice's output."""
    number = invoice_data.get("invoice_number") or invoice_data.get("invoice_id")
    if not number:
        raise ValueError("Invoice has neither an invoice number nor an id.")
    return str(number)


def generate_invoice_html(
    config: Config, template: InvoiceTemplate, invoice_data: dict[str, Any]
) -> tuple[str, str]:
    """Render a single invoice to a standalone HTML document."""
    number = invoice_number(invoice_data)
    logger.debug(f"Rendering HTML for invoice: {number}")

    rendered = render_html(
        template,
        invoice_data,
        date_format=config.render.date_format,
        line_total_field=config.render.line_total_field,
    )
    return number, rendered.to_document(title=f"Invoice {number}")


def generate_invoice_tree(
    config: Config, template: InvoiceTemplate, invoice_data: dict[str, Any]
) -> tuple[str, RenderedTree]:
    """Render a single invoice to a node tree."""
    number = invoice_number(invoice_data)
    logger.debug(f"Rendering tree for invoice: {number}")

    rendered = render_tree(
        template,
        invoice_data,
        date_format=config.render.date_format,
        line_total_field=config.render.line_total_field,
    )
    return number, rendered


def generate_invoice_pdf(
    config: Config, template: InvoiceTemplate, invoice_data: dict[str, Any]
) -> tuple[str, bytearray]:
    """Render a single invoice PDF."""
    number, rendered = generate_invoice_tree(config, template, invoice_data)
    pdfbytes = render_pdf(
        [(number, rendered)],
        format=config.pdf.format,
        row_height=config.pdf.row_height,
        title=f"Invoice {number}",
    )
    return number, pdfbytes
