"""Tests for invoicegrid.pdf."""

from conftest import fixed_clock, make_template

from invoicegrid.pdf import PDF, _hex_to_rgb, render_pdf
from invoicegrid.render.tree import render_tree


def _rendered(invoice_data):
    """Render a template with styled text, a grouped list and a conditional."""
    template = make_template(
        [
            {
                "type": "header",
                "grid": {"columns": 12, "minRows": 3},
                "content": [
                    {
                        "type": "staticText",
                        "id": "title",
                        "content": "Invoice €",
                        "position": {"column": 1, "row": 1},
                        "span": {"columnSpan": 6, "rowSpan": 1},
                    },
                    {
                        "type": "style",
                        "elements": ["text:title"],
                        "props": {
                            "font-weight": "bold",
                            "font-size": "14px",
                            "color": "#c00",
                            "text-align": "right",
                        },
                    },
                ],
            },
            {
                "type": "items",
                "grid": {"columns": 12, "minRows": 1},
                "content": [
                    {
                        "type": "list",
                        "name": "items",
                        "groupBy": "category",
                        "aggregation": "sum",
                        "aggregationField": "total_price",
                        "content": [
                            {"type": "field", "name": "description"},
                            {
                                "type": "field",
                                "name": "total_price",
                                "position": {"column": 10, "row": 1},
                            },
                        ],
                    },
                    {"type": "list", "name": "missing", "content": []},
                ],
            },
            {
                "type": "summary",
                "grid": {"columns": 4, "minRows": 1},
                "content": [
                    {
                        "type": "conditional",
                        "condition": {"field": "status", "op": "==", "value": "draft"},
                        "content": [{"type": "staticText", "content": "DRAFT"}],
                    }
                ],
            },
        ]
    )
    return render_tree(template, invoice_data, clock=fixed_clock)


class TestRenderPdf:
    """Test suite for PDF output."""

    def test_single_invoice(self, invoice_data):
        """Test that a single invoice produces a PDF document."""
        pdfbytes = render_pdf([("INV-1", _rendered(invoice_data))], title="INV-1")
        assert bytes(pdfbytes[:5]) == b"%PDF-"

    def test_combined_invoices(self, invoice_data):
        """Test that several invoices go on separate pages."""
        rendered = _rendered(invoice_data)
        pdf = PDF(row_height=5)
        pdf.add_invoice(rendered, title="INV-1", create_toc_entry=True)
        pdf.add_invoice(rendered, title="INV-2", create_toc_entry=True)
        assert pdf.page_no() == 2
        assert bytes(pdf.output()[:5]) == b"%PDF-"

    def test_hex_colors(self):
        """Test parsing of hex colors."""
        assert _hex_to_rgb("#c00") == (204, 0, 0)
        assert _hex_to_rgb("#00ff7f") == (0, 255, 127)
        assert _hex_to_rgb("red") is None
