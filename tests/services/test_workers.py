"""Tests for invoicegrid.services.workers."""

import pytest
from conftest import make_template

from invoicegrid.config.model import Config
from invoicegrid.services.workers import (
    generate_invoice_html,
    generate_invoice_pdf,
    invoice_number,
)


@pytest.fixture
def config(tmp_path) -> Config:
    """Create a configuration with a custom date format."""
    (tmp_path / "template.json").write_text("{}")
    (tmp_path / "invoices.xlsx").write_bytes(b"")
    return Config.model_validate(
        {
            "template": {"path": tmp_path / "template.json"},
            "render": {"date-format": "%Y/%m/%d"},
            "excel": {"filepath": tmp_path / "invoices.xlsx"},
            "output": {"all": {"path": "{NUMBER}.pdf", "type": "pdf"}},
        }
    )


@pytest.fixture
def template():
    """Create a template showing the invoice date."""
    return make_template(
        [
            {
                "type": "header",
                "grid": {"columns": 12, "minRows": 2},
                "content": [
                    {
                        "type": "field",
                        "name": "invoice_date",
                        "position": {"column": 1, "row": 1},
                    }
                ],
            }
        ]
    )


class TestInvoiceNumber:
    """Test suite for the `invoice_number` function."""

    def test_prefers_number(self):
        """Test that the invoice number wins over the id."""
        assert invoice_number({"invoice_number": "INV-1", "invoice_id": 7}) == "INV-1"

    def test_falls_back_to_id(self):
        """Test the fallback to the invoice id."""
        assert invoice_number({"invoice_id": 7}) == "7"

    def test_missing(self):
        """Test that invoices without identifiers are rejected."""
        with pytest.raises(ValueError):
            invoice_number({})


class TestGenerateInvoice:
    """Test suite for the render workers."""

    def test_html(self, config, template, invoice_data):
        """Test that the configured date format is applied."""
        number, document = generate_invoice_html(config, template, invoice_data)
        assert number == "INV-2024-001"
        assert ">2024/01/15</div>" in document
        assert "<title>Invoice INV-2024-001</title>" in document

    def test_pdf(self, config, template, invoice_data):
        """Test that a PDF document is produced."""
        number, pdfbytes = generate_invoice_pdf(config, template, invoice_data)
        assert number == "INV-2024-001"
        assert bytes(pdfbytes[:5]) == b"%PDF-"
