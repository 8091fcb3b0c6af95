"""Shared fixtures for invoicegrid tests."""

import datetime as dt
from typing import Any

import pytest

from invoicegrid.template.model import InvoiceTemplate


def make_template(
    sections: list[dict[str, Any]],
    globals: list[dict[str, Any]] | None = None,
    template_id: str = "tpl-1",
) -> InvoiceTemplate:
    """Build a template record from plain parsed-template data."""
    return InvoiceTemplate.model_validate(
        {
            "template_id": template_id,
            "name": "Standard",
            "version": 1,
            "dsl": "",
            "parsed": {"sections": sections, "globals": globals or []},
        }
    )


def fixed_clock() -> str:
    """Return a constant render timestamp."""
    return "2024-01-01T00:00:00+00:00"


@pytest.fixture
def invoice_data() -> dict[str, Any]:
    """Invoice view model with line items in three categories."""
    return {
        "invoice_id": "inv-001",
        "invoice_number": "INV-2024-001",
        "invoice_date": dt.date(2024, 1, 15),
        "due_date": dt.date(2024, 2, 14),
        "status": "draft",
        "status_code": 200,
        "subtotal": 101,
        "total_amount": 999,
        "company": {"name": "Acme Corporation", "address": "1 Main St"},
        "items": [
            {"description": "Laptop", "category": "Hardware", "total_price": 10},
            {"description": "Support", "category": "Services", "total_price": 20},
            {"description": "Mouse", "category": "Hardware", "total_price": 30},
            {"description": "Misc", "category": None, "total_price": 5},
        ],
    }
