"""Configuration for the invoicegrid application."""

import datetime
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, FilePath, field_validator


class _TemplateConfig(BaseModel):
    """Configuration settings for the invoice template."""

    model_config = ConfigDict(frozen=True)

    path: FilePath
    """Path to the parsed template record, in JSON."""


class _RenderConfig(BaseModel):
    """Configuration settings for rendering values."""

    model_config = ConfigDict(frozen=True)

    date_format: str = Field(default="%x", alias="date-format")
    """Format for displaying dates, defaults to the locale's date format."""

    line_total_field: str = Field(
        default="total_price", alias="line-total-field", min_length=1
    )
    """Item field summed by global `sum` calculations."""


class _ExcelConfig(BaseModel):
    """Configuration settings for the Excel data source."""

    model_config = ConfigDict(frozen=True)

    filepath: FilePath

    invoices_sheet: str = Field(default="invoices", alias="invoices-sheet")
    """Sheet holding one row per invoice."""

    items_sheet: str = Field(default="items", alias="items-sheet")
    """Sheet holding one row per invoice line item."""

    items_field: str = Field(default="invoice_items", alias="items-field")
    """Invoice field the line items are nested under."""

    key_column: str = Field(default="invoice_id", alias="key-column")
    """Column linking items to their invoice."""


class _PdfConfig(BaseModel):
    """Configuration settings for PDF output."""

    model_config = ConfigDict(frozen=True)

    format: Literal["A3", "A4", "A5", "letter", "legal"] = "A4"

    row_height: float = Field(default=6.0, gt=0, le=50, alias="row-height")
    """Height of one grid row, in millimetres."""


class _OutputConfig(BaseModel):
    """Configuration settings for output formats."""

    model_config = ConfigDict(frozen=True)

    path: str
    """Path to save the output files."""

    type: Literal["html", "pdf", "combined"]

    start_date: datetime.date | None = Field(default=None, alias="start-date")
    """Start date for filtering invoices."""

    end_date: datetime.date | None = Field(default=None, alias="end-date")
    """End date for filtering invoices."""


class Config(BaseModel):
    """Configuration settings for the invoicegrid application."""

    model_config = ConfigDict(frozen=True)

    template: _TemplateConfig
    """Configuration for the invoice template."""

    render: _RenderConfig = _RenderConfig()
    """Configuration for value rendering."""

    excel: _ExcelConfig
    """Configuration for the Excel data source."""

    pdf: _PdfConfig = _PdfConfig()
    """Configuration for PDF output."""

    output: dict[str, _OutputConfig]
    """Configuration for output formats."""

    @field_validator("output", mode="after")
    @classmethod
    def validate_output(cls, v: dict[str, _OutputConfig]) -> dict[str, _OutputConfig]:
        """Ensure that the output configuration contains at least one entry."""
        if not v:
            raise ValueError("At least one output configuration must be provided.")
        return v
