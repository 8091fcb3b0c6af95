"""Data preparation module."""

import datetime
import logging
from typing import Any
from invoicegrid.config.model import Config

import polars as pl

logger = logging.getLogger(__name__)


def nest_fields(row: dict[str, Any]) -> dict[str, Any]:
    """Turn dotted column names into nested objects.

    ``{"company.name": "Acme"}`` becomes ``{"company": {"name": "Acme"}}``.
    """
    nested: dict[str, Any] = {}
    for column, value in row.items():
        *parents, leaf = column.split(".")
        target = nested
        for parent in parents:
            child = target.get(parent)
            if not isinstance(child, dict):
                child = {}
                target[parent] = child
            target = child
        target[leaf] = value
    return nested


def filter_period(
    df_invoices: pl.DataFrame,
    start_date: datetime.date | None,
    end_date: datetime.date | None,
    date_column: str = "invoice_date",
) -> pl.DataFrame:
    """Keep invoices dated within the reporting period, bounds inclusive."""
    if not start_date and not end_date:
        return df_invoices
    if date_column not in df_invoices.columns:
        logger.warning(
            f"Column '{date_column}' not found. Date filters are ignored."
        )
        return df_invoices

    df = df_invoices
    if start_date:
        df = df.filter(pl.col(date_column).cast(pl.Date) >= start_date)
    if end_date:
        df = df.filter(pl.col(date_column).cast(pl.Date) <= end_date)
    return df


def prepare_invoices(
    config: Config, df_invoice_data: pl.DataFrame, df_item_data: pl.DataFrame
) -> list[dict[str, Any]]:
    """Prepare invoice view models from raw invoice and item rows."""
    key = config.excel.key_column
    items_field = config.excel.items_field

    if key not in df_invoice_data.columns:
        logger.error(f"Key column '{key}' not found in invoices sheet.")
        raise ValueError(f"Invoices sheet requires a '{key}' column.")

    df_invoices = df_invoice_data.filter(pl.col(key).is_not_null()).with_columns(
        pl.col(key).cast(pl.String)
    )

    if key in df_item_data.columns and df_item_data.width > 1:
        df_items = (
            df_item_data.filter(pl.col(key).is_not_null())
            .with_columns(pl.col(key).cast(pl.String))
            .group_by(key, maintain_order=True)
            .agg(pl.struct(pl.all().exclude(key)).alias(items_field))
        )
        df_invoices = df_invoices.join(
            df_items, on=key, how="left", maintain_order="left"
        )
    else:
        logger.warning(f"No line items linked by '{key}'.")

    invoices = []
    for row in df_invoices.to_dicts():
        invoice = nest_fields(row)
        invoice[items_field] = [
            nest_fields(item) for item in (row.get(items_field) or [])
        ]
        invoices.append(invoice)

    logger.info(f"{len(invoices)} invoices prepared.")
    return invoices
