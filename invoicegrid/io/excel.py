"""Excel input for invoicegrid."""

import logging
from ..config.model import Config

import polars as pl


import sys
from concurrent.futures import Future, ThreadPoolExecutor

logger = logging.getLogger(__name__)


def read_excel(config: Config) -> tuple[pl.DataFrame, pl.DataFrame]:
    """Read the Excel file and return dataframes for invoices and line items."""
    logger.info("Reading data from Excel files.")

    excel_config = config.excel

    with ThreadPoolExecutor(max_workers=2) as executor:
        future_invoices = executor.submit(
            pl.read_excel,
            excel_config.filepath,
            sheet_name=excel_config.invoices_sheet,
        )
        future_items = executor.submit(
            pl.read_excel,
            excel_config.filepath,
            sheet_name=excel_config.items_sheet,
        )

        exceptions: list[Exception] = []

        def get_results(future: Future[pl.DataFrame]) -> pl.DataFrame:
            try:
                return future.result()
            except TimeoutError as e:
                logger.critical("Reading Excel file timed out.")
                exceptions.append(e)
            except (FileNotFoundError, ValueError) as e:
                logger.critical(f"Error reading Excel file: {e}")
                exceptions.append(e)
            except pl.exceptions.PolarsError as e:
                logger.critical(f"Polars error reading Excel file: {e}")
                exceptions.append(e)
            except Exception as e:
                logger.critical(f"Unexpected error reading Excel file: {e}")
                exceptions.append(e)

            return pl.DataFrame()

        df_invoices = get_results(future_invoices)
        df_items = get_results(future_items)

        if exceptions:
            if sys.version_info < (3, 11):
                raise ValueError(
                    f"Errors occurred while reading Excel files: {exceptions}"
                )
            else:
                from builtins import ExceptionGroup

                raise ExceptionGroup(
                    "Errors occurred while reading Excel files.",
                    exceptions,
                )
    logger.info("Data loaded from Excel files.")
    return (df_invoices, df_items)
