"""Driver module for invoicegrid."""

from pathlib import Path
import logging
from typing import Any
from .config.loader import load_config
from .config.model import Config
from .io.excel import read_excel
from .io.files import write_html, write_pdf
from .pdf import render_pdf
from .prepare import filter_period, prepare_invoices
from .services.workers import (
    generate_invoice_html,
    generate_invoice_pdf,
    generate_invoice_tree,
)
from .template.loader import load_template
from .template.model import InvoiceTemplate
from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm
from concurrent.futures import (
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    as_completed,
)

# Configure logging
logger = logging.getLogger(__name__)


def _generate_individual(
    key: str,
    path: str,
    output_type: str,
    config: Config,
    template: InvoiceTemplate,
    invoices: list[dict[str, Any]],
) -> None:
    """Render one file per invoice in a process pool and save them."""
    worker = generate_invoice_html if output_type == "html" else generate_invoice_pdf
    writer = write_html if output_type == "html" else write_pdf

    with ProcessPoolExecutor() as executor:
        future_invoices = [
            executor.submit(worker, config, template, invoice_data)
            for invoice_data in invoices
        ]

        with ThreadPoolExecutor() as thread_executor:
            futures = []
            for future in tqdm(
                as_completed(future_invoices),
                total=len(future_invoices),
                desc=f"Rendering {key}",
                leave=False,
            ):
                number, content = future.result()
                futures.append(
                    thread_executor.submit(writer, path.format(NUMBER=number), content)
                )

            for _ in tqdm(
                as_completed(futures),
                total=len(futures),
                desc=f"Saving {key}",
                leave=False,
            ):
                pass


def _generate_combined(
    key: str,
    path: str,
    config: Config,
    template: InvoiceTemplate,
    invoices: list[dict[str, Any]],
) -> None:
    """Render all invoices into one PDF, keeping the input order."""
    with ProcessPoolExecutor() as executor:
        future_trees = [
            executor.submit(generate_invoice_tree, config, template, invoice_data)
            for invoice_data in invoices
        ]
        documents = [
            future.result()
            for future in tqdm(
                future_trees,
                desc=f"Rendering {key}",
                leave=False,
            )
        ]

    pdfbytes = render_pdf(
        documents,
        format=config.pdf.format,
        row_height=config.pdf.row_height,
        title=key,
    )
    write_pdf(path, pdfbytes)


def generate(config: Config) -> None:
    """Render invoices based on provided configuration."""
    logger.info("Starting the generation process.")
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Configuration: %s", config)

    template = load_template(config.template.path)
    if template.parsed is None:
        logger.error("Template has no parsed structure.")
        raise ValueError("Template parsed data is required for rendering")

    # Read input data
    df_invoice_data, df_item_data = read_excel(config)

    logger.info("Starting rendering.")

    with tqdm(
        config.output.items(),
        desc="Generating Outputs",
        leave=False,
    ) as output_format_pbar:
        with logging_redirect_tqdm():
            for key, output_config in output_format_pbar:
                logger.debug(f"Starting with output format: {key}")
                output_format_pbar.set_description(f"Generating {key} output")
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(f"Output format {key} configuration: {output_config}")

                path: str = output_config.path

                if not path:
                    logger.error(f"No path specified for output format: {key}")
                    raise ValueError(
                        f"Output format '{key}' requires a 'path' configuration."
                    )

                Path(path).parent.mkdir(parents=True, exist_ok=True)

                df_invoices_report = filter_period(
                    df_invoice_data, output_config.start_date, output_config.end_date
                )
                invoices = prepare_invoices(config, df_invoices_report, df_item_data)

                if not invoices:
                    logger.warning(f"No invoices to render for output format: {key}")
                    continue

                output_type = output_config.type

                if output_type in ("html", "pdf"):
                    logger.info(f"Generating individual {output_type} files.")
                    _generate_individual(
                        key, path, output_type, config, template, invoices
                    )
                elif output_type == "combined":
                    logger.info("Generating combined PDF for all invoices.")
                    _generate_combined(key, path, config, template, invoices)
                else:
                    logger.error(f"Unknown output type: {output_type}")
                    raise ValueError(
                        f"Output format '{key}' has an unknown 'type': {output_type}"
                    )

                logger.info(f"Output format {key} generated successfully.")


def main(config_file="config.toml") -> None:
    """Main function to run invoicegrid."""
    config = load_config(config_file)
    logger.info("Configuration loaded successfully.")
    generate(config)
