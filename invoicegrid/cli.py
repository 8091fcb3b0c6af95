"""Run the invoicegrid application with command line interface."""

import json
import sys
from invoicegrid.driver import main as invoicegrid_main
from invoicegrid.render.html import render_html
from invoicegrid.template.loader import load_template
import logging
import pathlib
import logging.config

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Set up logging from a config file, falling back to basicConfig."""
    expected_logging_conf_path = pathlib.Path("logging.conf")
    bundled_logging_conf_path = pathlib.Path(__file__).parent.joinpath("logging.conf")
    bundled_debug_conf_path = pathlib.Path(__file__).parent.joinpath(
        "logging-debug.conf"
    )

    if expected_logging_conf_path.exists():
        logging.config.fileConfig(expected_logging_conf_path)
        logger.info("Logging configuration loaded from logging.conf")
    elif bundled_logging_conf_path.exists() and not debug:
        logging.config.fileConfig(bundled_logging_conf_path)
        logger.info("Logging configuration loaded from bundled logging.conf")
    elif bundled_debug_conf_path.exists() and debug:
        logging.config.fileConfig(bundled_debug_conf_path)
        logger.info("Logging configuration loaded from bundled logging-debug.conf")
    elif debug:
        logging.basicConfig(level=logging.DEBUG)
        logger.info(
            "No logging configuration found, using basicConfig with DEBUG level"
        )
    else:
        logging.basicConfig(level=logging.WARNING)
        logger.info(
            "No logging configuration found, using basicConfig with WARNING level"
        )


def render_single(template_file: str, invoice_file: str, output: str | None) -> None:
    """Render one invoice from JSON files into a standalone HTML document."""
    template = load_template(template_file)
    with open(invoice_file, encoding="utf-8") as f:
        invoice_data = json.load(f)

    rendered = render_html(template, invoice_data)
    document = rendered.to_document(title=template.name or "Invoice")

    if output:
        pathlib.Path(output).write_text(document, encoding="utf-8")
        logger.info(f"Invoice written to {output}")
    else:
        sys.stdout.write(document)


def main() -> None:
    """Entry point for the invoicegrid application.

    ``invoicegrid [config.toml] [--debug]`` renders every configured output.
    ``invoicegrid template.json invoice.json [--output=out.html]`` renders a
    single invoice.
    """
    debug = "--debug" in sys.argv
    configure_logging(debug)

    # Get the config file path from command line arguments if provided
    config_file = "config.toml"
    json_files = []
    output = None
    for arg in sys.argv[1:]:
        if arg.endswith(".toml"):
            config_file = arg
            logger.info(f"Overriding config file path: {config_file}")
        elif arg.endswith(".json"):
            json_files.append(arg)
        elif arg.startswith("--output="):
            output = arg.split("=", 1)[1]

    if json_files and len(json_files) != 2:
        logger.critical("Single invoice mode needs a template and an invoice file.")
        sys.exit(2)

    logger.info("Starting invoicegrid...")
    try:
        if json_files:
            render_single(json_files[0], json_files[1], output)
        else:
            logger.info(f"Using config file: {config_file}")
            invoicegrid_main(config_file)
    except Exception as e:
        if debug:
            logger.critical(e, exc_info=True)
        else:
            logger.critical("invoicegrid encountered an error.")
            logger.critical("Run with --debug for more details.")
        sys.exit(1)

    logger.info("invoicegrid finished successfully.")
    sys.exit(0)
