"""Template record loader."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from ..config.loader import log_validation_error
from .model import InvoiceTemplate

logger = logging.getLogger(__name__)


def load_template(path: str | Path) -> InvoiceTemplate:
    """Load a parsed invoice template record from a JSON file."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
        template = InvoiceTemplate.model_validate_json(raw)
    except FileNotFoundError:
        logger.critical(f"Template file not found: {path}")
        raise
    except ValidationError as e:
        logger.critical("Template validation failed.")
        log_validation_error(e)
        raise

    if template.parsed is None:
        logger.warning(f"Template '{template.template_id}' has no parsed structure.")
    else:
        logger.debug(
            f"Template '{template.template_id}' loaded with "
            f"{len(template.parsed.sections)} sections and "
            f"{len(template.parsed.globals)} globals."
        )
    return template
