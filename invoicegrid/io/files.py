"""Module for writing files."""


def write_pdf(path: str, pdfBytes: bytearray):
    """Write PDF bytes to a file."""
    with open(path, "wb") as f:
        f.write(pdfBytes)


def write_html(path: str, document: str):
    """Write an HTML document to a file."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(document)
