"""Read written invoice PDFs back using pdfplumber."""

from pathlib import Path
from typing import Union

import pdfplumber

from ..models.written_document import WrittenDocument, WrittenPage


class PDFReadError(Exception):
    """Raised when PDF reading fails."""
    pass


def read_pdf(filepath: Union[str, Path]) -> WrittenDocument:
    """Read a PDF file and describe its pages.

    Args:
        filepath: Path to PDF file

    Returns:
        WrittenDocument with page sizes and image counts

    Raises:
        PDFReadError: If PDF cannot be read or is corrupt
        FileNotFoundError: If filepath does not exist
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"PDF file not found: {path}")

    try:
        with pdfplumber.open(str(path)) as pdf:
            pages = [
                WrittenPage(
                    page_number=i,
                    width=float(pdfplumber_page.width),
                    height=float(pdfplumber_page.height),
                    image_count=len(pdfplumber_page.images),
                )
                for i, pdfplumber_page in enumerate(pdf.pages, start=1)
            ]
    except Exception as e:
        raise PDFReadError(f"Failed to read PDF {path}: {str(e)}") from e

    return WrittenDocument(filename=path.name, filepath=str(path), pages=pages)
