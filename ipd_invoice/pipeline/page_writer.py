"""Write paginated slices into a PDF with pymupdf.

Every page gets the letterhead drawn over the full page rectangle first,
then its content slice at the planned placement, so the letterhead acts as
a static background beneath the invoice body.
"""

import io
import logging
from pathlib import Path
from typing import Optional, Union

import fitz  # pymupdf
from PIL import Image

from ..models.page_slice import HeaderImage, PaginationResult
from ..models.source_bitmap import SourceBitmap
from .slicer import iter_slice_images

logger = logging.getLogger(__name__)


class PageWriteError(Exception):
    """Raised when writing the output PDF fails."""
    pass


def _png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _load_header(header_image: Optional[HeaderImage]) -> Optional[bytes]:
    """Resolve the letterhead to PNG bytes (None when no letterhead)."""
    if header_image is None:
        return None
    if isinstance(header_image, Image.Image):
        return _png_bytes(header_image)
    path = Path(header_image)
    if not path.is_file():
        raise FileNotFoundError(f"Letterhead image not found: {path}")
    with Image.open(path) as img:
        return _png_bytes(img)


def write_pages(
    source: SourceBitmap,
    result: PaginationResult,
    output_path: Union[str, Path],
    *,
    header_image: Optional[HeaderImage] = None,
) -> Path:
    """Write one PDF page per slice.

    Args:
        source: Rendered source bitmap with pixels
        result: Pagination plan for ``source``
        output_path: Destination PDF path (parent directories are created)
        header_image: Letterhead override; defaults to ``result.header_image``

    Returns:
        Path to the written PDF

    Raises:
        ValueError: If the source bitmap has no pixels
        FileNotFoundError: If the letterhead path does not exist
        PageWriteError: If pymupdf fails to build or save the document
    """
    if not source.has_pixels:
        raise ValueError("Source bitmap has no pixel buffer to write")
    header_bytes = _load_header(header_image if header_image is not None else result.header_image)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    geometry = result.geometry
    page_rect = fitz.Rect(0, 0, geometry.page_width, geometry.page_height)

    pdf_doc = fitz.open()
    try:
        for page_slice, chunk in iter_slice_images(source, result):
            page = pdf_doc.new_page(width=geometry.page_width, height=geometry.page_height)
            if header_bytes is not None:
                page.insert_image(page_rect, stream=header_bytes, keep_proportion=False)
            page.insert_image(
                fitz.Rect(*page_slice.placement.as_rect()),
                stream=_png_bytes(chunk),
                keep_proportion=False,
            )
        pdf_doc.save(str(output_path))
    except Exception as e:
        raise PageWriteError(f"Failed to write {output_path.name}: {str(e)}") from e
    finally:
        pdf_doc.close()

    logger.info(f"Wrote {result.page_count} page(s) to {output_path}")
    return output_path
