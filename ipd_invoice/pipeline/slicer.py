"""Extract per-page pixel windows from a rendered source bitmap."""

from __future__ import annotations

from typing import Iterator, Tuple

from PIL import Image

from ..models.page_slice import PageSlice, PaginationResult
from ..models.source_bitmap import SourceBitmap


def extract_slice(source: SourceBitmap, page_slice: PageSlice) -> Image.Image:
    """Crop the full-width source window for one page.

    Args:
        source: Rendered source bitmap with pixels
        page_slice: Slice planned by the paginator

    Returns:
        New image of size (source.width, page_slice.source_height_px)

    Raises:
        ValueError: If the bitmap has no pixels or the window is out of bounds
    """
    if source.image is None:
        raise ValueError("Source bitmap has no pixel buffer to slice")
    if page_slice.source_y_start < 0 or page_slice.source_y_end > source.height:
        raise ValueError(
            f"Slice rows [{page_slice.source_y_start}, {page_slice.source_y_end}) "
            f"outside source height {source.height}"
        )
    box = (0, page_slice.source_y_start, source.width, page_slice.source_y_end)
    return source.image.crop(box)


def iter_slice_images(
    source: SourceBitmap, result: PaginationResult
) -> Iterator[Tuple[PageSlice, Image.Image]]:
    """Yield (slice, cropped image) pairs lazily in page order."""
    for page_slice in result.slices:
        yield page_slice, extract_slice(source, page_slice)
