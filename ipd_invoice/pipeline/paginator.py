"""Slice a tall rendered document into fixed-size letterheaded pages.

The source bitmap is scaled so its width fills the printable width of the
page. Each page then takes the next ``floor(usable_height / scale_ratio)``
source rows; the last page takes whatever is left. The letterhead is drawn
full-page beneath each slice by the page writer.

Pagination is pure: no I/O, no retained state, inputs are never mutated.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from ..models.page_geometry import PageGeometry
from ..models.page_slice import HeaderImage, PageSlice, PaginationResult, Placement
from ..models.source_bitmap import SourceBitmap
from .errors import EmptySourceError, InvalidGeometryError

logger = logging.getLogger(__name__)


def compute_scale_ratio(source_width: int, geometry: PageGeometry) -> float:
    """Output units per source pixel when the source fills the printable width.

    Raises:
        InvalidGeometryError: If the source has no width or the page no printable width
    """
    if source_width <= 0:
        raise InvalidGeometryError(f"Source width must be > 0, got {source_width}")
    scale_ratio = geometry.page_content_width / source_width
    if scale_ratio <= 0:
        raise InvalidGeometryError(
            f"Scale ratio must be > 0, got {scale_ratio} "
            f"(page content width {geometry.page_content_width})"
        )
    return scale_ratio


def source_window_height(geometry: PageGeometry, scale_ratio: float) -> int:
    """Source rows that fill one page's usable height."""
    return math.floor(geometry.usable_content_height / scale_ratio)


def plan_page_count(source_height: int, window_height: int) -> int:
    """Number of pages needed for ``source_height`` rows at ``window_height`` rows per page."""
    if window_height <= 0:
        raise InvalidGeometryError(f"Window height must be > 0, got {window_height}")
    return max(1, math.ceil(source_height / window_height))


def paginate(
    source: SourceBitmap,
    geometry: PageGeometry,
    header_image: Optional[HeaderImage] = None,
) -> PaginationResult:
    """Plan page slices for a rendered source bitmap.

    Args:
        source: Rendered content (only width and height are read)
        geometry: Output page size and margins
        header_image: Optional letterhead drawn beneath every page

    Returns:
        PaginationResult with at least one page

    Raises:
        InvalidGeometryError: If margins consume the page height, the scale ratio
            is not positive, or one page cannot hold a single source row
        EmptySourceError: If the source has no height
    """
    usable_height = geometry.usable_content_height
    if usable_height <= 0:
        raise InvalidGeometryError(
            f"Margins leave no content height: page height {geometry.page_height}, "
            f"top {geometry.top_margin}, bottom {geometry.bottom_margin}"
        )

    scale_ratio = compute_scale_ratio(source.width, geometry)

    if source.height <= 0:
        raise EmptySourceError(f"Source height must be > 0, got {source.height}")

    window = source_window_height(geometry, scale_ratio)
    if window < 1:
        raise InvalidGeometryError(
            f"Usable height {usable_height} holds less than one source row "
            f"at scale ratio {scale_ratio}"
        )

    scaled_content_height = source.height * scale_ratio
    content_width = geometry.page_content_width

    slices: List[PageSlice] = []
    current_y = 0
    page_number = 0
    # Strict comparison: an exact multiple must not produce a trailing blank page
    while current_y * scale_ratio < scaled_content_height:
        page_number += 1
        height_px = min(window, source.height - current_y)
        slices.append(
            PageSlice(
                page_number=page_number,
                source_y_start=current_y,
                source_height_px=height_px,
                placement=Placement(
                    x=geometry.side_margin,
                    y=geometry.top_margin,
                    width=content_width,
                    height=height_px * scale_ratio,
                ),
            )
        )
        current_y += height_px

    logger.debug(
        f"Paginated {source.width}x{source.height}px source into {len(slices)} page(s) "
        f"(scale {scale_ratio:.4f}, {window} rows per page, "
        f"{plan_page_count(source.height, window)} planned)"
    )

    return PaginationResult(
        slices=tuple(slices),
        geometry=geometry,
        source_width=source.width,
        source_height=source.height,
        scale_ratio=scale_ratio,
        header_image=header_image,
    )
