"""Page slices produced by the paginator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, Tuple, Union

if TYPE_CHECKING:
    from PIL import Image

    from .page_geometry import PageGeometry

HeaderImage = Union[str, Path, "Image.Image"]


@dataclass(frozen=True)
class Placement:
    """Destination rectangle on the output page (output units)."""

    x: float
    y: float
    width: float
    height: float

    def as_rect(self) -> Tuple[float, float, float, float]:
        """Return (x0, y0, x1, y1)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True)
class PageSlice:
    """One vertical window of the source bitmap assigned to one page.

    Attributes:
        page_number: Page number (starts at 1)
        source_y_start: First source pixel row of the window
        source_height_px: Window height in source pixels
        placement: Where the window is drawn on the page
    """

    page_number: int
    source_y_start: int
    source_height_px: int
    placement: Placement

    def __post_init__(self):
        """Validate page number is positive."""
        if self.page_number < 1:
            raise ValueError(f"Page number must be >= 1, got {self.page_number}")

    @property
    def source_y_end(self) -> int:
        """Exclusive end row of the source window."""
        return self.source_y_start + self.source_height_px

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_number": self.page_number,
            "source_y_start": self.source_y_start,
            "source_height_px": self.source_height_px,
            "placement": {
                "x": self.placement.x,
                "y": self.placement.y,
                "width": self.placement.width,
                "height": self.placement.height,
            },
        }


@dataclass(frozen=True)
class PaginationResult:
    """Ordered page slices plus the header drawn beneath every page.

    Attributes:
        slices: Page slices in page order
        geometry: Page geometry the slices were planned for
        source_width: Source bitmap width in pixels
        source_height: Source bitmap height in pixels
        scale_ratio: Output units per source pixel
        header_image: Optional letterhead (path or Pillow image)
    """

    slices: Tuple[PageSlice, ...]
    geometry: PageGeometry
    source_width: int
    source_height: int
    scale_ratio: float
    header_image: Optional[HeaderImage] = None

    @property
    def page_count(self) -> int:
        return len(self.slices)

    def __len__(self) -> int:
        return len(self.slices)

    def __iter__(self) -> Iterator[PageSlice]:
        return iter(self.slices)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary (header reduced to a path or None)."""
        header = self.header_image
        if header is not None and not isinstance(header, (str, Path)):
            header = "<image>"
        return {
            "page_count": self.page_count,
            "source_width": self.source_width,
            "source_height": self.source_height,
            "scale_ratio": self.scale_ratio,
            "geometry": self.geometry.to_dict(),
            "header_image": str(header) if header is not None else None,
            "slices": [s.to_dict() for s in self.slices],
        }
