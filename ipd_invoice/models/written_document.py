"""Models for invoice PDFs read back after writing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class WrittenPage:
    """One page of a written PDF.

    Attributes:
        page_number: Page number (starts at 1)
        width: Page width in points
        height: Page height in points
        image_count: Images placed on the page (letterhead + content slice)
    """

    page_number: int
    width: float
    height: float
    image_count: int = 0

    def __post_init__(self):
        if self.page_number < 1:
            raise ValueError(f"Page number must be >= 1, got {self.page_number}")

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)


@dataclass
class WrittenDocument:
    """A written invoice PDF and its pages."""

    filename: str
    filepath: str
    pages: List[WrittenPage] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def has_uniform_page_size(self, tolerance: float = 0.5) -> bool:
        """True when every page has the first page's size (within tolerance points)."""
        if not self.pages:
            return True
        width, height = self.pages[0].size
        return all(
            abs(p.width - width) <= tolerance and abs(p.height - height) <= tolerance
            for p in self.pages
        )
