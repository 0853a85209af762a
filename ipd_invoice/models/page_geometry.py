"""Page geometry for paginated output documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

# A4 portrait in PDF points with the letterhead margins used on invoices
A4_WIDTH = 595.0
A4_HEIGHT = 842.0
A4_TOP_MARGIN = 120.0
A4_BOTTOM_MARGIN = 80.0
A4_SIDE_MARGIN = 20.0


@dataclass(frozen=True)
class PageGeometry:
    """Fixed output page size and margins.

    All values share one linear unit (PDF points for the page writer).

    Attributes:
        page_width: Full page width
        page_height: Full page height
        top_margin: Space reserved above content (letterhead area)
        bottom_margin: Space reserved below content (footer area)
        side_margin: Left and right margin
    """

    page_width: float
    page_height: float
    top_margin: float = 0.0
    bottom_margin: float = 0.0
    side_margin: float = 0.0

    def __post_init__(self):
        """Reject negative margins; usable height is checked by the paginator."""
        for name in ("top_margin", "bottom_margin", "side_margin"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")

    @property
    def usable_content_height(self) -> float:
        """Page height left for content after top and bottom margins."""
        return self.page_height - self.top_margin - self.bottom_margin

    @property
    def page_content_width(self) -> float:
        """Printable width between the side margins."""
        return self.page_width - 2 * self.side_margin

    @classmethod
    def a4(cls) -> PageGeometry:
        """A4 portrait with the standard invoice letterhead margins."""
        return cls(
            page_width=A4_WIDTH,
            page_height=A4_HEIGHT,
            top_margin=A4_TOP_MARGIN,
            bottom_margin=A4_BOTTOM_MARGIN,
            side_margin=A4_SIDE_MARGIN,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PageGeometry:
        """Create geometry from a mapping, filling gaps from A4 defaults."""
        return cls(
            page_width=float(data.get("page_width", A4_WIDTH)),
            page_height=float(data.get("page_height", A4_HEIGHT)),
            top_margin=float(data.get("top_margin", A4_TOP_MARGIN)),
            bottom_margin=float(data.get("bottom_margin", A4_BOTTOM_MARGIN)),
            side_margin=float(data.get("side_margin", A4_SIDE_MARGIN)),
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {
            "page_width": self.page_width,
            "page_height": self.page_height,
            "top_margin": self.top_margin,
            "bottom_margin": self.bottom_margin,
            "side_margin": self.side_margin,
        }
