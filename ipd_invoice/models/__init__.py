"""Data models for pagination and billing."""

from .page_geometry import PageGeometry
from .page_slice import PageSlice, PaginationResult, Placement
from .source_bitmap import SourceBitmap

__all__ = [
    "PageGeometry",
    "PageSlice",
    "PaginationResult",
    "Placement",
    "SourceBitmap",
]
