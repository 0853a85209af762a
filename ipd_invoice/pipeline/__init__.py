"""Pipeline stages for invoice generation."""

from .errors import EmptySourceError, InvalidGeometryError, PaginationError
from .paginator import paginate

__all__ = [
    "EmptySourceError",
    "InvalidGeometryError",
    "PaginationError",
    "paginate",
]
