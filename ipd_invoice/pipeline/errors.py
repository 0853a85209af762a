"""Errors raised while planning pages."""


class PaginationError(Exception):
    """Base class for pagination failures."""
    pass


class InvalidGeometryError(PaginationError):
    """Raised when margins leave no content height or the scale ratio is not positive."""
    pass


class EmptySourceError(PaginationError):
    """Raised when the source bitmap has no height to paginate."""
    pass
