"""IPD invoice generation: billing summaries rendered to paginated, letterheaded PDFs."""

__version__ = "0.1.0"
