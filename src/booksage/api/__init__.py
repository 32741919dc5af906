"""API module for external book catalog services."""

from .googlebooks import (
    GoogleBooksClient,
    GoogleBooksError,
    GoogleBooksRateLimitError,
    volume_to_record,
)

__all__ = [
    "GoogleBooksClient",
    "GoogleBooksError",
    "GoogleBooksRateLimitError",
    "volume_to_record",
]
