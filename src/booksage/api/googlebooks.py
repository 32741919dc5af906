"""Google Books API client for catalog searches.

Google Books (googleapis.com/books) supports qualified searches:
- subject: for genres
- inauthor: for authors
- intitle: for titles

An API key is optional for volume searches.
"""

import logging
from typing import Any, Optional

import requests

from ..discovery.schemas import BookRecord, SearchType

logger = logging.getLogger(__name__)


class GoogleBooksError(Exception):
    """Base exception for Google Books API errors."""

    pass


class GoogleBooksRateLimitError(GoogleBooksError):
    """Raised when rate limited by Google Books."""

    pass


def _string_tuple(value: Any) -> Optional[tuple[str, ...]]:
    """Convert a JSON array of strings, keeping absence as None."""
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


def volume_to_record(volume_info: dict) -> BookRecord:
    """Convert a ``volumeInfo`` document to a BookRecord."""
    title = volume_info.get("title")
    return BookRecord(
        title=str(title) if title is not None else None,
        authors=_string_tuple(volume_info.get("authors")),
        categories=_string_tuple(volume_info.get("categories")),
        subtitle=volume_info.get("subtitle"),
        published_date=volume_info.get("publishedDate"),
    )


class GoogleBooksClient:
    """Client for the Google Books volumes API."""

    BASE_URL = "https://www.googleapis.com/books/v1/volumes"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: int = 10,
        max_results: int = 20,
    ):
        """Initialize client.

        Args:
            base_url: Volumes endpoint, defaults to the public API
            api_key: Optional Google API key
            timeout: Request timeout in seconds
            max_results: Number of volumes requested per search
        """
        self.base_url = base_url or self.BASE_URL
        self.api_key = api_key
        self.timeout = timeout
        self.max_results = max_results
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": "BookSage/0.1"})

    @classmethod
    def from_config(cls, config) -> "GoogleBooksClient":
        """Build a client from a Config instance."""
        return cls(
            base_url=config.api_url,
            api_key=config.api_key,
            timeout=config.timeout,
            max_results=config.max_results,
        )

    def _get(self, params: dict) -> dict:
        """Make GET request with error handling."""
        logger.debug("GET %s params=%s", self.base_url, params)
        try:
            response = self._session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise GoogleBooksError("Request timed out") from e
        except requests.exceptions.HTTPError as e:
            if e.response.status_code == 429:
                raise GoogleBooksRateLimitError("Rate limited by Google Books") from e
            raise GoogleBooksError(f"HTTP error: {e.response.status_code}") from e
        except requests.exceptions.RequestException as e:
            raise GoogleBooksError(f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise GoogleBooksError(f"Invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise GoogleBooksError(
                f"Invalid JSON response: expected an object, got {type(data).__name__}"
            )
        return data

    def build_query(self, term: str, search_type: SearchType) -> str:
        """Qualify the term for the given search type."""
        return f"{search_type.query_prefix}{term}"

    def search(self, term: str, search_type: SearchType) -> list[BookRecord]:
        """Search for volumes.

        Args:
            term: Search term
            search_type: Genre, author or title search

        Returns:
            BookRecords in the order the API returned them
        """
        params = {
            "q": self.build_query(term, search_type),
            "maxResults": self.max_results,
        }
        if self.api_key:
            params["key"] = self.api_key

        data = self._get(params)

        items = data.get("items") or []
        if not isinstance(items, list):
            raise GoogleBooksError("Invalid JSON response: items is not a list")

        records = []
        for item in items:
            if not isinstance(item, dict):
                continue
            volume_info = item.get("volumeInfo")
            if not isinstance(volume_info, dict):
                continue
            records.append(volume_to_record(volume_info))

        logger.debug("Google Books returned %d volumes for %r", len(records), params["q"])
        return records

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
