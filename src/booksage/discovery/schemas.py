"""Schemas for book discovery.

Defines the book records produced by the catalog client, the search types
the refiner understands, and the related-genre rules used by genre matching.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote_plus

from pydantic import BaseModel, Field

GOODREADS_SEARCH_URL = "https://www.goodreads.com/search?q="


class SearchType(str, Enum):
    """Which field of a book a search inspects."""

    GENRE = "genre"
    AUTHOR = "author"
    TITLE = "title"

    @property
    def query_prefix(self) -> str:
        """Google Books query qualifier for this search type."""
        return {
            SearchType.GENRE: "subject:",
            SearchType.AUTHOR: "inauthor:",
            SearchType.TITLE: "intitle:",
        }[self]

    @property
    def label(self) -> str:
        """Human-readable name used in prompts."""
        return {
            SearchType.GENRE: "genre",
            SearchType.AUTHOR: "author name",
            SearchType.TITLE: "book title",
        }[self]


@dataclass(frozen=True)
class BookRecord:
    """A single book returned by the catalog.

    ``None`` means the catalog did not report the field at all, which the
    genre matcher treats differently from an empty list of categories.
    """

    title: Optional[str] = None
    authors: Optional[tuple[str, ...]] = None
    categories: Optional[tuple[str, ...]] = None
    subtitle: Optional[str] = None
    published_date: Optional[str] = None

    def values_for(self, search_type: SearchType) -> tuple[str, ...]:
        """Return the field values a search of this type inspects."""
        if search_type == SearchType.TITLE:
            return (self.title,) if self.title is not None else ()
        if search_type == SearchType.AUTHOR:
            return self.authors or ()
        return self.categories or ()

    @property
    def display_title(self) -> str:
        return self.title or "Unknown Title"

    @property
    def full_title(self) -> str:
        """Title with its subtitle, if any."""
        if self.subtitle:
            return f"{self.display_title}: {self.subtitle}"
        return self.display_title

    @property
    def author_display(self) -> str:
        """Authors joined for display."""
        if not self.authors:
            return "Unknown Author"
        return ", ".join(self.authors)

    @property
    def goodreads_url(self) -> str:
        """Goodreads search link for this book."""
        return GOODREADS_SEARCH_URL + quote_plus(
            f"{self.display_title} {self.author_display}"
        )


class GenreRule(BaseModel):
    """A directional related-genre rule.

    The rule fires when the lower-cased category contains ``category`` and
    the lower-cased search term contains ``term``.
    """

    category: str = Field(..., min_length=1)
    term: str = Field(..., min_length=1)

    def applies(self, category: str, term: str) -> bool:
        return self.category.lower() in category and self.term.lower() in term


DEFAULT_GENRE_RULES: tuple[GenreRule, ...] = (
    GenreRule(category="fiction", term="novel"),
    GenreRule(category="mystery", term="thriller"),
    GenreRule(category="sci-fi", term="science fiction"),
    GenreRule(category="fantasy", term="magic"),
)
