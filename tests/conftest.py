"""Pytest configuration and shared fixtures.

This module provides fixtures for testing booksage, including sample
catalog records and a clean configuration environment.
"""

import pytest

from booksage.config import reset_config
from booksage.discovery import BookRecord

BOOKSAGE_ENV_VARS = [
    "BOOKSAGE_API_URL",
    "GOOGLE_BOOKS_API_KEY",
    "BOOKSAGE_MAX_RESULTS",
    "BOOKSAGE_TIMEOUT",
    "BOOKSAGE_MAX_SUGGESTION_DEPTH",
    "BOOKSAGE_GENRE_RULES_FILE",
    "BOOKSAGE_LOG_LEVEL",
    "BOOKSAGE_LOG_FILE",
]


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate each test from the developer's environment and .env file."""
    for name in BOOKSAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


# ============================================================================
# Record Fixtures
# ============================================================================


@pytest.fixture
def tolkien_books() -> list[BookRecord]:
    """Records as returned for an author search."""
    return [
        BookRecord(
            title="The Hobbit",
            authors=("J.R.R. Tolkien",),
            categories=("Juvenile Fiction",),
        ),
        BookRecord(
            title="The Fellowship of the Ring",
            authors=("J.R.R. Tolkien",),
            categories=("Fiction",),
        ),
        BookRecord(
            title="Tolkien: A Biography",
            authors=("Humphrey Carpenter",),
            categories=("Biography & Autobiography",),
        ),
    ]


@pytest.fixture
def fantasy_books() -> list[BookRecord]:
    """Categorized fantasy records without any 'mgic' substring."""
    return [
        BookRecord(title="A Wizard of Earthsea", authors=("Ursula K. Le Guin",), categories=("Fantasy",)),
        BookRecord(title="The Magicians", authors=("Lev Grossman",), categories=("Magic",)),
        BookRecord(title="Mistborn", authors=("Brandon Sanderson",), categories=("Fantasy fiction",)),
    ]
