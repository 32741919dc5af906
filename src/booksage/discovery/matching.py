"""Per-search-type match predicates.

Author and title matching are plain case-insensitive substring checks.
Genre matching is more lenient while few results have been accepted: it
backfills uncategorized books and loosely related categories only when
stronger matches are scarce, so its outcome depends on scan order.
"""

from pathlib import Path
from typing import Callable, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from ..config import ConfigError
from .schemas import DEFAULT_GENRE_RULES, BookRecord, GenreRule, SearchType

# Uncategorized books are accepted only below this many matches
UNCATEGORIZED_LIMIT = 3
# Reverse-substring and related-genre matches only below this many matches
RELATED_GENRE_LIMIT = 2

Predicate = Callable[[BookRecord, str, int, Sequence[GenreRule]], bool]


def matches_author(
    record: BookRecord,
    term: str,
    current_match_count: int = 0,
    rules: Sequence[GenreRule] = DEFAULT_GENRE_RULES,
) -> bool:
    """Check if the term appears in any of the book's authors."""
    if record.authors is None:
        return False

    term_lower = term.lower()
    return any(term_lower in author.lower() for author in record.authors)


def matches_title(
    record: BookRecord,
    term: str,
    current_match_count: int = 0,
    rules: Sequence[GenreRule] = DEFAULT_GENRE_RULES,
) -> bool:
    """Check if the term appears in the book's title."""
    if record.title is None:
        return False

    return term.lower() in record.title.lower()


def are_related_genres(
    category: str,
    term: str,
    rules: Sequence[GenreRule] = DEFAULT_GENRE_RULES,
) -> bool:
    """Check a lower-cased category and term against the related-genre rules.

    Rules are directional: ``("fiction", "novel")`` relates a "fiction"
    category to a "novel" search, not the other way round.
    """
    return any(rule.applies(category, term) for rule in rules)


def matches_genre(
    record: BookRecord,
    term: str,
    current_match_count: int = 0,
    rules: Sequence[GenreRule] = DEFAULT_GENRE_RULES,
) -> bool:
    """Check if a book matches a genre search.

    Args:
        record: Book under test
        term: Genre the user searched for
        current_match_count: Matches accepted so far, excluding this book
        rules: Related-genre rules for the lenient pass

    Returns:
        True if the book should be accepted
    """
    if record.categories is None:
        return current_match_count < UNCATEGORIZED_LIMIT

    term_lower = term.lower()
    categories = [category.lower() for category in record.categories]

    if any(term_lower in category for category in categories):
        return True

    if current_match_count < RELATED_GENRE_LIMIT:
        for category in categories:
            if category in term_lower or are_related_genres(category, term_lower, rules):
                return True

    return False


PREDICATES: dict[SearchType, Predicate] = {
    SearchType.GENRE: matches_genre,
    SearchType.AUTHOR: matches_author,
    SearchType.TITLE: matches_title,
}


def matches_search_criteria(
    record: BookRecord,
    term: str,
    search_type: SearchType,
    current_match_count: int,
    rules: Sequence[GenreRule] = DEFAULT_GENRE_RULES,
) -> bool:
    """Dispatch to the predicate for ``search_type``."""
    return PREDICATES[search_type](record, term, current_match_count, rules)


def load_genre_rules(path: Optional[Path]) -> tuple[GenreRule, ...]:
    """Load related-genre rules from a JSON file.

    The file holds a list of ``{"category": ..., "term": ...}`` objects and
    replaces the default table entirely. Without a path the defaults are
    returned.

    Raises:
        ConfigError: If the file cannot be read or is not a valid rule list
    """
    if path is None:
        return DEFAULT_GENRE_RULES

    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read genre rules file {path}: {e}") from e

    try:
        rules = TypeAdapter(list[GenreRule]).validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid genre rules file {path}: {e}") from e

    return tuple(rules)
