"""Search refinement and spelling suggestions."""

from .distance import levenshtein_distance
from .matching import (
    are_related_genres,
    load_genre_rules,
    matches_author,
    matches_genre,
    matches_search_criteria,
    matches_title,
)
from .refiner import (
    MATCH_CAP,
    Matches,
    NoResults,
    Outcome,
    SearchRefiner,
    SuggestedRetry,
)
from .schemas import DEFAULT_GENRE_RULES, BookRecord, GenreRule, SearchType
from .suggestions import find_closest_match

__all__ = [
    "levenshtein_distance",
    "find_closest_match",
    "are_related_genres",
    "load_genre_rules",
    "matches_author",
    "matches_genre",
    "matches_search_criteria",
    "matches_title",
    "MATCH_CAP",
    "Matches",
    "NoResults",
    "Outcome",
    "SearchRefiner",
    "SuggestedRetry",
    "DEFAULT_GENRE_RULES",
    "BookRecord",
    "GenreRule",
    "SearchType",
]
