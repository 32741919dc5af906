"""Spelling suggestions for searches that matched nothing."""

from typing import Iterable, Optional

from .distance import levenshtein_distance


def max_suggestion_distance(term: str) -> int:
    """Largest edit distance still accepted as a suggestion (half the term)."""
    return len(term) // 2


def find_closest_match(term: str, candidates: Iterable[str]) -> Optional[str]:
    """Find the candidate closest to ``term`` by case-insensitive edit distance.

    Only candidates within half the term's length are considered. The first
    candidate with a strictly lower distance wins, so among equally close
    candidates the result depends on iteration order, which for a set is
    arbitrary.

    Args:
        term: The search term the user typed
        candidates: Values observed in the fetched records

    Returns:
        The closest candidate in its original casing, or None
    """
    term_lower = term.lower()
    threshold = max_suggestion_distance(term)
    closest: Optional[str] = None
    best_distance: Optional[int] = None

    for candidate in candidates:
        distance = levenshtein_distance(term_lower, candidate.lower())
        if distance > threshold:
            continue
        if best_distance is None or distance < best_distance:
            best_distance = distance
            closest = candidate

    return closest
