"""Search refinement pipeline.

Turns the raw records returned by the catalog into at most ``MATCH_CAP``
results, and proposes a corrected search term when nothing matched.
"""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Optional, Sequence, Union

from .matching import matches_search_criteria
from .schemas import DEFAULT_GENRE_RULES, BookRecord, GenreRule, SearchType
from .suggestions import find_closest_match

logger = logging.getLogger(__name__)

MATCH_CAP = 5
DEFAULT_MAX_SUGGESTION_DEPTH = 5

Fetch = Callable[[], Sequence[BookRecord]]
FetchFor = Callable[[str, SearchType], Sequence[BookRecord]]
Confirm = Callable[[str], bool]


@dataclass(frozen=True)
class Matches:
    """Books accepted for a search, in catalog order."""

    term: str
    search_type: SearchType
    books: tuple[BookRecord, ...]


@dataclass(frozen=True)
class NoResults:
    """Nothing matched and no correction was taken."""

    term: str
    search_type: SearchType


@dataclass(frozen=True)
class SuggestedRetry:
    """Nothing matched, but a close alternative term was found."""

    term: str
    search_type: SearchType
    suggestion: str


Outcome = Union[Matches, NoResults, SuggestedRetry]


@dataclass
class ScanResult:
    """Accumulator for a single scan over fetched records."""

    matches: list[BookRecord] = field(default_factory=list)
    candidates: set[str] = field(default_factory=set)
    scanned: int = 0


class SearchRefiner:
    """Filters catalog results and suggests corrections."""

    def __init__(self, genre_rules: Sequence[GenreRule] = DEFAULT_GENRE_RULES):
        """Initialize refiner.

        Args:
            genre_rules: Related-genre rules used by genre matching
        """
        self.genre_rules = tuple(genre_rules)

    def scan(
        self,
        records: Sequence[BookRecord],
        term: str,
        search_type: SearchType,
    ) -> ScanResult:
        """Fold the match predicate over records until the cap is reached.

        Every scanned record contributes its field values to the suggestion
        candidates whether or not it matched. Records after the cap is
        reached are not looked at.
        """
        result = ScanResult()

        for record in records:
            if len(result.matches) >= MATCH_CAP:
                break

            result.scanned += 1
            result.candidates.update(record.values_for(search_type))

            if matches_search_criteria(
                record, term, search_type, len(result.matches), self.genre_rules
            ):
                result.matches.append(record)

        return result

    def refine(self, term: str, search_type: SearchType, fetch: Fetch) -> Outcome:
        """Run one search and classify the outcome.

        Args:
            term: Search term
            search_type: Which field to match against
            fetch: Returns the raw catalog records for this search. Its
                errors propagate to the caller.

        Returns:
            Matches, NoResults or SuggestedRetry
        """
        records = fetch()
        if not records:
            logger.debug("No records returned for %s search %r", search_type.value, term)
            return NoResults(term, search_type)

        result = self.scan(records, term, search_type)
        logger.debug(
            "Scanned %d of %d records for %s search %r: %d matches, %d candidates",
            result.scanned,
            len(records),
            search_type.value,
            term,
            len(result.matches),
            len(result.candidates),
        )

        if result.matches:
            return Matches(term, search_type, tuple(result.matches))

        suggestion = find_closest_match(term, result.candidates)
        if suggestion is None:
            return NoResults(term, search_type)

        return SuggestedRetry(term, search_type, suggestion)

    def resolve(
        self,
        term: str,
        search_type: SearchType,
        fetch_for: FetchFor,
        confirm: Confirm,
        max_depth: Optional[int] = None,
    ) -> Outcome:
        """Search, following confirmed suggestions with a fresh fetch each time.

        Args:
            term: Initial search term
            search_type: Which field to match against
            fetch_for: Fetches raw records for a (term, search type) pair
            confirm: Asked whether to retry with a suggested term
            max_depth: Most corrections to follow before giving up

        Returns:
            Matches or NoResults, never SuggestedRetry
        """
        if max_depth is None:
            max_depth = DEFAULT_MAX_SUGGESTION_DEPTH

        current = term
        depth = 0

        while True:
            outcome = self.refine(current, search_type, partial(fetch_for, current, search_type))
            if not isinstance(outcome, SuggestedRetry):
                return outcome

            if depth >= max_depth:
                logger.warning(
                    "Stopped after %d suggested corrections starting from %r",
                    depth,
                    term,
                )
                return NoResults(current, search_type)

            if not confirm(outcome.suggestion):
                return NoResults(current, search_type)

            logger.info(
                "Retrying %s search with %r instead of %r",
                search_type.value,
                outcome.suggestion,
                current,
            )
            current = outcome.suggestion
            depth += 1
