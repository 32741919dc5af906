"""Tests for the search refinement pipeline."""

from unittest.mock import MagicMock, patch

import pytest

from booksage.discovery.refiner import (
    MATCH_CAP,
    Matches,
    NoResults,
    SearchRefiner,
    SuggestedRetry,
)
from booksage.discovery.schemas import BookRecord, GenreRule, SearchType


@pytest.fixture
def refiner():
    """Create a refiner with the default genre rules."""
    return SearchRefiner()


def numbered_books(count: int, author: str = "Jane Doe") -> list[BookRecord]:
    return [
        BookRecord(title=f"Book {i}", authors=(author,), categories=(f"Genre {i}",))
        for i in range(count)
    ]


class TestScan:
    """Tests for the scan fold."""

    def test_collects_candidates_from_non_matches(self, refiner, tolkien_books):
        """Test records that don't match still contribute candidates."""
        result = refiner.scan(tolkien_books, "Carpenter", SearchType.AUTHOR)

        assert result.matches == [tolkien_books[2]]
        assert result.candidates == {"J.R.R. Tolkien", "Humphrey Carpenter"}
        assert result.scanned == 3

    def test_stops_at_cap(self, refiner):
        """Test scanning halts once the cap is reached."""
        books = numbered_books(8)

        result = refiner.scan(books, "doe", SearchType.AUTHOR)

        assert len(result.matches) == MATCH_CAP
        assert result.matches == books[:MATCH_CAP]
        assert result.scanned == MATCH_CAP

    def test_records_past_cap_add_no_candidates(self, refiner):
        """Test records after the cap contribute nothing."""
        books = numbered_books(5) + [BookRecord(title="Late", categories=("Horror",))]

        result = refiner.scan(books, "genre", SearchType.GENRE)

        assert "Horror" not in result.candidates
        assert len(result.candidates) == 5

    def test_passes_running_match_count(self, refiner):
        """Test the predicate sees the count of matches accepted so far."""
        books = numbered_books(3)
        with patch(
            "booksage.discovery.refiner.matches_search_criteria", return_value=True
        ) as predicate:
            refiner.scan(books, "doe", SearchType.AUTHOR)

        counts = [call.args[3] for call in predicate.call_args_list]
        assert counts == [0, 1, 2]

    def test_genre_backfill_depends_on_order(self, refiner):
        """Test uncategorized books fill slots only while matches are scarce."""
        strong = [BookRecord(title=f"Horror {i}", categories=("Horror",)) for i in range(3)]
        untagged = BookRecord(title="Untagged")

        early = refiner.scan([untagged] + strong, "horror", SearchType.GENRE)
        late = refiner.scan(strong + [untagged], "horror", SearchType.GENRE)

        assert untagged in early.matches
        assert untagged not in late.matches


class TestRefine:
    """Tests for a single refine pass."""

    def test_no_records(self, refiner):
        """Test an empty fetch returns NoResults without matching anything."""
        with patch("booksage.discovery.refiner.matches_search_criteria") as predicate:
            outcome = refiner.refine("fantasy", SearchType.GENRE, lambda: [])

        assert outcome == NoResults("fantasy", SearchType.GENRE)
        predicate.assert_not_called()

    def test_fetches_once(self, refiner, tolkien_books):
        """Test the fetch collaborator is called exactly once."""
        fetch = MagicMock(return_value=tolkien_books)

        refiner.refine("Tolkien", SearchType.AUTHOR, fetch)

        fetch.assert_called_once_with()

    def test_matches(self, refiner, tolkien_books):
        """Test matching books come back in catalog order."""
        outcome = refiner.refine("Tolkien", SearchType.AUTHOR, lambda: tolkien_books)

        assert isinstance(outcome, Matches)
        assert outcome.term == "Tolkien"
        assert outcome.books == (tolkien_books[0], tolkien_books[1])

    def test_matches_capped(self, refiner):
        """Test no more than five matches are returned."""
        outcome = refiner.refine("doe", SearchType.AUTHOR, lambda: numbered_books(12))

        assert isinstance(outcome, Matches)
        assert len(outcome.books) == MATCH_CAP

    def test_suggests_correction(self, refiner, fantasy_books):
        """Test a typo with no match suggests the closest category."""
        outcome = refiner.refine("mgic", SearchType.GENRE, lambda: fantasy_books)

        assert outcome == SuggestedRetry("mgic", SearchType.GENRE, "Magic")

    def test_no_suggestion(self, refiner, tolkien_books):
        """Test NoResults when nothing is close enough."""
        outcome = refiner.refine("Pratchett", SearchType.AUTHOR, lambda: tolkien_books)

        assert outcome == NoResults("Pratchett", SearchType.AUTHOR)

    def test_fetch_errors_propagate(self, refiner):
        """Test fetch failures are not caught."""
        fetch = MagicMock(side_effect=ConnectionError("boom"))

        with pytest.raises(ConnectionError, match="boom"):
            refiner.refine("fantasy", SearchType.GENRE, fetch)

    def test_custom_genre_rules(self, fantasy_books):
        """Test the refiner passes its rule table to genre matching."""
        refiner = SearchRefiner(genre_rules=[GenreRule(category="magic", term="wizard")])

        outcome = refiner.refine("wizardry", SearchType.GENRE, lambda: fantasy_books)

        assert isinstance(outcome, Matches)
        assert outcome.books == (fantasy_books[1],)


class TestResolve:
    """Tests for following suggestions."""

    def test_returns_matches_directly(self, refiner, tolkien_books):
        """Test a matching search never asks for confirmation."""
        confirm = MagicMock()

        outcome = refiner.resolve(
            "Tolkien", SearchType.AUTHOR, lambda term, st: tolkien_books, confirm
        )

        assert isinstance(outcome, Matches)
        confirm.assert_not_called()

    def test_follows_confirmed_suggestion(self, refiner, fantasy_books):
        """Test a confirmed suggestion re-fetches with the new term."""
        magic_books = [BookRecord(title="Practical Magic", categories=("Magic",))]
        fetch_for = MagicMock(side_effect=[fantasy_books, magic_books])
        confirm = MagicMock(return_value=True)

        outcome = refiner.resolve("mgic", SearchType.GENRE, fetch_for, confirm)

        confirm.assert_called_once_with("Magic")
        assert fetch_for.call_args_list[0].args == ("mgic", SearchType.GENRE)
        assert fetch_for.call_args_list[1].args == ("Magic", SearchType.GENRE)
        assert outcome == Matches("Magic", SearchType.GENRE, tuple(magic_books))

    def test_declined_suggestion(self, refiner, fantasy_books):
        """Test declining a suggestion ends with NoResults for the typed term."""
        fetch_for = MagicMock(return_value=fantasy_books)

        outcome = refiner.resolve(
            "mgic", SearchType.GENRE, fetch_for, lambda suggestion: False
        )

        assert outcome == NoResults("mgic", SearchType.GENRE)
        fetch_for.assert_called_once()

    def test_depth_cap(self, refiner):
        """Test endless suggestions stop after max_depth corrections."""
        # Each search suggests a new term but never matches it
        chain = {
            "aaaa": "aaab",
            "aaab": "aabb",
            "aabb": "abbb",
            "abbb": "bbbb",
        }

        def fetch_for(term, search_type):
            return [BookRecord(title=chain.get(term, "zzzzzzzz"))]

        confirm = MagicMock(return_value=True)

        outcome = refiner.resolve(
            "aaaa", SearchType.TITLE, fetch_for, confirm, max_depth=2
        )

        assert confirm.call_count == 2
        assert outcome == NoResults("aabb", SearchType.TITLE)

    def test_zero_depth_never_confirms(self, refiner, fantasy_books):
        """Test max_depth=0 turns suggestions straight into NoResults."""
        confirm = MagicMock(return_value=True)

        outcome = refiner.resolve(
            "mgic", SearchType.GENRE, lambda t, s: fantasy_books, confirm, max_depth=0
        )

        assert outcome == NoResults("mgic", SearchType.GENRE)
        confirm.assert_not_called()

    def test_fetch_errors_propagate(self, refiner):
        """Test errors from a retry fetch reach the caller."""
        fetch_for = MagicMock(
            side_effect=[[BookRecord(title="Magic", categories=("Magic",))], RuntimeError("down")]
        )

        with pytest.raises(RuntimeError, match="down"):
            refiner.resolve("mgic", SearchType.TITLE, fetch_for, lambda s: True)
