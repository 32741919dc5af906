"""Command-line interface for booksage.

Built with Typer for commands and Rich for beautiful output.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .api import GoogleBooksClient, GoogleBooksError
from .config import Config, ConfigError, get_config
from .discovery import (
    Matches,
    Outcome,
    SearchRefiner,
    SearchType,
    load_genre_rules,
)
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)

# Create the main app
app = typer.Typer(
    name="booksage",
    help="Discover books by genre, author or title.",
)

# Rich console for pretty output
console = Console()

MENU_CHOICES = {
    1: SearchType.GENRE,
    2: SearchType.AUTHOR,
    3: SearchType.TITLE,
}
EXIT_CHOICE = 4


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{escape(message)}[/dim]")


def load_config() -> Config:
    """Load and validate configuration, exiting on problems."""
    try:
        config = get_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1)

    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        raise typer.Exit(1)

    return config


def build_refiner(config: Config) -> SearchRefiner:
    """Create a refiner using the configured genre rules."""
    try:
        rules = load_genre_rules(config.genre_rules_file)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1)
    return SearchRefiner(genre_rules=rules)


def format_results_table(outcome: Matches) -> Table:
    """Create a rich table for a set of matches."""
    heading = (
        f"Top {len(outcome.books)} Books matching "
        f"{outcome.search_type.value}: {escape(outcome.term)}"
    )
    table = Table(
        title=heading,
        show_header=True,
        header_style="bold magenta",
        show_lines=True,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author(s)", style="green", max_width=30)
    table.add_column("Published", style="yellow", no_wrap=True)
    table.add_column("Goodreads", style="blue", overflow="fold")

    for i, book in enumerate(outcome.books, 1):
        table.add_row(
            str(i),
            escape(book.full_title),
            escape(book.author_display),
            escape(book.published_date or "-"),
            book.goodreads_url,
        )

    return table


def show_outcome(outcome: Outcome) -> None:
    """Render a resolved search outcome."""
    if isinstance(outcome, Matches):
        console.print()
        console.print(format_results_table(outcome))
        return

    console.print(
        f"\nSorry, we couldn't find any matches for: [bold]{escape(outcome.term)}[/bold]"
    )


def make_confirm(term: str, assume_yes: bool = False):
    """Build the callback that asks whether to retry with a suggestion.

    The callback remembers which term it is correcting, so each prompt names
    the search that just came back empty.
    """
    current = term

    def confirm(suggestion: str) -> bool:
        nonlocal current
        console.print(f"\nNo results found for: {escape(current)}")
        if assume_yes:
            print_info(f"Retrying with: {suggestion}")
            accepted = True
        else:
            accepted = typer.confirm(f"Did you mean: {suggestion}?", default=False)
        if accepted:
            current = suggestion
        return accepted

    return confirm


def run_search(
    term: str,
    search_type: SearchType,
    client: GoogleBooksClient,
    refiner: SearchRefiner,
    max_depth: int,
    assume_yes: bool = False,
) -> Optional[Outcome]:
    """Resolve a search and display it.

    Returns:
        The outcome, or None if the catalog could not be reached
    """
    print_info(f"Searching Google Books by {search_type.value} for: {term}...")
    try:
        outcome = refiner.resolve(
            term,
            search_type,
            client.search,
            make_confirm(term, assume_yes),
            max_depth=max_depth,
        )
    except GoogleBooksError as e:
        logger.error("Search for %r failed: %s", term, e)
        print_error(f"Error searching for books: {e}")
        return None

    show_outcome(outcome)
    return outcome


def _search_command(
    term: str,
    search_type: SearchType,
    max_results: Optional[int],
    assume_yes: bool,
) -> None:
    """Shared body of the one-shot search commands."""
    term = term.strip()
    if not term:
        print_error(f"Please enter a {search_type.label} to search for.")
        raise typer.Exit(1)

    config = load_config()
    client = GoogleBooksClient.from_config(config)
    if max_results is not None:
        client.max_results = max_results
    refiner = build_refiner(config)

    try:
        outcome = run_search(
            term, search_type, client, refiner, config.max_suggestion_depth, assume_yes
        )
    finally:
        client.close()

    if outcome is None:
        raise typer.Exit(1)


# ============================================================================
# Commands
# ============================================================================


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Discover books by genre, author or title.

    Without a command, the interactive menu starts.
    """
    try:
        config = get_config()
    except ConfigError:
        # Reported by the command when it loads config
        setup_logging(log_level or "WARNING")
    else:
        setup_logging(log_level or config.log_level, config.log_file)

    if ctx.invoked_subcommand is None:
        menu()


@app.command()
def genre(
    term: str = typer.Argument(..., help="Genre to search for"),
    max_results: Optional[int] = typer.Option(
        None, "--max-results", "-n", min=1, max=40, help="Volumes to request from the API"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept spelling suggestions"),
) -> None:
    """Search for books by genre."""
    _search_command(term, SearchType.GENRE, max_results, yes)


@app.command()
def author(
    term: str = typer.Argument(..., help="Author name to search for"),
    max_results: Optional[int] = typer.Option(
        None, "--max-results", "-n", min=1, max=40, help="Volumes to request from the API"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept spelling suggestions"),
) -> None:
    """Search for books by author."""
    _search_command(term, SearchType.AUTHOR, max_results, yes)


@app.command()
def title(
    term: str = typer.Argument(..., help="Book title to search for"),
    max_results: Optional[int] = typer.Option(
        None, "--max-results", "-n", min=1, max=40, help="Volumes to request from the API"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept spelling suggestions"),
) -> None:
    """Search for books by title."""
    _search_command(term, SearchType.TITLE, max_results, yes)


def _show_menu() -> None:
    console.print("\n" + "-" * 40)
    console.print("Please select an option:")
    console.print("1. Search by genre")
    console.print("2. Search by author")
    console.print("3. Search by book title")
    console.print("4. Exit")
    console.print("-" * 40)


def _prompt_choice() -> int:
    """Prompt until a valid menu number is entered."""
    while True:
        raw = typer.prompt("Enter your choice (1-4)").strip()
        try:
            choice = int(raw)
        except ValueError:
            console.print("Invalid input. Please enter a number.")
            continue
        if 1 <= choice <= EXIT_CHOICE:
            return choice
        console.print("Invalid selection. Please enter a number between 1 and 4.")


def _prompt_term(search_type: SearchType) -> str:
    """Prompt until a non-blank search term is entered."""
    while True:
        term = typer.prompt(f"\nEnter {search_type.label} to search for").strip()
        if term:
            return term
        print_warning("Search term cannot be empty.")


@app.command()
def menu() -> None:
    """Run the interactive discovery menu."""
    config = load_config()
    client = GoogleBooksClient.from_config(config)
    refiner = build_refiner(config)

    console.print(
        Panel(
            "Your personal book discovery assistant",
            title="Welcome to BookSage!",
            border_style="cyan",
        )
    )

    try:
        while True:
            _show_menu()
            choice = _prompt_choice()
            if choice == EXIT_CHOICE:
                break

            search_type = MENU_CHOICES[choice]
            term = _prompt_term(search_type)
            run_search(term, search_type, client, refiner, config.max_suggestion_depth)
    finally:
        client.close()

    console.print("Thank you for using BookSage. Goodbye!")


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"booksage version {__version__}")


if __name__ == "__main__":
    app()
