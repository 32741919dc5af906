"""Main entry point for the booksage package."""

from booksage.cli import app


def main():
    """Run the booksage command-line interface."""
    app(prog_name="booksage")


if __name__ == "__main__":
    main()
