"""BookSage - command-line book discovery assistant."""

__version__ = "0.1.0"
