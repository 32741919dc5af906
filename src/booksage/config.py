"""Configuration management for booksage.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_API_URL = "https://www.googleapis.com/books/v1/volumes"


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


def _int_from_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


@dataclass
class Config:
    """Application configuration."""

    # Google Books
    api_url: str
    api_key: Optional[str]
    max_results: int
    timeout: int  # seconds

    # Suggestions
    max_suggestion_depth: int
    genre_rules_file: Optional[Path]

    # Logging
    log_level: str
    log_file: Optional[Path]

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        rules_file = os.environ.get("BOOKSAGE_GENRE_RULES_FILE")
        log_file = os.environ.get("BOOKSAGE_LOG_FILE")

        return cls(
            api_url=os.environ.get("BOOKSAGE_API_URL", DEFAULT_API_URL),
            api_key=os.environ.get("GOOGLE_BOOKS_API_KEY") or None,
            max_results=_int_from_env("BOOKSAGE_MAX_RESULTS", 20),
            timeout=_int_from_env("BOOKSAGE_TIMEOUT", 10),
            max_suggestion_depth=_int_from_env("BOOKSAGE_MAX_SUGGESTION_DEPTH", 5),
            genre_rules_file=Path(rules_file).expanduser() if rules_file else None,
            log_level=os.environ.get("BOOKSAGE_LOG_LEVEL", "WARNING").upper(),
            log_file=Path(log_file).expanduser() if log_file else None,
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        # Google Books caps maxResults at 40
        if not 1 <= self.max_results <= 40:
            errors.append(f"Max results must be between 1 and 40, got {self.max_results}")
        if self.timeout <= 0:
            errors.append(f"Timeout must be positive, got {self.timeout}")
        if self.max_suggestion_depth < 0:
            errors.append(
                f"Max suggestion depth cannot be negative, got {self.max_suggestion_depth}"
            )
        if self.genre_rules_file and not self.genre_rules_file.is_file():
            errors.append(f"Genre rules file not found: {self.genre_rules_file}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
