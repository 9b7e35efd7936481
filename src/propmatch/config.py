"""
Centralized configuration.
Loads environment variables and defines global settings and constants.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (where the .env lives)
# config.py -> propmatch/ -> src/ -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gemini (embeddings)
    gemini_api_key: Optional[str] = Field(None, description="Google Gemini API key")
    embedding_model: str = Field(
        "gemini-embedding-001", description="Embedding model name"
    )
    embedding_dim: int = Field(
        768, description="Embedding dimensionality (768, 1536 or 3072)"
    )

    # Supabase
    supabase_url: Optional[str] = Field(None, description="Supabase project URL")
    supabase_key: Optional[str] = Field(None, description="Supabase anon key")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key for admin operations"
    )

    # Telegram
    telegram_bot_token: Optional[str] = Field(None, description="Telegram bot token")

    # Corpus
    corpus_backend: str = Field(
        "json", description="Corpus store backend: 'json' or 'supabase'"
    )
    corpus_path: Path = Field(
        _PROJECT_ROOT / "data" / "embeddings.json",
        description="Path of the JSON corpus file",
    )

    # Matching
    similarity_floor: float = Field(
        0.3, ge=-1.0, le=1.0, description="Minimum cosine similarity for a match"
    )
    max_candidates: int = Field(
        10, ge=1, description="Ranked candidates kept before hard filtering"
    )
    use_demo_corpus: bool = Field(
        False, description="Search the built-in demo listings instead of embeddings"
    )
    listing_link: str = Field("", description="Link attached to matched listings")

    # Conversation
    confirm_before_search: bool = Field(
        False, description="Show a summary with search/restart before searching"
    )

    # Ingestion
    index_concurrency: int = Field(
        1, ge=1, description="Records embedded in parallel during indexing"
    )
    embedding_retry_attempts: int = Field(
        3, ge=1, description="Embedding attempts per record when ingesting"
    )

    # Logging
    log_level: str = Field("INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """Returns the cached settings."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configures stdlib logging and structlog for the entry points."""
    level = level or get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# System constants
PROPERTY_TYPES = [
    "Apartment",
    "Villa",
    "Penthouse",
    "Townhouse",
    "Studio",
    "Flat",
    "House",
]

# Ordered: a name must come before any shorter name it contains
KNOWN_LOCATIONS = [
    "Palm Jumeirah",
    "Jumeirah Lake Towers",
    "Jumeirah Village Circle",
    "Jumeirah",
    "Dubai Marina",
    "Downtown Dubai",
    "Business Bay",
    "Dubai Hills",
    "Arabian Ranches",
    "JBR",
    "JLT",
    "Thiruvananthapuram",
    "Trivandrum",
    "Kerala",
    "Mumbai",
    "Bangalore",
    "Delhi",
]

NO_PREFERENCE = "No Preference"
UNSPECIFIED_LOCATION = "Location not specified"
GENERIC_PROPERTY_NAME = "Property"

DEFAULT_PROPERTY_TYPE = "Apartment"
DEFAULT_PRICE_RANGE = "Price on request"
DEFAULT_SIZE = "Size varies"
DEFAULT_BEDROOMS = 2
DEFAULT_MIN_PRICE = 1_000_000.0
DEFAULT_AMENITIES = ["24/7 Security", "Parking"]

# price_max = price_min * PRICE_MAX_MULTIPLIER when no explicit maximum is found
PRICE_MAX_MULTIPLIER = 1.5

DESCRIPTION_LENGTH = 500
RECORD_WINDOW = 300

# Upper budget bound for open-ended choices like "10000000+"
UNBOUNDED_BUDGET = 999_999_999
