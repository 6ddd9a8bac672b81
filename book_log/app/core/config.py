"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  A ``.env`` file in the working directory is
loaded first, so local secrets (the admin password in particular) do
not need to be exported by hand.  Defaults are provided for all
fields; tests construct ``Settings`` directly with explicit values.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Book Log")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database.  Relative paths are resolved against
    # the current working directory by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "book_log.db")

    # Shared secret required by every mutating route.  An empty value
    # disables the check, which is only sensible on a private machine.
    admin_password: str = os.getenv("ADMIN_PASSWORD", "")

    # Open Library search endpoint used to resolve titles to ISBNs and
    # the cover image URL built from a resolved ISBN.
    catalog_search_url: str = os.getenv(
        "CATALOG_SEARCH_URL", "https://openlibrary.org/search.json"
    )
    cover_url_template: str = os.getenv(
        "COVER_URL_TEMPLATE", "https://covers.openlibrary.org/b/isbn/{isbn}-M.jpg"
    )

    # When true a book whose title does not resolve to an ISBN is
    # rejected.  When false it is stored without one and shown without
    # a cover.
    require_isbn: bool = _env_flag("REQUIRE_ISBN", "true")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
