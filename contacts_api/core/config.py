"""
Environment-driven settings for the contact directory service.

Values are read when ``load_settings`` is called, after ``load_dotenv``
has merged a local ``.env`` file into the environment.  The store
settings have no defaults; ``Settings.missing`` reports which of them
are unset so startup can fail with a clear message.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    mongo_uri: Optional[str] = None
    db_name: Optional[str] = None
    collection: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8081
    log_level: str = "INFO"
    list_limit: int = 100
    ensure_unique_index: bool = True

    def missing(self) -> List[str]:
        """Return the environment names of unset store settings."""
        required = {
            "MONGO_URI": self.mongo_uri,
            "DBNAME": self.db_name,
            "COLLECTION": self.collection,
        }
        return [name for name, value in required.items() if not value]

    def validate(self) -> None:
        missing = self.missing()
        if missing:
            raise ConfigurationError(
                "Missing required settings: " + ", ".join(missing)
            )
        if self.list_limit < 1:
            raise ConfigurationError("LIST_LIMIT must be a positive integer")


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    # Existing environment variables win over the .env file
    load_dotenv(dotenv_path)
    try:
        port = int(os.getenv("PORT", "8081"))
        list_limit = int(os.getenv("LIST_LIMIT", "100"))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

    return Settings(
        mongo_uri=os.getenv("MONGO_URI"),
        db_name=os.getenv("DBNAME"),
        collection=os.getenv("COLLECTION"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        list_limit=list_limit,
        ensure_unique_index=_as_bool(os.getenv("ENSURE_UNIQUE_INDEX", "true")),
    )
