"""Configuration module for the Pipedash application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from pipedash.core.exceptions import ConfigurationError

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str
    IMPORT_MAX_FILE_MB: int
    IMPORT_PREVIEW_ROWS: int
    AUTO_MAP_THRESHOLD: float

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def import_max_bytes(self) -> int:
        return self.IMPORT_MAX_FILE_MB * 1024 * 1024


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=(resolved_env != "production"))

    config = Config(
        APP_NAME="Pipedash",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./pipedash.db"),
        DB_CONNECTIVITY_REQUIRED=_as_bool(
            os.getenv("DB_CONNECTIVITY_REQUIRED"), default=(resolved_env == "production")
        ),
        API_PREFIX=os.getenv("API_PREFIX", "/api/v1"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
        IMPORT_MAX_FILE_MB=int(os.getenv("IMPORT_MAX_FILE_MB", "50")),
        IMPORT_PREVIEW_ROWS=int(os.getenv("IMPORT_PREVIEW_ROWS", "10")),
        AUTO_MAP_THRESHOLD=float(os.getenv("AUTO_MAP_THRESHOLD", "0.7")),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.IMPORT_MAX_FILE_MB < 1:
        raise ConfigurationError("IMPORT_MAX_FILE_MB must be >= 1.")
    if config.IMPORT_PREVIEW_ROWS < 1:
        raise ConfigurationError("IMPORT_PREVIEW_ROWS must be >= 1.")
    if not 0.0 <= config.AUTO_MAP_THRESHOLD <= 1.0:
        raise ConfigurationError("AUTO_MAP_THRESHOLD must be between 0 and 1.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.is_production and "change_me" in config.DATABASE_URL.lower():
        raise ConfigurationError("Production DATABASE_URL uses placeholder credentials.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
