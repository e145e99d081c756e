"""Process bootstrap for the API and the scripts."""

from __future__ import annotations

import logging

from pipedash.core.config import get_config
from pipedash.core.logging_config import configure_logging
from pipedash.database.db import get_active_database_url, init_db, verify_database_connection

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """Check the database and report the limits that shape CSV imports.

    An unreachable database only stops startup when
    ``DB_CONNECTIVITY_REQUIRED`` is set.
    """
    config = get_config()
    scheme = get_active_database_url().split("://", 1)[0]
    if not verify_database_connection():
        if config.DB_CONNECTIVITY_REQUIRED:
            raise RuntimeError("Database connectivity check failed.")
        logger.warning(
            "startup.database_unreachable",
            extra={"event": "startup.database_unreachable", "database_url_scheme": scheme},
        )

    if config.is_production and scheme == "sqlite":
        logger.warning("startup.sqlite_in_production", extra={"event": "startup.sqlite_in_production"})

    logger.info(
        "startup.ready",
        extra={
            "event": "startup.ready",
            "env": config.ENV,
            "database_url_scheme": scheme,
            "import_max_file_mb": config.IMPORT_MAX_FILE_MB,
            "auto_map_threshold": config.AUTO_MAP_THRESHOLD,
        },
    )


def bootstrap() -> None:
    configure_logging()
    validate_startup_config()
    init_db()
