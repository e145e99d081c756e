"""Engine and session factory for the pipeline database."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pipedash.core.config import get_config

logger = logging.getLogger(__name__)

config = get_config()
DATABASE_URL = config.DATABASE_URL


def _engine_options(database_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": config.LOG_LEVEL == "DEBUG" and not config.is_production}
    if database_url.startswith("sqlite"):
        # Sessions are opened from FastAPI and Streamlit worker threads.
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(pool_pre_ping=True, pool_recycle=3600, pool_size=10, max_overflow=20)
    return options


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_active_database_url() -> str:
    return DATABASE_URL


def get_db() -> Generator[Session, None, None]:
    """Yield a session for FastAPI dependencies."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Session for scripts and the dashboard; uncommitted work is rolled back on error."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create every table registered on the model metadata."""
    from pipedash.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info(
        "database.initialized",
        extra={
            "event": "database.initialized",
            "database_url_scheme": DATABASE_URL.split("://", 1)[0],
            "tables": sorted(Base.metadata.tables),
        },
    )


def verify_database_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("database.connection_failed", extra={"event": "database.connection_failed"})
        return False
    return True
