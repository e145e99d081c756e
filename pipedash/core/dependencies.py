"""Dependency providers for API handlers."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import HTTPException, Query, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from pipedash.core.config import Config, get_config
from pipedash.database.db import get_db
from pipedash.schemas.filters import DateRange, FilterState


def get_settings() -> Config:
    """Return validated application configuration."""
    return get_config()


def get_db_session() -> Generator[Session, None, None]:
    """Yield SQLAlchemy session for dependency injection."""
    yield from get_db()


def get_filter_state(
    industry_groups: list[str] = Query(default=[]),
    client_leader_ids: list[int] = Query(default=[]),
    stages: list[str] = Query(default=[]),
    start: str = Query(default=""),
    end: str = Query(default=""),
    search: str = Query(default=""),
) -> FilterState:
    """Build the dashboard filter criteria from repeated query parameters."""
    try:
        return FilterState(
            industry_groups=industry_groups,
            client_leader_ids=client_leader_ids,
            stages=stages,
            date_range=DateRange(start=start, end=end),
            search_query=search,
        )
    except PydanticValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Date range bounds must be ISO dates (YYYY-MM-DD).",
        ) from exc
