"""Shared session handling for the pipeline services."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.orm import Session

from pipedash.database import db as db_module


class BaseService:
    """Base class for services that operate on a SQLAlchemy session.

    A service built without a session opens its own and closes it on
    ``close``; an injected session belongs to the caller.
    """

    def __init__(self, db: Session | None = None) -> None:
        self._owns_session = db is None
        self.db = db or db_module.SessionLocal()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        if self._owns_session:
            self.db.close()

    @staticmethod
    def apply_changes(record: Any, changes: Mapping[str, Any], keep_when_none: Iterable[str] = ()) -> list[str]:
        """Copy a partial update onto ``record``.

        ``None`` is ignored for the columns in ``keep_when_none`` and enum
        members are stored by value. Returns the fields written.
        """
        protected = set(keep_when_none)
        written: list[str] = []
        for field, value in changes.items():
            if value is None and field in protected:
                continue
            if isinstance(value, enum.Enum):
                value = value.value
            setattr(record, field, value)
            written.append(field)
        return written

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
