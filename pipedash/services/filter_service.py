"""Pure record filtering shared by the API, dashboard and exports.

Records are duck-typed: ORM rows and pydantic responses both expose
``industry_group``, ``client_leader_id``, ``stage``, ``created_at``, ``name``
and ``notes``.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import Any, TypeVar

from pipedash.schemas.filters import FilterState

T = TypeVar("T")


def _calendar_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    return date.fromisoformat(text[:10])


def matches(record: Any, state: FilterState) -> bool:
    """Return True when the record satisfies every active predicate."""
    if state.industry_groups and getattr(record, "industry_group", None) not in state.industry_groups:
        return False

    if state.client_leader_ids and getattr(record, "client_leader_id", None) not in state.client_leader_ids:
        return False

    if state.stages and getattr(record, "stage", None) not in state.stages:
        return False

    start = state.date_range.start_date()
    end = state.date_range.end_date()
    if start or end:
        created = _calendar_date(getattr(record, "created_at", None))
        if created is None:
            return False
        if start and created < start:
            return False
        if end and created > end:
            return False

    if state.search_query:
        query = state.search_query.lower()
        name = (getattr(record, "name", "") or "").lower()
        notes = (getattr(record, "notes", "") or "").lower()
        if query not in name and query not in notes:
            return False

    return True


def filter_records(records: Iterable[T], state: FilterState | None = None) -> list[T]:
    """Return the records passing all active filters, preserving order."""
    items = list(records)
    if state is None or state.is_empty:
        return items
    return [record for record in items if matches(record, state)]
