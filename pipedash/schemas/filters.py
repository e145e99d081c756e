"""Filter criteria schemas shared by the API, dashboard and services."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, field_validator


class DateRange(BaseModel):
    """Inclusive ISO date bounds; an empty string means unbounded."""

    start: str = ""
    end: str = ""

    @field_validator("start", "end")
    @classmethod
    def bound_is_iso_date(cls, value: str) -> str:
        value = (value or "").strip()
        if value:
            date.fromisoformat(value[:10])
        return value

    def start_date(self) -> date | None:
        return date.fromisoformat(self.start[:10]) if self.start else None

    def end_date(self) -> date | None:
        return date.fromisoformat(self.end[:10]) if self.end else None


class FilterState(BaseModel):
    industry_groups: list[str] = Field(default_factory=list)
    client_leader_ids: list[int] = Field(default_factory=list)
    stages: list[str] = Field(default_factory=list)
    date_range: DateRange = Field(default_factory=DateRange)
    search_query: str = ""

    @property
    def is_empty(self) -> bool:
        return not (
            self.industry_groups
            or self.client_leader_ids
            or self.stages
            or self.date_range.start
            or self.date_range.end
            or self.search_query
        )
