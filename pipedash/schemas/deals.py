"""Deal request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pipedash.core.enums import DEAL_STAGES, DealStage


def _known_stage(value: str | None) -> str | None:
    if value is not None and value not in DEAL_STAGES:
        raise ValueError(f"Unknown deal stage: {value}")
    return value


class CustomFields(BaseModel):
    """Known custom fields plus a bag for unmapped imported columns."""

    priority: str | None = None
    source: str | None = None
    competitor: str | None = None
    extra: dict[str, str] = Field(default_factory=dict)


class DealCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    value: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    stage: str = Field(default=DealStage.LEAD.value, min_length=2, max_length=60)
    probability: int | None = Field(default=None, ge=0, le=100)
    client_leader_id: int = Field(ge=1)
    account_id: int | None = Field(default=None, ge=1)
    industry_group: str | None = Field(default=None, max_length=60)
    expected_close_date: date | None = None
    notes: str = Field(default="", max_length=10000)
    custom_fields: CustomFields = Field(default_factory=CustomFields)
    lost_reason: str | None = Field(default=None, max_length=60)
    created_at: datetime | None = None

    _check_stage = field_validator("stage")(_known_stage)


class DealUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    value: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    stage: str | None = Field(default=None, min_length=2, max_length=60)
    probability: int | None = Field(default=None, ge=0, le=100)
    client_leader_id: int | None = Field(default=None, ge=1)
    account_id: int | None = Field(default=None, ge=1)
    industry_group: str | None = Field(default=None, max_length=60)
    expected_close_date: date | None = None
    notes: str | None = Field(default=None, max_length=10000)
    custom_fields: CustomFields | None = None
    lost_reason: str | None = Field(default=None, max_length=60)

    _check_stage = field_validator("stage")(_known_stage)


class DealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    value: float
    stage: str
    probability: int
    client_leader_id: int
    account_id: int | None = None
    industry_group: str | None = None
    created_at: datetime
    last_activity: datetime
    expected_close_date: date | None = None
    notes: str = ""
    custom_fields: CustomFields = Field(default_factory=CustomFields)
    lost_reason: str | None = None
