"""Job request/response schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from pipedash.core.enums import JobStage, Priority, ProjectStatus


class JobCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    job_code: str | None = Field(default=None, max_length=60)
    deal_id: int | None = Field(default=None, ge=1)
    account_id: int | None = Field(default=None, ge=1)
    value: float = Field(default=0.0, ge=0)
    stage: str = Field(default=JobStage.PROPOSAL_PREPARATION.value, min_length=2, max_length=60)
    project_status: ProjectStatus = ProjectStatus.TO_BE_STARTED
    client_leader_id: int | None = Field(default=None, ge=1)
    industry_group: str | None = Field(default=None, max_length=60)
    expected_confirmation_date: date | None = None
    project_start_date: date | None = None
    project_end_date: date | None = None
    notes: str = Field(default="", max_length=10000)
    priority: Priority = Priority.MEDIUM
    lost_reason: str | None = Field(default=None, max_length=60)


class JobUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    account_id: int | None = Field(default=None, ge=1)
    value: float | None = Field(default=None, ge=0)
    stage: str | None = Field(default=None, min_length=2, max_length=60)
    project_status: ProjectStatus | None = None
    client_leader_id: int | None = Field(default=None, ge=1)
    industry_group: str | None = Field(default=None, max_length=60)
    expected_confirmation_date: date | None = None
    project_start_date: date | None = None
    project_end_date: date | None = None
    notes: str | None = Field(default=None, max_length=10000)
    priority: Priority | None = None
    lost_reason: str | None = Field(default=None, max_length=60)


class JobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_code: str | None = None
    name: str
    deal_id: int | None = None
    account_id: int | None = None
    value: float
    stage: str
    project_status: str
    client_leader_id: int | None = None
    industry_group: str | None = None
    expected_confirmation_date: date | None = None
    project_start_date: date | None = None
    project_end_date: date | None = None
    notes: str = ""
    priority: str
    lost_reason: str | None = None
    created_at: datetime
    last_activity: datetime
