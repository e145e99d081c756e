"""KPI and chart series schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Metrics(BaseModel):
    total_revenue: float = 0.0
    avg_deal_size: float = 0.0
    win_rate: float = 0.0
    pipeline_value: float = 0.0
    deal_count: int = 0


class FunnelEntry(BaseModel):
    name: str
    value: int
    fill: str


class GroupRevenue(BaseModel):
    name: str
    revenue: float


class MonthlyPoint(BaseModel):
    month: str
    year: int
    deals: int
    revenue: float


class ChartData(BaseModel):
    funnel_data: list[FunnelEntry] = Field(default_factory=list)
    revenue_by_group: list[GroupRevenue] = Field(default_factory=list)
    monthly_data: list[MonthlyPoint] = Field(default_factory=list)


class LeaderSummary(BaseModel):
    client_leader_id: int
    name: str
    industry_groups: list[str] = Field(default_factory=list)
    deal_count: int
    pipeline_value: float


class JobMetrics(BaseModel):
    total_jobs: int = 0
    active_jobs: int = 0
    completed_jobs: int = 0
    total_job_value: float = 0.0
    avg_job_size: float = 0.0
    win_rate: float = 0.0
