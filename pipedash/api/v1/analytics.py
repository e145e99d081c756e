"""Dashboard KPI and chart endpoints for API v1.

All routes accept the same repeated filter query parameters
(``industry_groups``, ``client_leader_ids``, ``stages``, ``start``, ``end``,
``search``) and aggregate over the filtered records.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pipedash.core.dependencies import get_db_session, get_filter_state
from pipedash.schemas.filters import FilterState
from pipedash.schemas.metrics import ChartData, JobMetrics, LeaderSummary, Metrics
from pipedash.services import metrics_service
from pipedash.services.client_leader_service import ClientLeaderService
from pipedash.services.deal_service import DealService
from pipedash.services.job_service import JobService

router = APIRouter(tags=["analytics"])


@router.get("/analytics/metrics", response_model=Metrics)
def get_metrics(
    filters: FilterState = Depends(get_filter_state),
    db: Session = Depends(get_db_session),
) -> Metrics:
    return metrics_service.compute_metrics(DealService(db).list_deals(filters))


@router.get("/analytics/charts", response_model=ChartData)
def get_charts(
    filters: FilterState = Depends(get_filter_state),
    db: Session = Depends(get_db_session),
) -> ChartData:
    return metrics_service.compute_chart_data(DealService(db).list_deals(filters))


@router.get("/analytics/leaders", response_model=list[LeaderSummary])
def get_leader_summaries(
    filters: FilterState = Depends(get_filter_state),
    db: Session = Depends(get_db_session),
) -> list[LeaderSummary]:
    leaders = ClientLeaderService(db).list_leaders()
    if filters.client_leader_ids:
        leaders = [leader for leader in leaders if leader.id in filters.client_leader_ids]
    return metrics_service.leader_summaries(leaders, DealService(db).list_deals(filters))


@router.get("/analytics/jobs", response_model=JobMetrics)
def get_job_metrics(
    filters: FilterState = Depends(get_filter_state),
    db: Session = Depends(get_db_session),
) -> JobMetrics:
    return metrics_service.job_metrics(JobService(db).list_jobs(filters))
