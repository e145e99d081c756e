"""CSV export, import template and JSON backup endpoints for API v1."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from pipedash.api.v1._errors import raise_http
from pipedash.core.dependencies import get_db_session, get_filter_state
from pipedash.core.exceptions import NotFoundError, RestoreError
from pipedash.schemas.common import RestoreResponse
from pipedash.schemas.filters import FilterState
from pipedash.services.client_leader_service import ClientLeaderService
from pipedash.services.dashboard_repository import DashboardRepository
from pipedash.services.deal_service import DealService
from pipedash.services.export_service import export_deals_csv, export_pipeline_csv, template_csv
from pipedash.services.job_service import JobService

router = APIRouter(tags=["exports"])


def _attachment(content: str, filename: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/exports/deals.csv")
def export_deals(
    filters: FilterState = Depends(get_filter_state),
    db: Session = Depends(get_db_session),
) -> Response:
    deals = DealService(db).list_deals(filters)
    leaders = ClientLeaderService(db).list_leaders()
    return _attachment(
        export_deals_csv(deals, leaders),
        f"pipeline_{date.today().isoformat()}.csv",
        "text/csv",
    )


@router.get("/exports/pipeline.csv")
def export_pipeline(
    filters: FilterState = Depends(get_filter_state),
    db: Session = Depends(get_db_session),
) -> Response:
    opportunities = DealService(db).list_deals(filters)
    jobs = JobService(db).list_jobs(filters)
    return _attachment(
        export_pipeline_csv(opportunities, jobs),
        f"pipeline_export_{date.today().isoformat()}.csv",
        "text/csv",
    )


@router.get("/exports/templates/{schema_id}")
def download_template(schema_id: str) -> Response:
    try:
        content = template_csv(schema_id)
    except NotFoundError as exc:
        raise_http(exc)
    return _attachment(content, f"{schema_id}_import_template.csv", "text/csv")


@router.get("/exports/backup")
def download_backup(db: Session = Depends(get_db_session)) -> Response:
    return _attachment(
        DashboardRepository(db).dump_backup(),
        f"dashboard_backup_{date.today().isoformat()}.json",
        "application/json",
    )


@router.post("/exports/restore", response_model=RestoreResponse)
def restore_backup(file: UploadFile = File(...), db: Session = Depends(get_db_session)) -> RestoreResponse:
    """Replace every client leader and deal with the uploaded backup."""
    try:
        leaders, deals = DashboardRepository(db).restore(file.file.read())
    except RestoreError as exc:
        raise_http(exc)
    return RestoreResponse(client_leaders=leaders, deals=deals)
