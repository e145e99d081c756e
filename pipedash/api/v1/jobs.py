"""Job (project) endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pipedash.api.v1._errors import not_found, raise_http
from pipedash.core.dependencies import get_db_session, get_filter_state
from pipedash.core.exceptions import ValidationError
from pipedash.schemas.common import DeleteResponse
from pipedash.schemas.filters import FilterState
from pipedash.schemas.jobs import JobCreateRequest, JobResponse, JobUpdateRequest
from pipedash.services.job_service import JobService

router = APIRouter(tags=["jobs"])


@router.get("/jobs", response_model=list[JobResponse])
def list_jobs(
    filters: FilterState = Depends(get_filter_state),
    project_status: str | None = Query(default=None),
    priority: str | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> list[JobResponse]:
    jobs = JobService(db).list_jobs(filters, project_status=project_status, priority=priority)
    return [JobResponse.model_validate(job) for job in jobs]


@router.get("/jobs/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db_session)) -> JobResponse:
    job = JobService(db).get_job(job_id)
    if job is None:
        raise not_found("Job", job_id)
    return JobResponse.model_validate(job)


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(payload: JobCreateRequest, db: Session = Depends(get_db_session)) -> JobResponse:
    try:
        job = JobService(db).create_job(payload)
    except ValidationError as exc:
        raise_http(exc)
    return JobResponse.model_validate(job)


@router.patch("/jobs/{job_id}", response_model=JobResponse)
def update_job(job_id: int, payload: JobUpdateRequest, db: Session = Depends(get_db_session)) -> JobResponse:
    job = JobService(db).update_job(job_id, payload)
    if job is None:
        raise not_found("Job", job_id)
    return JobResponse.model_validate(job)


@router.delete("/jobs/{job_id}", response_model=DeleteResponse)
def delete_job(job_id: int, db: Session = Depends(get_db_session)) -> DeleteResponse:
    if not JobService(db).delete_job(job_id):
        raise not_found("Job", job_id)
    return DeleteResponse(id=job_id)
