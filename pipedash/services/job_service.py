"""Job (project) service."""

from __future__ import annotations

import logging

from pipedash.core.exceptions import ValidationError
from pipedash.models import Account, Deal, Job
from pipedash.models.base import utcnow
from pipedash.schemas.filters import FilterState
from pipedash.schemas.jobs import JobCreateRequest, JobUpdateRequest
from pipedash.services.activity_log_service import ActivityLogService
from pipedash.services.base_service import BaseService
from pipedash.services.filter_service import filter_records

logger = logging.getLogger(__name__)

_NOT_NULL_FIELDS = {"name", "value", "stage", "project_status", "notes", "priority"}


def format_job_code(job_id: int, year: int) -> str:
    return f"JOB-{year}-{job_id:04d}"


class JobService(BaseService):
    """Service for job CRUD and job creation from opportunities."""

    def list_jobs(
        self,
        filters: FilterState | None = None,
        project_status: str | None = None,
        priority: str | None = None,
    ) -> list[Job]:
        query = self.db.query(Job)
        if project_status:
            query = query.filter(Job.project_status == project_status)
        if priority:
            query = query.filter(Job.priority == priority)
        return filter_records(query.order_by(Job.id.asc()).all(), filters)

    def get_job(self, job_id: int) -> Job | None:
        return self.db.query(Job).filter(Job.id == job_id).first()

    def get_job_for_deal(self, deal_id: int) -> Job | None:
        return self.db.query(Job).filter(Job.deal_id == deal_id).first()

    def _account_group(self, account_id: int | None) -> str | None:
        if account_id is None:
            return None
        account = self.db.query(Account).filter(Account.id == account_id).first()
        return account.industry_group if account else None

    def _assign_code(self, job: Job) -> None:
        if not job.job_code:
            job.job_code = format_job_code(job.id, (job.created_at or utcnow()).year)

    def create_job(self, payload: JobCreateRequest) -> Job:
        if payload.job_code and self.db.query(Job).filter(Job.job_code == payload.job_code).first():
            raise ValidationError(f"Job code {payload.job_code} already exists")

        data = payload.model_dump()
        data["project_status"] = payload.project_status.value
        data["priority"] = payload.priority.value
        if not data.get("industry_group"):
            data["industry_group"] = self._account_group(payload.account_id)

        job = Job(**data)
        self.db.add(job)
        self.db.flush()
        self._assign_code(job)
        ActivityLogService(self.db).record("job", job.id, "created", payload.model_dump(mode="json"))
        self.commit()
        self.db.refresh(job)
        logger.info("job.created", extra={"event": "job.created", "job_id": job.id, "job_code": job.job_code})
        return job

    def stage_job_from_deal(self, deal: Deal) -> Job:
        """Add a job derived from ``deal`` to the session without committing."""
        job = Job(
            name=f"{deal.name} - Project",
            deal_id=deal.id,
            account_id=deal.account_id,
            value=deal.value,
            client_leader_id=deal.client_leader_id,
            industry_group=deal.industry_group or self._account_group(deal.account_id),
            expected_confirmation_date=deal.expected_close_date,
            notes=f"Auto-created from opportunity: {deal.name}",
        )
        self.db.add(job)
        self.db.flush()
        self._assign_code(job)
        ActivityLogService(self.db).record("deal", deal.id, "job_created", {"job_id": job.id})
        logger.info("job.created_from_deal", extra={"event": "job.created_from_deal", "job_id": job.id, "deal_id": deal.id})
        return job

    def update_job(self, job_id: int, payload: JobUpdateRequest) -> Job | None:
        job = self.get_job(job_id)
        if job is None:
            return None

        changes = payload.model_dump(exclude_unset=True)
        self.apply_changes(job, changes, keep_when_none=_NOT_NULL_FIELDS)
        if "account_id" in changes and "industry_group" not in changes:
            job.industry_group = self._account_group(job.account_id) or job.industry_group
        job.last_activity = utcnow()
        ActivityLogService(self.db).record("job", job.id, "updated", payload.model_dump(exclude_unset=True, mode="json"))
        self.commit()
        self.db.refresh(job)
        return job

    def delete_job(self, job_id: int) -> bool:
        job = self.get_job(job_id)
        if job is None:
            return False

        self.db.delete(job)
        ActivityLogService(self.db).record("job", job_id, "deleted")
        self.commit()
        logger.info("job.deleted", extra={"event": "job.deleted", "job_id": job_id})
        return True
