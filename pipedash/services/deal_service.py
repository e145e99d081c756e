"""Deal (opportunity) service."""

from __future__ import annotations

import logging

from pipedash.core.enums import DealStage, clamp_probability
from pipedash.core.exceptions import ValidationError
from pipedash.models import Account, ClientLeader, Deal, Job
from pipedash.models.base import utcnow
from pipedash.schemas.deals import DealCreateRequest, DealUpdateRequest
from pipedash.schemas.filters import FilterState
from pipedash.services.activity_log_service import ActivityLogService
from pipedash.services.base_service import BaseService
from pipedash.services.filter_service import filter_records
from pipedash.services.job_service import JobService

logger = logging.getLogger(__name__)

_NOT_NULL_FIELDS = {"name", "value", "stage", "notes"}


class DealService(BaseService):
    """Service for deal CRUD and stage transitions."""

    def list_deals(self, filters: FilterState | None = None) -> list[Deal]:
        deals = self.db.query(Deal).order_by(Deal.id.asc()).all()
        return filter_records(deals, filters)

    def get_deal(self, deal_id: int) -> Deal | None:
        return self.db.query(Deal).filter(Deal.id == deal_id).first()

    def _require_leader(self, leader_id: int) -> ClientLeader:
        leader = self.db.query(ClientLeader).filter(ClientLeader.id == leader_id).first()
        if leader is None:
            raise ValidationError(f"Client leader {leader_id} does not exist")
        return leader

    def _require_account(self, account_id: int | None) -> Account | None:
        if account_id is None:
            return None
        account = self.db.query(Account).filter(Account.id == account_id).first()
        if account is None:
            raise ValidationError(f"Account {account_id} does not exist")
        return account

    def create_deal(self, payload: DealCreateRequest) -> Deal:
        leader = self._require_leader(payload.client_leader_id)
        account = self._require_account(payload.account_id)

        industry_group = payload.industry_group
        if not industry_group and account is not None:
            industry_group = account.industry_group
        if not industry_group and leader.industry_groups:
            industry_group = leader.industry_groups[0]

        created_at = payload.created_at or utcnow()
        deal = Deal(
            name=payload.name,
            value=payload.value,
            stage=payload.stage,
            probability=clamp_probability(payload.stage, payload.probability),
            client_leader_id=leader.id,
            account_id=payload.account_id,
            industry_group=industry_group,
            expected_close_date=payload.expected_close_date,
            notes=payload.notes,
            custom_fields=payload.custom_fields.model_dump(),
            lost_reason=payload.lost_reason,
            created_at=created_at,
            last_activity=created_at,
        )
        self.db.add(deal)
        self.db.flush()
        ActivityLogService(self.db).record("deal", deal.id, "created", payload.model_dump(mode="json"))
        self.commit()
        self.db.refresh(deal)
        logger.info("deal.created", extra={"event": "deal.created", "deal_id": deal.id, "stage": deal.stage})
        return deal

    def update_deal(self, deal_id: int, payload: DealUpdateRequest) -> Deal | None:
        deal = self.get_deal(deal_id)
        if deal is None:
            return None

        changes = payload.model_dump(exclude_unset=True)
        if changes.get("client_leader_id") is not None:
            self._require_leader(changes["client_leader_id"])
        if "account_id" in changes:
            self._require_account(changes["account_id"])

        previous_stage = deal.stage
        for field, value in changes.items():
            if field in ("probability", "client_leader_id"):
                continue
            if value is None and field in _NOT_NULL_FIELDS:
                continue
            if field == "custom_fields":
                value = value or {}
            setattr(deal, field, value)

        if changes.get("client_leader_id") is not None:
            deal.client_leader_id = changes["client_leader_id"]
        if "probability" in changes or deal.stage != previous_stage:
            deal.probability = clamp_probability(deal.stage, changes.get("probability"))
        deal.last_activity = utcnow()

        ActivityLogService(self.db).record("deal", deal.id, "updated", payload.model_dump(exclude_unset=True, mode="json"))
        if (
            deal.stage == DealStage.PROPOSAL.value
            and previous_stage != deal.stage
            and self.db.query(Job).filter(Job.deal_id == deal.id).first() is None
        ):
            JobService(self.db).stage_job_from_deal(deal)

        self.commit()
        self.db.refresh(deal)
        logger.info("deal.updated", extra={"event": "deal.updated", "deal_id": deal.id, "stage": deal.stage})
        return deal

    def delete_deal(self, deal_id: int) -> bool:
        deal = self.get_deal(deal_id)
        if deal is None:
            return False

        self.db.query(Job).filter(Job.deal_id == deal_id).update({Job.deal_id: None}, synchronize_session=False)
        self.db.delete(deal)
        ActivityLogService(self.db).record("deal", deal_id, "deleted")
        self.commit()
        logger.info("deal.deleted", extra={"event": "deal.deleted", "deal_id": deal_id})
        return True
