"""Client leader (user) service with explicit deal cascade on delete."""

from __future__ import annotations

import logging

from sqlalchemy import func, or_

from pipedash.core.exceptions import ValidationError
from pipedash.models import Account, ClientLeader, Deal, Job
from pipedash.schemas.leaders import ClientLeaderCreateRequest, ClientLeaderUpdateRequest
from pipedash.services.activity_log_service import ActivityLogService
from pipedash.services.base_service import BaseService

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "\U0001F464"


class ClientLeaderService(BaseService):
    """Service for client leader CRUD."""

    def list_leaders(
        self,
        role: str | None = None,
        industry_groups: list[str] | None = None,
        search_query: str | None = None,
    ) -> list[ClientLeader]:
        query = self.db.query(ClientLeader)
        if role:
            query = query.filter(ClientLeader.role == role)
        if search_query:
            pattern = f"%{search_query.lower()}%"
            query = query.filter(
                or_(func.lower(ClientLeader.name).like(pattern), func.lower(ClientLeader.email).like(pattern))
            )
        leaders = query.order_by(ClientLeader.name.asc(), ClientLeader.id.asc()).all()
        if industry_groups:
            # JSON list columns have no portable overlap operator.
            wanted = set(industry_groups)
            leaders = [leader for leader in leaders if wanted.intersection(leader.industry_groups or [])]
        return leaders

    def get_leader(self, leader_id: int) -> ClientLeader | None:
        return self.db.query(ClientLeader).filter(ClientLeader.id == leader_id).first()

    def find_by_name(self, name: str) -> ClientLeader | None:
        return (
            self.db.query(ClientLeader)
            .filter(func.lower(ClientLeader.name) == name.strip().lower())
            .order_by(ClientLeader.id.asc())
            .first()
        )

    def _ensure_email_available(self, email: str, exclude_id: int | None = None) -> None:
        query = self.db.query(ClientLeader).filter(func.lower(ClientLeader.email) == email.lower())
        if exclude_id is not None:
            query = query.filter(ClientLeader.id != exclude_id)
        if query.first() is not None:
            raise ValidationError(f"Email {email} is already registered")

    def create_leader(self, payload: ClientLeaderCreateRequest) -> ClientLeader:
        self._ensure_email_available(payload.email)
        leader = ClientLeader(
            name=payload.name,
            email=payload.email.lower(),
            avatar=payload.avatar or DEFAULT_AVATAR,
            industry_groups=list(payload.industry_groups),
            role=payload.role.value,
        )
        self.db.add(leader)
        self.db.flush()
        ActivityLogService(self.db).record("user", leader.id, "created", payload.model_dump(mode="json"))
        self.commit()
        self.db.refresh(leader)
        logger.info("leader.created", extra={"event": "leader.created", "leader_id": leader.id})
        return leader

    def update_leader(self, leader_id: int, payload: ClientLeaderUpdateRequest) -> ClientLeader | None:
        leader = self.get_leader(leader_id)
        if leader is None:
            return None

        changes = payload.model_dump(exclude_unset=True, mode="json")
        for field, value in changes.items():
            if value is None and field in ("name", "email", "role"):
                continue
            if field == "email":
                value = value.lower()
                self._ensure_email_available(value, exclude_id=leader.id)
            if field == "industry_groups" and value is None:
                value = []
            setattr(leader, field, value)
        ActivityLogService(self.db).record("user", leader.id, "updated", changes)
        self.commit()
        self.db.refresh(leader)
        return leader

    def delete_leader(self, leader_id: int) -> int | None:
        """Delete a leader and every deal owned by them.

        Returns the number of cascaded deals, or None when the leader does not
        exist. Jobs and accounts survive with their leader reference cleared.
        """
        leader = self.get_leader(leader_id)
        if leader is None:
            return None

        deal_ids = [row.id for row in self.db.query(Deal.id).filter(Deal.client_leader_id == leader_id).all()]
        if deal_ids:
            self.db.query(Job).filter(Job.deal_id.in_(deal_ids)).update({Job.deal_id: None}, synchronize_session=False)
        self.db.query(Job).filter(Job.client_leader_id == leader_id).update(
            {Job.client_leader_id: None}, synchronize_session=False
        )
        self.db.query(Account).filter(Account.account_owner_id == leader_id).update(
            {Account.account_owner_id: None}, synchronize_session=False
        )
        removed = self.db.query(Deal).filter(Deal.client_leader_id == leader_id).delete(synchronize_session=False)
        self.db.delete(leader)
        ActivityLogService(self.db).record("user", leader_id, "deleted", {"cascaded_deals": removed})
        self.commit()
        self.db.expire_all()
        logger.info(
            "leader.deleted",
            extra={"event": "leader.deleted", "leader_id": leader_id, "cascaded_deals": removed},
        )
        return removed
