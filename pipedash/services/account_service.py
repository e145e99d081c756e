"""Account service."""

from __future__ import annotations

import logging

from sqlalchemy import func, or_

from pipedash.models import Account, Deal, Job
from pipedash.schemas.accounts import AccountCreateRequest, AccountUpdateRequest
from pipedash.services.activity_log_service import ActivityLogService
from pipedash.services.base_service import BaseService

logger = logging.getLogger(__name__)


class AccountService(BaseService):
    """Service for account CRUD and name lookups used by imports."""

    def list_accounts(
        self,
        industry_groups: list[str] | None = None,
        account_owner_id: int | None = None,
        search_query: str | None = None,
    ) -> list[Account]:
        query = self.db.query(Account)
        if industry_groups:
            query = query.filter(Account.industry_group.in_(industry_groups))
        if account_owner_id is not None:
            query = query.filter(Account.account_owner_id == account_owner_id)
        if search_query:
            pattern = f"%{search_query.lower()}%"
            query = query.filter(
                or_(
                    func.lower(Account.name).like(pattern),
                    func.lower(Account.legal_name).like(pattern),
                    func.lower(Account.industry).like(pattern),
                )
            )
        return query.order_by(Account.name.asc(), Account.id.asc()).all()

    def get_account(self, account_id: int) -> Account | None:
        return self.db.query(Account).filter(Account.id == account_id).first()

    def find_by_name(self, name: str) -> Account | None:
        """Case-insensitive exact name lookup."""
        return (
            self.db.query(Account)
            .filter(func.lower(Account.name) == name.strip().lower())
            .order_by(Account.id.asc())
            .first()
        )

    def create_account(self, payload: AccountCreateRequest) -> Account:
        account = Account(**payload.model_dump())
        self.db.add(account)
        self.db.flush()
        ActivityLogService(self.db).record("account", account.id, "created", payload.model_dump(mode="json"))
        self.commit()
        self.db.refresh(account)
        logger.info("account.created", extra={"event": "account.created", "account_id": account.id})
        return account

    def update_account(self, account_id: int, payload: AccountUpdateRequest) -> Account | None:
        account = self.get_account(account_id)
        if account is None:
            return None

        self.apply_changes(account, payload.model_dump(exclude_unset=True), keep_when_none=("name", "payment_terms"))
        ActivityLogService(self.db).record("account", account.id, "updated", payload.model_dump(exclude_unset=True, mode="json"))
        self.commit()
        self.db.refresh(account)
        return account

    def delete_account(self, account_id: int) -> bool:
        account = self.get_account(account_id)
        if account is None:
            return False

        self.db.query(Deal).filter(Deal.account_id == account_id).update({Deal.account_id: None}, synchronize_session=False)
        self.db.query(Job).filter(Job.account_id == account_id).update({Job.account_id: None}, synchronize_session=False)
        self.db.delete(account)
        ActivityLogService(self.db).record("account", account_id, "deleted")
        self.commit()
        self.db.expire_all()
        logger.info("account.deleted", extra={"event": "account.deleted", "account_id": account_id})
        return True
