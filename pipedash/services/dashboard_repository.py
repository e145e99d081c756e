"""Whole-dashboard snapshot and restore (JSON backup)."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from pipedash.core.exceptions import RestoreError
from pipedash.models import Account, ClientLeader, Deal, Job
from pipedash.models.base import utcnow
from pipedash.services.base_service import BaseService

logger = logging.getLogger(__name__)


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    return date.fromisoformat(str(value)[:10])


def _isoformat(value: datetime | date | None) -> str | None:
    return value.isoformat() if value is not None else None


class DashboardRepository(BaseService):
    """Snapshot the leaders and deals and replace them from a backup.

    The document shape is ``{"clientLeaders": [...], "deals": [...]}`` with
    camelCase record keys and no version field.
    """

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        leaders = self.db.query(ClientLeader).order_by(ClientLeader.id.asc()).all()
        deals = self.db.query(Deal).order_by(Deal.id.asc()).all()
        return {
            "clientLeaders": [
                {
                    "id": leader.id,
                    "name": leader.name,
                    "email": leader.email,
                    "groups": list(leader.industry_groups or []),
                    "avatar": leader.avatar,
                    "role": leader.role,
                }
                for leader in leaders
            ],
            "deals": [
                {
                    "id": deal.id,
                    "name": deal.name,
                    "value": deal.value,
                    "stage": deal.stage,
                    "probability": deal.probability,
                    "clientLeaderId": deal.client_leader_id,
                    "accountId": deal.account_id,
                    "industryGroup": deal.industry_group,
                    "createdDate": _isoformat(deal.created_at),
                    "lastActivity": _isoformat(deal.last_activity),
                    "expectedCloseDate": _isoformat(deal.expected_close_date),
                    "notes": deal.notes,
                    "customFields": dict(deal.custom_fields or {}),
                    "lostReason": deal.lost_reason,
                }
                for deal in deals
            ],
        }

    def dump_backup(self) -> str:
        return json.dumps(self.snapshot(), indent=2)

    @staticmethod
    def _leader_from(record: dict[str, Any]) -> ClientLeader:
        return ClientLeader(
            id=record.get("id"),
            name=record["name"],
            email=record["email"],
            industry_groups=list(record.get("groups") or []),
            avatar=record.get("avatar"),
            role=record.get("role") or "client_leader",
        )

    @staticmethod
    def _deal_from(record: dict[str, Any]) -> Deal:
        created_at = _parse_datetime(record.get("createdDate")) or utcnow()
        return Deal(
            id=record.get("id"),
            name=record["name"],
            value=float(record.get("value") or 0),
            stage=record["stage"],
            probability=int(record.get("probability") or 0),
            client_leader_id=record["clientLeaderId"],
            industry_group=record.get("industryGroup"),
            created_at=created_at,
            last_activity=_parse_datetime(record.get("lastActivity")) or created_at,
            expected_close_date=_parse_date(record.get("expectedCloseDate")),
            notes=record.get("notes") or "",
            custom_fields=dict(record.get("customFields") or {}),
            lost_reason=record.get("lostReason"),
        )

    def _sync_id_sequences(self) -> None:
        """Move PostgreSQL id sequences past the ids a restore inserted."""
        if self.db.get_bind().dialect.name != "postgresql":
            return
        for model in (ClientLeader, Deal):
            table = model.__tablename__
            self.db.execute(
                text(
                    f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                    f"COALESCE((SELECT MAX(id) FROM {table}), 1), "
                    f"(SELECT MAX(id) FROM {table}) IS NOT NULL)"
                )
            )

    def restore(self, raw: str | bytes | dict[str, Any]) -> tuple[int, int]:
        """Replace every leader and deal with the backup contents.

        Returns ``(leaders, deals)`` restored. Nothing changes when the
        document cannot be read.
        """
        try:
            document = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
        except json.JSONDecodeError as exc:
            logger.warning("backup.restore_failed", extra={"event": "backup.restore_failed", "reason": "json"})
            raise RestoreError(f"Backup is not valid JSON: {exc.msg}") from exc

        if (
            not isinstance(document, dict)
            or not isinstance(document.get("clientLeaders"), list)
            or not isinstance(document.get("deals"), list)
        ):
            logger.warning("backup.restore_failed", extra={"event": "backup.restore_failed", "reason": "shape"})
            raise RestoreError("Backup must contain 'clientLeaders' and 'deals' lists")

        try:
            leaders = [self._leader_from(record) for record in document["clientLeaders"]]
            deals = [self._deal_from(record) for record in document["deals"]]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("backup.restore_failed", extra={"event": "backup.restore_failed", "reason": "record"})
            raise RestoreError(f"Malformed backup record: {exc}") from exc

        try:
            self.db.query(Job).update({Job.deal_id: None, Job.client_leader_id: None}, synchronize_session=False)
            self.db.query(Account).update({Account.account_owner_id: None}, synchronize_session=False)
            self.db.query(Deal).delete(synchronize_session=False)
            self.db.query(ClientLeader).delete(synchronize_session=False)
            self.db.expunge_all()
            self.db.add_all(leaders)
            self.db.flush()
            self.db.add_all(deals)
            self.db.flush()
            self._sync_id_sequences()
            self.commit()
        except SQLAlchemyError as exc:
            self.rollback()
            logger.warning("backup.restore_failed", extra={"event": "backup.restore_failed", "reason": "database"})
            raise RestoreError(f"Backup could not be applied: {exc.__class__.__name__}") from exc

        self.db.expire_all()
        logger.info(
            "backup.restored",
            extra={"event": "backup.restored", "client_leaders": len(leaders), "deals": len(deals)},
        )
        return len(leaders), len(deals)
