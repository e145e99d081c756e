"""Persist mapped CSV rows through the domain models."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, time, timezone
from typing import Any

from pipedash.core.enums import JobStage, clamp_probability
from pipedash.core.exceptions import ValidationError
from pipedash.importing import transforms
from pipedash.importing.field_mapper import apply_mapping
from pipedash.importing.registry import ImportSchema
from pipedash.models import Account, ClientLeader, Deal, Job
from pipedash.models.base import utcnow
from pipedash.schemas.imports import (
    DuplicateStrategy,
    FieldMapping,
    ImportAction,
    ImportResult,
    ImportSummary,
    RowIssue,
)
from pipedash.services.account_service import AccountService
from pipedash.services.activity_log_service import ActivityLogService
from pipedash.services.base_service import BaseService
from pipedash.services.client_leader_service import DEFAULT_AVATAR, ClientLeaderService
from pipedash.services.job_service import format_job_code

logger = logging.getLogger(__name__)


class ImportService(BaseService):
    """Apply confirmed mappings to parsed rows and write the records."""

    def execute(
        self,
        schema: ImportSchema,
        rows: Sequence[Mapping[str, str]],
        mappings: Sequence[FieldMapping],
    ) -> ImportResult:
        handlers = {
            "accounts": self._import_account,
            "jobs": self._import_job,
            "users": self._import_user,
            "deals": self._import_deal,
        }
        handler = handlers[schema.target]
        counts = {action: 0 for action in ImportAction}
        errors: list[RowIssue] = []

        for index, row in enumerate(rows):
            row_number = index + 2
            mapped = apply_mapping(row, mappings)
            values, failures = schema.transform(mapped.values)
            issues = [RowIssue(row=row_number, field=field, message=message) for field, message in failures]
            issues.extend(
                RowIssue(row=row_number, field=rule.field, message=rule.message) for rule in schema.check_rules(values)
            )
            if issues:
                errors.extend(issues)
                continue
            try:
                action = handler(values, mapped.extras, schema.duplicate_strategy)
            except ValidationError as exc:
                errors.append(RowIssue(row=row_number, message=str(exc)))
                continue
            counts[action] += 1

        total = len(rows)
        imported = counts[ImportAction.IMPORTED]
        updated = counts[ImportAction.UPDATED]
        skipped = counts[ImportAction.SKIPPED]
        ActivityLogService(self.db).record(
            "system",
            None,
            f"{schema.id}_import_completed",
            {"imported": imported, "updated": updated, "skipped": skipped, "errors": len(errors)},
        )
        self.commit()

        logger.info(
            "import.applied",
            extra={
                "event": "import.applied",
                "schema": schema.id,
                "imported": imported,
                "updated": updated,
                "skipped": skipped,
                "errors": len(errors),
            },
        )
        return ImportResult(
            success=len(errors) < total / 2,
            message=f"Import completed. {imported} records imported, {updated} updated, {skipped} skipped.",
            imported=imported,
            updated=updated,
            skipped=skipped,
            errors=errors,
            summary=ImportSummary(total_rows=total, valid_rows=imported + updated, duplicates=skipped),
        )

    def _import_account(self, values: dict[str, Any], extras: dict[str, str], strategy: DuplicateStrategy) -> ImportAction:
        name = values["name"]
        short_code = values.get("client_short") or values.get("platform_name") or ""
        data = {
            "name": name,
            "legal_name": values.get("legal_name") or name,
            "industry": values.get("industry") or transforms.infer_industry(name),
            "industry_group": values.get("industry_group") or transforms.map_industry_group(short_code),
            "billing_address": values.get("billing_address") or "",
            "payment_terms": values.get("payment_terms") or "Net 30",
        }
        existing = AccountService(self.db).find_by_name(name)
        if existing is not None:
            if strategy == DuplicateStrategy.SKIP:
                return ImportAction.SKIPPED
            for field, value in data.items():
                setattr(existing, field, value)
            self.db.flush()
            return ImportAction.UPDATED

        self.db.add(Account(**data))
        self.db.flush()
        return ImportAction.IMPORTED

    def _find_or_create_account(self, client_name: str, short_code: str) -> Account:
        account = AccountService(self.db).find_by_name(client_name)
        if account is not None:
            return account
        account = Account(
            name=client_name,
            legal_name=client_name,
            industry=transforms.infer_industry(client_name),
            industry_group=transforms.map_industry_group(short_code),
            billing_address="",
            payment_terms="Net 30",
        )
        self.db.add(account)
        self.db.flush()
        return account

    def _import_job(self, values: dict[str, Any], extras: dict[str, str], strategy: DuplicateStrategy) -> ImportAction:
        account = self._find_or_create_account(values["client_name"], values.get("client_short") or "")
        name = values.get("project_name") or values["name"]
        data = {
            "name": name,
            "account_id": account.id,
            "industry_group": account.industry_group,
            "stage": (
                JobStage.PROPOSAL_PREPARATION.value
                if values.get("is_new_business") is True
                else JobStage.BACKLOG.value
            ),
            "project_start_date": values.get("start_quarter"),
            "project_end_date": values.get("end_quarter"),
            "notes": f"Imported from CSV. Original ID: {values.get('unique_id') or ''}",
        }
        existing = self.db.query(Job).filter(Job.name == name, Job.account_id == account.id).first()
        if existing is not None:
            if strategy == DuplicateStrategy.SKIP:
                return ImportAction.SKIPPED
            for field, value in data.items():
                setattr(existing, field, value)
            existing.last_activity = utcnow()
            self.db.flush()
            return ImportAction.UPDATED

        job = Job(**data)
        self.db.add(job)
        self.db.flush()
        job.job_code = format_job_code(job.id, (job.created_at or utcnow()).year)
        self.db.flush()
        return ImportAction.IMPORTED

    def _import_user(self, values: dict[str, Any], extras: dict[str, str], strategy: DuplicateStrategy) -> ImportAction:
        email = values["email"]
        existing = self.db.query(ClientLeader).filter(ClientLeader.email == email).first()
        if existing is not None:
            if strategy == DuplicateStrategy.SKIP:
                return ImportAction.SKIPPED
            existing.name = values["name"]
            existing.role = values.get("role") or existing.role
            if values.get("industry_groups"):
                existing.industry_groups = list(values["industry_groups"])
            if values.get("avatar"):
                existing.avatar = values["avatar"]
            self.db.flush()
            return ImportAction.UPDATED

        self.db.add(
            ClientLeader(
                name=values["name"],
                email=email,
                role=values.get("role") or "client_leader",
                industry_groups=list(values.get("industry_groups") or []),
                avatar=values.get("avatar") or DEFAULT_AVATAR,
            )
        )
        self.db.flush()
        return ImportAction.IMPORTED

    def _resolve_leader(self, leader_name: str | None) -> ClientLeader:
        leader = ClientLeaderService(self.db).find_by_name(leader_name) if leader_name else None
        if leader is None:
            leader = self.db.query(ClientLeader).order_by(ClientLeader.id.asc()).first()
        if leader is None:
            raise ValidationError("No client leaders available to own imported deals")
        return leader

    def _import_deal(self, values: dict[str, Any], extras: dict[str, str], strategy: DuplicateStrategy) -> ImportAction:
        leader = self._resolve_leader(values.get("client_leader"))
        stage = values.get("stage") or "Lead"
        created_date = values.get("created_date")
        created_at = (
            datetime.combine(created_date, time.min, tzinfo=timezone.utc) if created_date is not None else utcnow()
        )
        data = {
            "name": values["name"],
            "value": max(float(values.get("value") or 0.0), 0.0),
            "stage": stage,
            "probability": clamp_probability(stage, values.get("probability")),
            "client_leader_id": leader.id,
            "industry_group": values.get("industry_group") or (leader.industry_groups or [None])[0],
            "expected_close_date": values.get("expected_close_date"),
            "notes": values.get("notes") or "",
            "custom_fields": {
                "priority": values.get("priority") or None,
                "source": values.get("source") or None,
                "competitor": values.get("competitor") or None,
                "extra": dict(extras),
            },
        }
        existing = (
            self.db.query(Deal)
            .filter(Deal.name == data["name"], Deal.client_leader_id == leader.id)
            .first()
        )
        if existing is not None:
            if strategy == DuplicateStrategy.SKIP:
                return ImportAction.SKIPPED
            for field, value in data.items():
                setattr(existing, field, value)
            existing.last_activity = utcnow()
            self.db.flush()
            return ImportAction.UPDATED

        self.db.add(Deal(created_at=created_at, last_activity=created_at, **data))
        self.db.flush()
        return ImportAction.IMPORTED
