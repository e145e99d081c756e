"""CSV exports, the deal CSV round trip and import templates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timezone
from typing import Any

import pandas as pd

from pipedash.core.enums import DealStage
from pipedash.core.exceptions import ValidationError
from pipedash.importing import transforms
from pipedash.importing.parser import parse_csv
from pipedash.importing.registry import DEAL_EXPORT_COLUMNS, get_schema
from pipedash.schemas.deals import DealCreateRequest

logger = logging.getLogger(__name__)

PIPELINE_COLUMNS = ("type", "id", "name", "value", "stage", "probability", "project_status", "created_at")


def _iso_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


def _to_csv(frame: pd.DataFrame) -> str:
    return frame.to_csv(index=False, lineterminator="\n")


def export_deals_csv(deals: Iterable[Any], leaders: Iterable[Any]) -> str:
    """Serialise deals in the fixed dashboard column order."""
    leader_names = {leader.id: leader.name for leader in leaders}
    records = [
        (
            deal.name,
            deal.value,
            deal.stage,
            leader_names.get(deal.client_leader_id, ""),
            deal.industry_group or "",
            _iso_date(deal.created_at),
            _iso_date(deal.expected_close_date),
            deal.probability,
            deal.notes or "",
        )
        for deal in deals
    ]
    return _to_csv(pd.DataFrame(records, columns=list(DEAL_EXPORT_COLUMNS), dtype=object))


def import_deals_csv(text: str, leaders: Sequence[Any]) -> list[DealCreateRequest]:
    """Read deals written by ``export_deals_csv``.

    Leaders are matched by exact name; unknown names fall back to the first
    leader. Rows without a deal name are ignored.
    """
    if not leaders:
        raise ValidationError("At least one client leader is required to import deals")
    leader_ids = {leader.name: leader.id for leader in leaders}
    fallback_id = leaders[0].id

    requests: list[DealCreateRequest] = []
    for index, row in enumerate(parse_csv(text).rows):
        name = (row.get("Deal Name") or "").strip()
        if not name:
            continue
        try:
            created = transforms.parse_date(row.get("Created Date"))
            requests.append(
                DealCreateRequest(
                    name=name,
                    value=transforms.parse_number(row.get("Value")) or 0.0,
                    stage=(row.get("Stage") or "").strip() or DealStage.LEAD.value,
                    probability=transforms.parse_int(row.get("Probability")) or 0,
                    client_leader_id=leader_ids.get((row.get("Client Leader") or "").strip(), fallback_id),
                    industry_group=(row.get("Industry Group") or "").strip() or None,
                    created_at=datetime.combine(created, time.min, tzinfo=timezone.utc) if created else None,
                    expected_close_date=transforms.parse_date(row.get("Expected Close Date")),
                    notes=row.get("Notes") or "",
                )
            )
        except (OverflowError, ValueError) as exc:
            raise ValidationError(f"Row {index + 2}: {exc}") from exc
    return requests


def template_csv(schema_id: str) -> str:
    """Header plus example rows for an import schema."""
    header, *examples = get_schema(schema_id).template
    return _to_csv(pd.DataFrame(list(examples), columns=list(header)))


def deals_template_csv() -> str:
    return template_csv("deals")


def export_pipeline_csv(opportunities: Iterable[Any], jobs: Iterable[Any]) -> str:
    """Opportunities and jobs on one sheet."""
    rows: list[dict[str, Any]] = []
    for deal in opportunities:
        rows.append(
            {
                "type": "Opportunity",
                "id": deal.id,
                "name": deal.name,
                "value": deal.value,
                "stage": deal.stage,
                "probability": deal.probability,
                "created_at": deal.created_at.isoformat() if deal.created_at else "",
            }
        )
    for job in jobs:
        rows.append(
            {
                "type": "Job",
                "id": job.id,
                "name": job.name,
                "value": job.value,
                "stage": job.stage,
                "project_status": job.project_status,
                "created_at": job.created_at.isoformat() if job.created_at else "",
            }
        )
    logger.info("export.pipeline", extra={"event": "export.pipeline", "rows": len(rows)})
    return _to_csv(pd.DataFrame(rows, columns=list(PIPELINE_COLUMNS), dtype=object))
