"""Activity log service recording create/update/delete events."""

from __future__ import annotations

from typing import Any

from pipedash.models import ActivityLog
from pipedash.services.base_service import BaseService


class ActivityLogService(BaseService):
    """Append-only audit trail for pipeline records.

    ``record`` only stages the row; the calling service commits it together
    with the change it describes.
    """

    def record(self, entity_type: str, entity_id: int | None, action: str, details: dict[str, Any] | None = None) -> ActivityLog:
        entry = ActivityLog(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            details=details or {},
        )
        self.db.add(entry)
        return entry

    def list_activity(
        self,
        entity_type: str | None = None,
        entity_id: int | None = None,
        limit: int = 100,
    ) -> list[ActivityLog]:
        query = self.db.query(ActivityLog)
        if entity_type:
            query = query.filter(ActivityLog.entity_type == entity_type)
        if entity_id is not None:
            query = query.filter(ActivityLog.entity_id == entity_id)
        return query.order_by(ActivityLog.id.desc()).limit(limit).all()
