"""SQLAlchemy model package for the pipeline schema."""

from pipedash.models.account import Account
from pipedash.models.activity_log import ActivityLog
from pipedash.models.base import Base
from pipedash.models.client_leader import ClientLeader
from pipedash.models.deal import Deal
from pipedash.models.job import Job

__all__ = [
    "Account",
    "ActivityLog",
    "Base",
    "ClientLeader",
    "Deal",
    "Job",
]
