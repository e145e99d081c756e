"""Pydantic schema package for API contracts."""

from pipedash.schemas.accounts import AccountCreateRequest, AccountResponse, AccountUpdateRequest
from pipedash.schemas.common import APIEnvelope, DeleteResponse, ErrorEnvelope, RestoreResponse
from pipedash.schemas.deals import CustomFields, DealCreateRequest, DealResponse, DealUpdateRequest
from pipedash.schemas.filters import DateRange, FilterState
from pipedash.schemas.imports import (
    CsvPreview,
    FieldMapping,
    ImportResult,
    MappedRow,
    MappingOverrides,
    MappingProposal,
    MappingRequest,
    MappingStatus,
    SchemaInfo,
    ValidationReport,
)
from pipedash.schemas.jobs import JobCreateRequest, JobResponse, JobUpdateRequest
from pipedash.schemas.leaders import ClientLeaderCreateRequest, ClientLeaderResponse, ClientLeaderUpdateRequest
from pipedash.schemas.metrics import (
    ChartData,
    FunnelEntry,
    GroupRevenue,
    JobMetrics,
    LeaderSummary,
    Metrics,
    MonthlyPoint,
)
from pipedash.schemas.roles import RoleResponse

__all__ = [
    "APIEnvelope",
    "AccountCreateRequest",
    "AccountResponse",
    "AccountUpdateRequest",
    "ChartData",
    "ClientLeaderCreateRequest",
    "ClientLeaderResponse",
    "ClientLeaderUpdateRequest",
    "CsvPreview",
    "CustomFields",
    "DateRange",
    "DealCreateRequest",
    "DealResponse",
    "DealUpdateRequest",
    "DeleteResponse",
    "ErrorEnvelope",
    "FieldMapping",
    "FilterState",
    "FunnelEntry",
    "GroupRevenue",
    "ImportResult",
    "JobCreateRequest",
    "JobMetrics",
    "JobResponse",
    "JobUpdateRequest",
    "LeaderSummary",
    "MappedRow",
    "MappingOverrides",
    "MappingProposal",
    "MappingRequest",
    "MappingStatus",
    "Metrics",
    "MonthlyPoint",
    "RestoreResponse",
    "RoleResponse",
    "SchemaInfo",
    "ValidationReport",
]
