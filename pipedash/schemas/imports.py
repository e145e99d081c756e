"""CSV import request/response schemas."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, Field


class MappingStatus(str, enum.Enum):
    MAPPED = "mapped"
    UNMAPPED = "unmapped"
    AUTO_FILLED = "auto-filled"


class DuplicateStrategy(str, enum.Enum):
    SKIP = "skip"
    UPDATE = "update"


class ImportAction(str, enum.Enum):
    IMPORTED = "imported"
    UPDATED = "updated"
    SKIPPED = "skipped"


class SchemaInfo(BaseModel):
    id: str
    name: str
    description: str
    required_fields: list[str]
    optional_fields: list[str]
    auto_fill_capable: bool
    duplicate_strategy: DuplicateStrategy


class CsvPreview(BaseModel):
    headers: list[str] = Field(default_factory=list)
    rows: list[dict[str, str]] = Field(default_factory=list)
    total_rows: int = 0
    detected_schema: str | None = None


class ValidationSummary(BaseModel):
    total_rows: int = 0
    valid_rows: int = 0
    duplicates: int = 0
    missing_fields: int = 0


class ValidationReport(BaseModel):
    """Outcome of validating parsed rows against a target schema.

    ``errors`` and ``warnings`` are informational; only ``can_continue``
    gates the wizard.
    """

    is_valid: bool = False
    can_continue: bool = False
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    missing_columns: list[str] = Field(default_factory=list)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)


class FieldMapping(BaseModel):
    source_field: str = ""
    target_field: str
    confidence: float = 0.0
    required: bool = False
    suggested: bool = False
    status: MappingStatus = MappingStatus.UNMAPPED
    batch_value: str | None = None


class MappingRequest(BaseModel):
    schema_id: str
    headers: list[str] = Field(default_factory=list)


class MappingProposal(BaseModel):
    mappings: list[FieldMapping] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
    can_proceed: bool = False


class MappingOverrides(BaseModel):
    """Manual mapping choices and batch values sent with an import."""

    fields: dict[str, str] = Field(default_factory=dict)
    batch_values: dict[str, str] = Field(default_factory=dict)


class MappedRow(BaseModel):
    """A source row reshaped onto target fields; unmapped columns land in ``extras``."""

    values: dict[str, Any] = Field(default_factory=dict)
    extras: dict[str, str] = Field(default_factory=dict)


class RowIssue(BaseModel):
    row: int
    field: str | None = None
    message: str


class ImportSummary(BaseModel):
    total_rows: int = 0
    valid_rows: int = 0
    duplicates: int = 0


class ImportResult(BaseModel):
    success: bool = False
    message: str = ""
    imported: int = 0
    updated: int = 0
    skipped: int = 0
    errors: list[RowIssue] = Field(default_factory=list)
    warnings: list[RowIssue] = Field(default_factory=list)
    summary: ImportSummary = Field(default_factory=ImportSummary)
