"""CSV import endpoints for API v1.

``/imports/execute`` runs the whole wizard in one request: the upload is
previewed, validated, mapped (applying any overrides), confirmed and
imported. The earlier routes expose the individual steps so a client can
show previews and mapping suggestions before committing.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from pipedash.api.v1._errors import raise_http
from pipedash.core.dependencies import get_db_session
from pipedash.core.exceptions import PipedashError
from pipedash.importing.field_mapper import FieldMapper
from pipedash.importing.registry import available_schemas, get_schema
from pipedash.importing.wizard import ImportWizard
from pipedash.schemas.deals import DealResponse
from pipedash.schemas.imports import (
    CsvPreview,
    ImportResult,
    MappingOverrides,
    MappingProposal,
    MappingRequest,
    SchemaInfo,
    ValidationReport,
)
from pipedash.services.client_leader_service import ClientLeaderService
from pipedash.services.deal_service import DealService
from pipedash.services.export_service import import_deals_csv
from pipedash.services.import_service import ImportService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["imports"])


def _open_wizard(file: UploadFile, schema_id: str | None) -> ImportWizard:
    return ImportWizard(
        filename=file.filename or "",
        content=file.file.read(),
        content_type=file.content_type,
        schema_id=schema_id or None,
    )


def _parse_overrides(raw: str) -> MappingOverrides:
    if not raw.strip():
        return MappingOverrides()
    try:
        return MappingOverrides.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="overrides must be a JSON object with 'fields' and 'batch_values' maps.",
        ) from exc


@router.get("/imports/schemas", response_model=list[SchemaInfo])
def list_import_schemas() -> list[SchemaInfo]:
    return available_schemas()


@router.post("/imports/preview", response_model=CsvPreview)
def preview_upload(
    file: UploadFile = File(...),
    schema_id: str = Form(default=""),
) -> CsvPreview:
    try:
        return _open_wizard(file, schema_id).preview()
    except PipedashError as exc:
        raise_http(exc)


@router.post("/imports/validate", response_model=ValidationReport)
def validate_upload_rows(
    file: UploadFile = File(...),
    schema_id: str = Form(default=""),
) -> ValidationReport:
    try:
        wizard = _open_wizard(file, schema_id)
        wizard.preview()
        return wizard.validate()
    except PipedashError as exc:
        raise_http(exc)


@router.post("/imports/mappings", response_model=MappingProposal)
def propose_mappings(payload: MappingRequest) -> MappingProposal:
    try:
        mapper = FieldMapper(payload.headers, get_schema(payload.schema_id))
    except PipedashError as exc:
        raise_http(exc)
    return MappingProposal(
        mappings=mapper.mappings,
        missing_required=mapper.missing_required(),
        can_proceed=mapper.can_proceed(),
    )


@router.post("/imports/execute", response_model=ImportResult)
def execute_import(
    file: UploadFile = File(...),
    schema_id: str = Form(default=""),
    overrides: str = Form(default=""),
    db: Session = Depends(get_db_session),
) -> ImportResult:
    mapping_overrides = _parse_overrides(overrides)
    try:
        wizard = _open_wizard(file, schema_id)
        wizard.preview()
        wizard.validate()
        mapper = wizard.map_fields()
        mapper.apply_overrides(mapping_overrides)
        wizard.confirm()
        return wizard.execute(ImportService(db))
    except PipedashError as exc:
        logger.warning(
            "import.rejected",
            extra={"event": "import.rejected", "upload_name": file.filename, "error_type": exc.__class__.__name__},
        )
        raise_http(exc)


@router.post("/imports/deals", response_model=list[DealResponse], status_code=status.HTTP_201_CREATED)
def import_exported_deals(
    file: UploadFile = File(...),
    db: Session = Depends(get_db_session),
) -> list[DealResponse]:
    """Re-import a file produced by ``/exports/deals.csv``."""
    try:
        wizard = _open_wizard(file, "deals")
        leaders = sorted(ClientLeaderService(db).list_leaders(), key=lambda leader: leader.id)
        requests = import_deals_csv(wizard.text, leaders)
        service = DealService(db)
        created = [service.create_deal(request) for request in requests]
    except PipedashError as exc:
        raise_http(exc)
    return [DealResponse.model_validate(deal) for deal in created]
