"""Client leader endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pipedash.api.v1._errors import not_found, raise_http
from pipedash.core.dependencies import get_db_session
from pipedash.core.exceptions import ValidationError
from pipedash.schemas.common import DeleteResponse
from pipedash.schemas.leaders import ClientLeaderCreateRequest, ClientLeaderResponse, ClientLeaderUpdateRequest
from pipedash.services.client_leader_service import ClientLeaderService

router = APIRouter(tags=["leaders"])


@router.get("/leaders", response_model=list[ClientLeaderResponse])
def list_leaders(
    role: str | None = Query(default=None),
    industry_groups: list[str] = Query(default=[]),
    search: str = Query(default=""),
    db: Session = Depends(get_db_session),
) -> list[ClientLeaderResponse]:
    leaders = ClientLeaderService(db).list_leaders(role=role, industry_groups=industry_groups, search_query=search)
    return [ClientLeaderResponse.model_validate(leader) for leader in leaders]


@router.get("/leaders/{leader_id}", response_model=ClientLeaderResponse)
def get_leader(leader_id: int, db: Session = Depends(get_db_session)) -> ClientLeaderResponse:
    leader = ClientLeaderService(db).get_leader(leader_id)
    if leader is None:
        raise not_found("Client leader", leader_id)
    return ClientLeaderResponse.model_validate(leader)


@router.post("/leaders", response_model=ClientLeaderResponse, status_code=status.HTTP_201_CREATED)
def create_leader(payload: ClientLeaderCreateRequest, db: Session = Depends(get_db_session)) -> ClientLeaderResponse:
    try:
        leader = ClientLeaderService(db).create_leader(payload)
    except ValidationError as exc:
        raise_http(exc)
    return ClientLeaderResponse.model_validate(leader)


@router.patch("/leaders/{leader_id}", response_model=ClientLeaderResponse)
def update_leader(
    leader_id: int,
    payload: ClientLeaderUpdateRequest,
    db: Session = Depends(get_db_session),
) -> ClientLeaderResponse:
    try:
        leader = ClientLeaderService(db).update_leader(leader_id, payload)
    except ValidationError as exc:
        raise_http(exc)
    if leader is None:
        raise not_found("Client leader", leader_id)
    return ClientLeaderResponse.model_validate(leader)


@router.delete("/leaders/{leader_id}", response_model=DeleteResponse)
def delete_leader(leader_id: int, db: Session = Depends(get_db_session)) -> DeleteResponse:
    """Delete a leader together with every deal they own."""
    cascaded = ClientLeaderService(db).delete_leader(leader_id)
    if cascaded is None:
        raise not_found("Client leader", leader_id)
    return DeleteResponse(id=leader_id, cascaded_deals=cascaded)
