"""Opportunity (deal) endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pipedash.api.v1._errors import not_found, raise_http
from pipedash.core.dependencies import get_db_session, get_filter_state
from pipedash.core.exceptions import ValidationError
from pipedash.schemas.deals import DealCreateRequest, DealResponse, DealUpdateRequest
from pipedash.schemas.common import DeleteResponse
from pipedash.schemas.filters import FilterState
from pipedash.services.deal_service import DealService

router = APIRouter(tags=["deals"])


@router.get("/deals", response_model=list[DealResponse])
def list_deals(
    filters: FilterState = Depends(get_filter_state),
    db: Session = Depends(get_db_session),
) -> list[DealResponse]:
    return [DealResponse.model_validate(deal) for deal in DealService(db).list_deals(filters)]


@router.get("/deals/{deal_id}", response_model=DealResponse)
def get_deal(deal_id: int, db: Session = Depends(get_db_session)) -> DealResponse:
    deal = DealService(db).get_deal(deal_id)
    if deal is None:
        raise not_found("Deal", deal_id)
    return DealResponse.model_validate(deal)


@router.post("/deals", response_model=DealResponse, status_code=status.HTTP_201_CREATED)
def create_deal(payload: DealCreateRequest, db: Session = Depends(get_db_session)) -> DealResponse:
    try:
        deal = DealService(db).create_deal(payload)
    except ValidationError as exc:
        raise_http(exc)
    return DealResponse.model_validate(deal)


@router.patch("/deals/{deal_id}", response_model=DealResponse)
def update_deal(deal_id: int, payload: DealUpdateRequest, db: Session = Depends(get_db_session)) -> DealResponse:
    try:
        deal = DealService(db).update_deal(deal_id, payload)
    except ValidationError as exc:
        raise_http(exc)
    if deal is None:
        raise not_found("Deal", deal_id)
    return DealResponse.model_validate(deal)


@router.delete("/deals/{deal_id}", response_model=DeleteResponse)
def delete_deal(deal_id: int, db: Session = Depends(get_db_session)) -> DeleteResponse:
    if not DealService(db).delete_deal(deal_id):
        raise not_found("Deal", deal_id)
    return DeleteResponse(id=deal_id)
