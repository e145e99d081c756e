"""Account endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pipedash.api.v1._errors import not_found
from pipedash.core.dependencies import get_db_session
from pipedash.schemas.accounts import AccountCreateRequest, AccountResponse, AccountUpdateRequest
from pipedash.schemas.common import DeleteResponse
from pipedash.services.account_service import AccountService

router = APIRouter(tags=["accounts"])


@router.get("/accounts", response_model=list[AccountResponse])
def list_accounts(
    industry_groups: list[str] = Query(default=[]),
    account_owner_id: int | None = Query(default=None),
    search: str = Query(default=""),
    db: Session = Depends(get_db_session),
) -> list[AccountResponse]:
    accounts = AccountService(db).list_accounts(
        industry_groups=industry_groups,
        account_owner_id=account_owner_id,
        search_query=search,
    )
    return [AccountResponse.model_validate(account) for account in accounts]


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(account_id: int, db: Session = Depends(get_db_session)) -> AccountResponse:
    account = AccountService(db).get_account(account_id)
    if account is None:
        raise not_found("Account", account_id)
    return AccountResponse.model_validate(account)


@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(payload: AccountCreateRequest, db: Session = Depends(get_db_session)) -> AccountResponse:
    return AccountResponse.model_validate(AccountService(db).create_account(payload))


@router.patch("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    payload: AccountUpdateRequest,
    db: Session = Depends(get_db_session),
) -> AccountResponse:
    account = AccountService(db).update_account(account_id, payload)
    if account is None:
        raise not_found("Account", account_id)
    return AccountResponse.model_validate(account)


@router.delete("/accounts/{account_id}", response_model=DeleteResponse)
def delete_account(account_id: int, db: Session = Depends(get_db_session)) -> DeleteResponse:
    if not AccountService(db).delete_account(account_id):
        raise not_found("Account", account_id)
    return DeleteResponse(id=account_id)
