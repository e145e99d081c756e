"""Account request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AccountCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    legal_name: str | None = Field(default=None, max_length=255)
    billing_address: str | None = Field(default=None, max_length=2000)
    payment_terms: str = Field(default="Net 30", max_length=40)
    industry: str | None = Field(default=None, max_length=120)
    industry_group: str | None = Field(default=None, max_length=60)
    account_owner_id: int | None = Field(default=None, ge=1)


class AccountUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    legal_name: str | None = Field(default=None, max_length=255)
    billing_address: str | None = Field(default=None, max_length=2000)
    payment_terms: str | None = Field(default=None, max_length=40)
    industry: str | None = Field(default=None, max_length=120)
    industry_group: str | None = Field(default=None, max_length=60)
    account_owner_id: int | None = Field(default=None, ge=1)


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    legal_name: str | None = None
    billing_address: str | None = None
    payment_terms: str
    industry: str | None = None
    industry_group: str | None = None
    account_owner_id: int | None = None
    created_at: datetime
    updated_at: datetime
