"""Common schema module."""

from __future__ import annotations

from pydantic import BaseModel


class APIEnvelope(BaseModel):
    status: str = "ok"
    message: str | None = None


class ErrorEnvelope(BaseModel):
    status: str = "error"
    error_code: str
    detail: str


class DeleteResponse(BaseModel):
    status: str = "deleted"
    id: int
    cascaded_deals: int = 0


class RestoreResponse(BaseModel):
    status: str = "restored"
    client_leaders: int
    deals: int
