"""Shared domain-error mapping for API v1 route modules."""

from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException, status

from pipedash.core.exceptions import (
    FileRejectedError,
    InvalidTransitionError,
    MappingIncompleteError,
    NotFoundError,
    RestoreError,
    ValidationError,
)


def map_domain_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND, str(exc)
    if isinstance(exc, (InvalidTransitionError, MappingIncompleteError)):
        return status.HTTP_409_CONFLICT, str(exc)
    if isinstance(exc, FileRejectedError):
        if exc.reason == "size":
            return status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, str(exc)
        return status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, str(exc)
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc)
    if isinstance(exc, RestoreError):
        return status.HTTP_400_BAD_REQUEST, str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error."


def raise_http(exc: Exception) -> NoReturn:
    code, detail = map_domain_error(exc)
    raise HTTPException(status_code=code, detail=detail) from exc


def not_found(entity: str, entity_id: int) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found: {entity_id}")
