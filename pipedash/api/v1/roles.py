"""Role catalogue endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from pipedash.core.roles import ROLE_CATALOGUE, get_role
from pipedash.schemas.roles import RoleResponse

router = APIRouter(tags=["roles"])


def _to_response(role) -> RoleResponse:
    return RoleResponse(
        id=role.id,
        name=role.name,
        description=role.description,
        level=role.level,
        color=role.color,
        permissions=sorted(role.permissions),
    )


@router.get("/roles", response_model=list[RoleResponse])
def list_roles() -> list[RoleResponse]:
    return [_to_response(role) for role in sorted(ROLE_CATALOGUE.values(), key=lambda role: -role.level)]


@router.get("/roles/{role_id}", response_model=RoleResponse)
def get_role_detail(role_id: str) -> RoleResponse:
    role = get_role(role_id)
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Role not found: {role_id}")
    return _to_response(role)
