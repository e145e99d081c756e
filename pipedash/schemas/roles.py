"""Role catalogue schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RoleResponse(BaseModel):
    id: str
    name: str
    description: str
    level: int
    color: str
    permissions: list[str] = Field(default_factory=list)
