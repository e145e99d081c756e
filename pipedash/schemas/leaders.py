"""Client leader (user) schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pipedash.core.enums import UserRole


class ClientLeaderCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$", max_length=320)
    avatar: str | None = Field(default=None, max_length=16)
    industry_groups: list[str] = Field(default_factory=list)
    role: UserRole = UserRole.CLIENT_LEADER


class ClientLeaderUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$", max_length=320)
    avatar: str | None = Field(default=None, max_length=16)
    industry_groups: list[str] | None = None
    role: UserRole | None = None


class ClientLeaderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: str | None = None
    industry_groups: list[str] = Field(default_factory=list)
    role: str
    created_at: datetime | None = None
