"""Client leader (user) model module."""

from __future__ import annotations

from sqlalchemy import JSON, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pipedash.core.enums import UserRole
from pipedash.models.base import AuditMixin, Base


class ClientLeader(Base, AuditMixin):
    __tablename__ = "users"
    __table_args__ = (Index("idx_users_role", "role"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(16))
    industry_groups: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    role: Mapped[str] = mapped_column(String(40), default=UserRole.CLIENT_LEADER.value, nullable=False)
