"""Account model module."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pipedash.models.base import AuditMixin, Base


class Account(Base, AuditMixin):
    __tablename__ = "accounts"
    __table_args__ = (
        Index("idx_accounts_name", "name"),
        Index("idx_accounts_industry_group", "industry_group"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    legal_name: Mapped[str | None] = mapped_column(String(255))
    billing_address: Mapped[str | None] = mapped_column(Text)
    payment_terms: Mapped[str] = mapped_column(String(40), default="Net 30", nullable=False)
    industry: Mapped[str | None] = mapped_column(String(120))
    industry_group: Mapped[str | None] = mapped_column(String(60))
    account_owner_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))

    account_owner = relationship("ClientLeader")
