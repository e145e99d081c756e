"""Deal (opportunity) model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import JSON, Date, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pipedash.core.enums import DealStage
from pipedash.models.base import ActivityMixin, Base


class Deal(Base, ActivityMixin):
    __tablename__ = "deals"
    __table_args__ = (
        Index("idx_deals_stage", "stage"),
        Index("idx_deals_client_leader", "client_leader_id"),
        Index("idx_deals_industry_group", "industry_group"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    # Free-form on purpose: rows from bad imports keep their raw stage text.
    stage: Mapped[str] = mapped_column(String(60), default=DealStage.LEAD.value, nullable=False)
    probability: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    client_leader_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    account_id: Mapped[int | None] = mapped_column(ForeignKey("accounts.id", ondelete="SET NULL"))
    industry_group: Mapped[str | None] = mapped_column(String(60))
    expected_close_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    custom_fields: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    lost_reason: Mapped[str | None] = mapped_column(String(60))

    client_leader = relationship("ClientLeader")
    account = relationship("Account")
