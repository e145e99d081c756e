"""Job (project) model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pipedash.core.enums import JobStage, Priority, ProjectStatus
from pipedash.models.base import ActivityMixin, Base


class Job(Base, ActivityMixin):
    __tablename__ = "jobs"
    __table_args__ = (
        Index("idx_jobs_stage", "stage"),
        Index("idx_jobs_account", "account_id"),
        Index("idx_jobs_client_leader", "client_leader_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    job_code: Mapped[str | None] = mapped_column(String(60), unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    deal_id: Mapped[int | None] = mapped_column(ForeignKey("deals.id", ondelete="SET NULL"))
    account_id: Mapped[int | None] = mapped_column(ForeignKey("accounts.id", ondelete="SET NULL"))
    value: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    stage: Mapped[str] = mapped_column(String(60), default=JobStage.PROPOSAL_PREPARATION.value, nullable=False)
    project_status: Mapped[str] = mapped_column(String(40), default=ProjectStatus.TO_BE_STARTED.value, nullable=False)
    client_leader_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    industry_group: Mapped[str | None] = mapped_column(String(60))
    expected_confirmation_date: Mapped[date | None] = mapped_column(Date)
    project_start_date: Mapped[date | None] = mapped_column(Date)
    project_end_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    priority: Mapped[str] = mapped_column(String(20), default=Priority.MEDIUM.value, nullable=False)
    lost_reason: Mapped[str | None] = mapped_column(String(60))

    deal = relationship("Deal")
    account = relationship("Account")
    client_leader = relationship("ClientLeader")
