"""KPI and chart-series aggregation over already-filtered record collections.

Every function here is a pure fold: it never touches the database and
tolerates empty input. Won/lost detection is an exact stage-string match, so
records whose stage is not in the canonical list drop out of the funnel and
the win rate silently.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from pipedash.core.enums import (
    INDUSTRY_GROUPS,
    DEAL_STAGES,
    JOB_STAGES,
    DealStage,
    JobStage,
    ProjectStatus,
)
from pipedash.schemas.metrics import (
    ChartData,
    FunnelEntry,
    GroupRevenue,
    JobMetrics,
    LeaderSummary,
    Metrics,
    MonthlyPoint,
)

WON_COLOR = "#10B981"
LOST_COLOR = "#EF4444"
OPEN_COLOR = "#3B82F6"
TREND_MONTHS = 6


@dataclass(frozen=True)
class PipelineDefinition:
    stages: tuple[str, ...]
    won_stage: str
    lost_stage: str

    @property
    def closed_stages(self) -> set[str]:
        return {self.won_stage, self.lost_stage}

    def color_for(self, stage: str) -> str:
        if stage == self.won_stage:
            return WON_COLOR
        if stage == self.lost_stage:
            return LOST_COLOR
        return OPEN_COLOR


OPPORTUNITY_PIPELINE = PipelineDefinition(
    stages=tuple(DEAL_STAGES),
    won_stage=DealStage.CLOSED_WON.value,
    lost_stage=DealStage.CLOSED_LOST.value,
)

JOB_PIPELINE = PipelineDefinition(
    stages=tuple(JOB_STAGES),
    won_stage=JobStage.CLOSED.value,
    lost_stage=JobStage.LOST.value,
)


def _value(record: Any) -> float:
    return float(getattr(record, "value", 0) or 0)


def _probability(record: Any) -> float:
    return float(getattr(record, "probability", 0) or 0)


def total_value(records: Iterable[Any]) -> float:
    return sum(_value(record) for record in records)


def avg_deal_size(records: Sequence[Any]) -> float:
    if not records:
        return 0.0
    return total_value(records) / len(records)


def win_rate(records: Iterable[Any], pipeline: PipelineDefinition = OPPORTUNITY_PIPELINE) -> float:
    won = 0
    lost = 0
    for record in records:
        stage = getattr(record, "stage", None)
        if stage == pipeline.won_stage:
            won += 1
        elif stage == pipeline.lost_stage:
            lost += 1
    if won + lost == 0:
        return 0.0
    return max(0.0, min(won / (won + lost) * 100.0, 100.0))


def weighted_pipeline_value(records: Iterable[Any], pipeline: PipelineDefinition = OPPORTUNITY_PIPELINE) -> float:
    """Risk-adjusted value of every record still open."""
    return sum(
        _value(record) * _probability(record) / 100.0
        for record in records
        if getattr(record, "stage", None) not in pipeline.closed_stages
    )


def compute_metrics(records: Iterable[Any], pipeline: PipelineDefinition = OPPORTUNITY_PIPELINE) -> Metrics:
    items = list(records)
    return Metrics(
        total_revenue=total_value(items),
        avg_deal_size=avg_deal_size(items),
        win_rate=win_rate(items, pipeline),
        pipeline_value=weighted_pipeline_value(items, pipeline),
        deal_count=len(items),
    )


def funnel_series(records: Iterable[Any], pipeline: PipelineDefinition = OPPORTUNITY_PIPELINE) -> list[FunnelEntry]:
    counts = {stage: 0 for stage in pipeline.stages}
    for record in records:
        stage = getattr(record, "stage", None)
        if stage in counts:
            counts[stage] += 1
    return [
        FunnelEntry(name=stage, value=counts[stage], fill=pipeline.color_for(stage))
        for stage in pipeline.stages
    ]


def group_revenue_series(records: Iterable[Any], groups: Sequence[str] | None = None) -> list[GroupRevenue]:
    """Sum value per industry group.

    With ``groups`` every listed group is reported (zero when absent);
    otherwise only groups present in the records, catalogue order first.
    """
    totals: dict[str, float] = {}
    for record in records:
        group = getattr(record, "industry_group", None)
        if not group:
            continue
        totals[group] = totals.get(group, 0.0) + _value(record)

    if groups is not None:
        return [GroupRevenue(name=group, revenue=totals.get(group, 0.0)) for group in groups]

    ordered = [code for code in INDUSTRY_GROUPS if code in totals]
    ordered.extend(sorted(group for group in totals if group not in INDUSTRY_GROUPS))
    return [GroupRevenue(name=group, revenue=totals[group]) for group in ordered]


def _trailing_months(today: date, count: int) -> list[tuple[int, int]]:
    months: list[tuple[int, int]] = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def _created_year_month(record: Any) -> tuple[int, int] | None:
    created = getattr(record, "created_at", None)
    if created is None:
        return None
    if isinstance(created, str):
        created = datetime.fromisoformat(created.replace("Z", "+00:00"))
    return created.year, created.month


def monthly_trend_series(
    records: Iterable[Any],
    now: datetime | date | None = None,
    months: int = TREND_MONTHS,
) -> list[MonthlyPoint]:
    today = now or datetime.now(timezone.utc)
    buckets = {key: [0, 0.0] for key in _trailing_months(today, months)}
    for record in records:
        key = _created_year_month(record)
        if key in buckets:
            buckets[key][0] += 1
            buckets[key][1] += _value(record)
    return [
        MonthlyPoint(month=calendar.month_abbr[month], year=year, deals=count, revenue=revenue)
        for (year, month), (count, revenue) in buckets.items()
    ]


def compute_chart_data(
    records: Iterable[Any],
    pipeline: PipelineDefinition = OPPORTUNITY_PIPELINE,
    now: datetime | date | None = None,
) -> ChartData:
    items = list(records)
    return ChartData(
        funnel_data=funnel_series(items, pipeline),
        revenue_by_group=group_revenue_series(items),
        monthly_data=monthly_trend_series(items, now=now),
    )


def leader_summaries(leaders: Iterable[Any], deals: Iterable[Any]) -> list[LeaderSummary]:
    """Per-leader deal count and pipeline value for the client-leader table."""
    by_leader: dict[int, list[Any]] = {}
    for deal in deals:
        by_leader.setdefault(getattr(deal, "client_leader_id", None), []).append(deal)

    return [
        LeaderSummary(
            client_leader_id=leader.id,
            name=leader.name,
            industry_groups=list(leader.industry_groups or []),
            deal_count=len(by_leader.get(leader.id, [])),
            pipeline_value=total_value(by_leader.get(leader.id, [])),
        )
        for leader in leaders
    ]


def job_metrics(jobs: Iterable[Any]) -> JobMetrics:
    items = list(jobs)
    active = [job for job in items if getattr(job, "stage", None) not in JOB_PIPELINE.closed_stages]
    completed = [job for job in items if getattr(job, "project_status", None) == ProjectStatus.FINISHED.value]
    return JobMetrics(
        total_jobs=len(items),
        active_jobs=len(active),
        completed_jobs=len(completed),
        total_job_value=total_value(items),
        avg_job_size=avg_deal_size(items),
        win_rate=win_rate(items, JOB_PIPELINE),
    )
