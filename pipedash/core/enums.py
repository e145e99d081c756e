"""Enums and catalogues for the Pipedash application.

Stage values use title case because they are stored verbatim and compared by
exact string match in the metrics layer.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class DealStage(str, enum.Enum):
    """Stage of an opportunity in the sales pipeline."""

    LEAD = "Lead"
    QUALIFIED = "Qualified"
    PROPOSAL = "Proposal"
    NEGOTIATION = "Negotiation"
    CLOSED_WON = "Closed Won"
    CLOSED_LOST = "Closed Lost"


class JobStage(str, enum.Enum):
    """Stage of a job/project after an opportunity turns into work."""

    PROPOSAL_PREPARATION = "Proposal Preparation"
    PROPOSAL_SENT = "Proposal Sent"
    FINAL_NEGOTIATION = "Final Negotiation"
    BACKLOG = "Backlog"
    CLOSED = "Closed"
    LOST = "Lost"


class ProjectStatus(str, enum.Enum):
    TO_BE_STARTED = "To Be Started"
    ONGOING = "On-Going"
    FINISHED = "Finished"
    CLOSED = "Closed"


class Priority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class UserRole(str, enum.Enum):
    INDUSTRY_LEADER = "industry_leader"
    ACCOUNT_OWNER = "account_owner"
    CLIENT_LEADER = "client_leader"
    ADMIN = "admin"


LOST_REASONS = (
    "Not Bid",
    "Price",
    "Timeline",
    "Competitor",
    "Budget Cut",
    "Project Cancelled",
    "Other",
)

PAYMENT_TERMS = ("Net 15", "Net 30", "Net 45", "Net 60", "Due on Receipt")

DEAL_STAGES = [stage.value for stage in DealStage]
JOB_STAGES = [stage.value for stage in JobStage]
CLOSED_DEAL_STAGES = {DealStage.CLOSED_WON.value, DealStage.CLOSED_LOST.value}

# Probability a new deal gets when the caller does not supply one.
DEFAULT_STAGE_PROBABILITY: dict[str, int] = {
    DealStage.LEAD.value: 10,
    DealStage.QUALIFIED.value: 25,
    DealStage.PROPOSAL.value: 50,
    DealStage.NEGOTIATION.value: 75,
    DealStage.CLOSED_WON.value: 100,
    DealStage.CLOSED_LOST.value: 0,
}


@dataclass(frozen=True)
class IndustryGroup:
    code: str
    name: str
    color: str


INDUSTRY_GROUPS: dict[str, IndustryGroup] = {
    group.code: group
    for group in (
        IndustryGroup("FSI", "Financial Services & Insurance", "#3B82F6"),
        IndustryGroup("Consumer", "Consumer", "#10B981"),
        IndustryGroup("TMT", "TMT & Energy", "#F59E0B"),
        IndustryGroup("Services", "Services", "#8B5CF6"),
        IndustryGroup("Industrial", "Industrial & Automotive", "#EF4444"),
        IndustryGroup("Pharma", "Pharma & Lifesciences", "#06B6D4"),
        IndustryGroup("Government", "Government & Public Sector", "#84CC16"),
        IndustryGroup("HSME", "Higher Education, Sports, Media, Entertainment", "#3B82F6"),
        IndustryGroup("SBMA", "Manufacturing, Agriculture, Business, Services", "#10B981"),
        IndustryGroup("TLCE", "Travel, Luxury, Commerce, Cruises", "#F59E0B"),
        IndustryGroup("DXPS", "DXP Support", "#8B5CF6"),
        IndustryGroup("Global DXP", "Global DXP Operations", "#EF4444"),
    )
}


def clamp_probability(stage: str | None, probability: int | float | None) -> int:
    """Tie probability to stage for closed deals and clamp to [0, 100]."""
    if stage == DealStage.CLOSED_WON.value:
        return 100
    if stage == DealStage.CLOSED_LOST.value:
        return 0
    if probability is None:
        return DEFAULT_STAGE_PROBABILITY.get(stage or "", 0)
    return max(0, min(int(round(float(probability))), 100))
