"""Demo dataset used to populate an empty dashboard."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from pipedash.core.enums import DEAL_STAGES, DEFAULT_STAGE_PROBABILITY
from pipedash.models import ClientLeader
from pipedash.services.dashboard_repository import DashboardRepository

logger = logging.getLogger(__name__)

SAMPLE_DEAL_COUNT = 85

SAMPLE_LEADERS = (
    ("Sarah Johnson", "sarah.j@pipedash.example", ["HSME", "TLCE"], "\U0001F469\u200d\U0001F4BC"),
    ("Michael Chen", "michael.c@pipedash.example", ["SBMA"], "\U0001F468\u200d\U0001F4BC"),
    ("Emma Rodriguez", "emma.r@pipedash.example", ["TLCE", "Global DXP"], "\U0001F469\u200d\U0001F4BB"),
    ("James Wilson", "james.w@pipedash.example", ["DXPS"], "\U0001F468\u200d\U0001F4BB"),
    ("Maria Garcia", "maria.g@pipedash.example", ["HSME"], "\U0001F469\u200d\U0001F3EB"),
    ("David Kim", "david.k@pipedash.example", ["SBMA", "DXPS"], "\U0001F468\u200d\U0001F527"),
    ("Lisa Anderson", "lisa.a@pipedash.example", ["Global DXP"], "\U0001F469\u200d\U0001F680"),
    ("Robert Taylor", "robert.t@pipedash.example", ["HSME", "SBMA"], "\U0001F468\u200d\U0001F393"),
    ("Jennifer Martinez", "jennifer.m@pipedash.example", ["TLCE"], "\U0001F469\u200d✈️"),
    ("Christopher Lee", "chris.l@pipedash.example", ["DXPS", "Global DXP"], "\U0001F468\u200d\U0001F4BB"),
    ("Amanda White", "amanda.w@pipedash.example", ["HSME"], "\U0001F469\u200d\U0001F3A4"),
    ("Daniel Brown", "daniel.b@pipedash.example", ["SBMA"], "\U0001F468\u200d\U0001F33E"),
    ("Michelle Davis", "michelle.d@pipedash.example", ["TLCE", "HSME"], "\U0001F469\u200d\U0001F3A8"),
    ("Kevin Miller", "kevin.m@pipedash.example", ["Global DXP"], "\U0001F468\u200d\U0001F680"),
    ("Rachel Thompson", "rachel.t@pipedash.example", ["DXPS"], "\U0001F469\u200d\U0001F4BC"),
    ("Thomas Garcia", "thomas.g@pipedash.example", ["SBMA", "TLCE"], "\U0001F468\u200d\U0001F3ED"),
    ("Laura Wilson", "laura.w@pipedash.example", ["HSME", "Global DXP"], "\U0001F469\u200d\U0001F3EB"),
    ("Steven Martinez", "steven.m@pipedash.example", ["TLCE"], "\U0001F9D1\u200d✈️"),
)

SAMPLE_COMPANIES = (
    "TechCorp Solutions",
    "Global Manufacturing Inc",
    "Luxury Hotels Group",
    "University of Excellence",
    "Sports Media Network",
    "Agricultural Innovations",
    "E-Commerce Giants",
    "Entertainment Studios",
    "Travel Adventures Ltd",
    "Business Consulting Pro",
    "DXP Solutions Inc",
    "Media Productions",
    "Manufacturing Excellence",
    "Cruise Line International",
    "Higher Ed Consortium",
    "Service Industries Corp",
)


def generate_sample_data(
    seed: int | None = None,
    now: datetime | None = None,
    deal_count: int = SAMPLE_DEAL_COUNT,
) -> dict[str, list[dict[str, Any]]]:
    """Build a backup-shaped document of demo leaders and deals.

    Deals are spread over the last 180 days with stage-default probabilities
    and close dates up to 90 days out.
    """
    rng = random.Random(seed)
    today = now or datetime.now(timezone.utc)

    leaders = [
        {"id": index, "name": name, "email": email, "groups": groups, "avatar": avatar, "role": "client_leader"}
        for index, (name, email, groups, avatar) in enumerate(SAMPLE_LEADERS, start=1)
    ]

    deals = []
    for index in range(1, deal_count + 1):
        leader = rng.choice(leaders)
        stage = rng.choice(DEAL_STAGES)
        created = today - timedelta(days=rng.randrange(180))
        deals.append(
            {
                "id": index,
                "name": f"{rng.choice(SAMPLE_COMPANIES)} - Project {index}",
                "value": float(rng.randrange(500000) + 10000),
                "stage": stage,
                "probability": DEFAULT_STAGE_PROBABILITY.get(stage, 0),
                "clientLeaderId": leader["id"],
                "industryGroup": rng.choice(leader["groups"]),
                "createdDate": created.isoformat(),
                "lastActivity": (today - timedelta(days=rng.randrange(30))).isoformat(),
                "expectedCloseDate": (today + timedelta(days=rng.randrange(90))).date().isoformat(),
                "notes": f"Initial contact made. Discussing requirements for {stage.lower()} stage.",
                "customFields": {
                    "priority": rng.choice(["High", "Medium", "Low"]),
                    "source": rng.choice(["Website", "Referral", "Cold Call", "Event"]),
                    "competitor": rng.choice(["Competitor A", "Competitor B", "None"]),
                },
            }
        )
    return {"clientLeaders": leaders, "deals": deals}


def seed_sample_data(db: Session, seed: int | None = None, force: bool = False) -> bool:
    """Load the demo dataset unless leaders already exist (or ``force``)."""
    if not force and db.query(ClientLeader.id).first() is not None:
        logger.info("seed.skipped", extra={"event": "seed.skipped"})
        return False
    leaders, deals = DashboardRepository(db).restore(generate_sample_data(seed=seed))
    logger.info("seed.loaded", extra={"event": "seed.loaded", "client_leaders": leaders, "deals": deals})
    return True
