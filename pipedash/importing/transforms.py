"""Value transformations applied to imported cells."""

from __future__ import annotations

import json
import math
import re
from datetime import date, datetime

from pipedash.core.enums import INDUSTRY_GROUPS

# Legacy short codes used in spreadsheets exported from older trackers.
INDUSTRY_GROUP_CODES: dict[str, str] = {
    "SMBA": "Services",
    "HSNE": "HSME",
    "DXP": "Services",
    "TLCG": "Consumer",
    "NEW_BIZ": "Services",
}
DEFAULT_INDUSTRY_GROUP = "Services"

NON_DATED_QUARTERS = {"new biz opp", "opportunity", "exploration"}
TRUE_VALUES = {"true", "1", "yes", "y"}
BOOLEAN_VALUES = TRUE_VALUES | {"false", "0", "no", "n", ""}

_QUARTER = re.compile(r"Q([1-4])(\d{2})", re.IGNORECASE)

_INDUSTRY_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("university", "college"), "Higher Education"),
    (("bank", "financial"), "Financial Services"),
    (("health", "medical"), "Healthcare"),
    (("tech", "software"), "Technology"),
)


def trim(value: object) -> str:
    return "" if value is None else str(value).strip()


def lower_email(value: object) -> str:
    return trim(value).lower()


def map_industry_group(value: object) -> str:
    """Normalise an industry group cell to a catalogue code.

    Catalogue codes pass through; legacy short codes are translated and
    anything else falls back to Services.
    """
    text = trim(value)
    if text in INDUSTRY_GROUPS:
        return text
    return INDUSTRY_GROUP_CODES.get(text.upper(), DEFAULT_INDUSTRY_GROUP)


def parse_boolean(value: object) -> bool:
    return trim(value).lower() in TRUE_VALUES


def parse_quarter(value: object) -> date | None:
    """Turn a quarter code like ``Q325`` into the first day of that quarter."""
    text = trim(value)
    if not text or text.lower() in NON_DATED_QUARTERS:
        return None
    match = _QUARTER.search(text)
    if match is None:
        return None
    quarter = int(match.group(1))
    year = 2000 + int(match.group(2))
    return date(year, (quarter - 1) * 3 + 1, 1)


def infer_industry(company_name: object) -> str:
    lowered = trim(company_name).lower()
    for keywords, industry in _INDUSTRY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return industry
    return "Professional Services"


def parse_number(value: object) -> float | None:
    text = trim(value).replace(",", "").replace("$", "")
    if not text:
        return None
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"'{text}' is not a finite number")
    return number


def parse_int(value: object) -> int | None:
    number = parse_number(value)
    return None if number is None else int(round(number))


def parse_date(value: object) -> date | None:
    text = trim(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in ("%m/%d/%Y", "%d/%m/%Y", "%m/%d/%y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {text}")


def parse_list(value: object) -> list[str]:
    """Accept a JSON array or a comma/semicolon separated list."""
    text = trim(value)
    if not text:
        return []
    if text.startswith("["):
        parsed = json.loads(text)
        return [str(item).strip() for item in parsed if str(item).strip()]
    return [part.strip() for part in re.split(r"[;,]", text) if part.strip()]
