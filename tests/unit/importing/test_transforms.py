from __future__ import annotations

from datetime import date

import pytest

from pipedash.importing import transforms
from pipedash.importing.registry import get_schema


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Q325", date(2025, 7, 1)),
        ("q124", date(2024, 1, 1)),
        ("Q4 25", None),
        ("New Biz Opp", None),
        ("", None),
    ],
)
def test_parse_quarter(raw, expected):
    assert transforms.parse_quarter(raw) == expected


def test_map_industry_group_translates_legacy_codes():
    assert transforms.map_industry_group("TMT") == "TMT"
    assert transforms.map_industry_group("HSNE") == "HSME"
    assert transforms.map_industry_group("smba") == "Services"
    assert transforms.map_industry_group("Unknown Co") == "Services"


def test_number_and_date_parsing():
    assert transforms.parse_number("$1,250.50") == 1250.5
    assert transforms.parse_number("  ") is None
    assert transforms.parse_int("49.6") == 50
    assert transforms.parse_date("2024-03-15T10:00:00Z") == date(2024, 3, 15)
    assert transforms.parse_date("03/15/2024") == date(2024, 3, 15)
    assert transforms.parse_date("31/12/2024") == date(2024, 12, 31)
    assert transforms.parse_date("") is None
    with pytest.raises(ValueError):
        transforms.parse_date("next tuesday")
    with pytest.raises(ValueError):
        transforms.parse_number("lots")


def test_list_boolean_and_industry_helpers():
    assert transforms.parse_list('["TMT", "Services"]') == ["TMT", "Services"]
    assert transforms.parse_list("TMT; Consumer,") == ["TMT", "Consumer"]
    assert transforms.parse_list("") == []
    assert transforms.parse_boolean("Yes") is True
    assert transforms.parse_boolean("false") is False
    assert transforms.infer_industry("Arizona State University") == "Higher Education"
    assert transforms.infer_industry("Quaker Houghton") == "Professional Services"
    assert transforms.lower_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"


@pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity", "1e400"])
def test_non_finite_numbers_are_rejected(raw):
    with pytest.raises(ValueError):
        transforms.parse_number(raw)
    with pytest.raises(ValueError):
        transforms.parse_int(raw)


def test_number_rule_rejects_non_finite_cells():
    failed = {rule.field for rule in get_schema("deals").check_rules({"name": "A", "value": "nan", "probability": "inf"})}
    assert failed == {"value", "probability"}
    assert get_schema("deals").check_rules({"name": "A", "value": 12.5, "probability": "40"}) == []
