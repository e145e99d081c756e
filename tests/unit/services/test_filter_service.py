from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from pipedash.schemas.filters import DateRange, FilterState
from pipedash.services.filter_service import filter_records, matches


def _deal(**fields):
    defaults = {
        "name": "Deal",
        "notes": "",
        "stage": "Lead",
        "industry_group": "HSME",
        "client_leader_id": 1,
        "created_at": datetime(2024, 3, 15, 18, 30, tzinfo=timezone.utc),
    }
    defaults.update(fields)
    return SimpleNamespace(**defaults)


@pytest.fixture
def records():
    return [
        _deal(name="Yale CMS", industry_group="HSME", client_leader_id=1),
        _deal(name="Cruise Portal", industry_group="TLCE", client_leader_id=2, notes="Needs SSO"),
        _deal(name="Factory Analytics", industry_group="SBMA", client_leader_id=3, stage="Closed Won"),
        _deal(name="DXP Upgrade", industry_group="DXPS", client_leader_id=1, created_at=datetime(2024, 5, 1)),
    ]


def test_empty_filter_state_is_identity(records):
    result = filter_records(records, FilterState())
    assert result == records
    assert result is not records


def test_industry_group_filter_keeps_only_selected_groups(records):
    result = filter_records(records, FilterState(industry_groups=["HSME", "DXPS"]))
    assert [record.name for record in result] == ["Yale CMS", "DXP Upgrade"]
    assert all(record.industry_group in {"HSME", "DXPS"} for record in result)


def test_client_leader_and_stage_filters_are_anded(records):
    state = FilterState(client_leader_ids=[1, 3], stages=["Lead"])
    assert [record.name for record in filter_records(records, state)] == ["Yale CMS", "DXP Upgrade"]


def test_date_range_compares_calendar_dates_inclusively(records):
    state = FilterState(date_range=DateRange(start="2024-03-15", end="2024-03-15"))
    result = filter_records(records, state)
    assert len(result) == 3
    assert all(record.created_at.day == 15 for record in result)


def test_open_ended_date_range(records):
    assert [r.name for r in filter_records(records, FilterState(date_range=DateRange(start="2024-04-01")))] == [
        "DXP Upgrade"
    ]
    assert len(filter_records(records, FilterState(date_range=DateRange(end="2024-04-01")))) == 3


def test_search_matches_name_or_notes_case_insensitively(records):
    assert [r.name for r in filter_records(records, FilterState(search_query="sso"))] == ["Cruise Portal"]
    assert [r.name for r in filter_records(records, FilterState(search_query="YALE"))] == ["Yale CMS"]


def test_records_without_created_date_fail_an_active_date_filter():
    record = _deal(created_at=None)
    assert matches(record, FilterState(date_range=DateRange(start="2024-01-01"))) is False
    assert matches(record, FilterState()) is True


def test_filter_does_not_mutate_input(records):
    snapshot = list(records)
    filter_records(records, FilterState(industry_groups=["TLCE"]))
    assert records == snapshot


def test_date_range_rejects_non_iso_bounds():
    with pytest.raises(ValueError):
        DateRange(start="03/15/2024")
