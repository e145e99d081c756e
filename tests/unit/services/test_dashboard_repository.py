from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from pipedash.core.exceptions import RestoreError
from pipedash.models import ClientLeader, Deal
from pipedash.services.dashboard_repository import DashboardRepository
from pipedash.services.sample_data import SAMPLE_DEAL_COUNT, SAMPLE_LEADERS, generate_sample_data, seed_sample_data


def test_snapshot_uses_camel_case_document(db_session, make_leader, make_deal):
    leader = make_leader("Sarah Johnson", groups=["HSME", "TLCE"])
    make_deal(leader, name="Yale CMS", value=1200, stage="Proposal", notes="kickoff")

    document = DashboardRepository(db_session).snapshot()

    assert set(document) == {"clientLeaders", "deals"}
    assert document["clientLeaders"][0]["groups"] == ["HSME", "TLCE"]
    deal = document["deals"][0]
    assert deal["clientLeaderId"] == leader.id
    assert deal["probability"] == 50
    assert {"createdDate", "lastActivity", "expectedCloseDate", "customFields"} <= set(deal)


def test_backup_restore_round_trip_replaces_state(db_session, make_leader, make_deal):
    sarah = make_leader("Sarah Johnson")
    make_deal(sarah, name="Yale CMS", value=1200, stage="Proposal")
    make_deal(sarah, name="Cruise App", value=300, stage="Closed Won")
    backup = DashboardRepository(db_session).dump_backup()

    extra = make_leader("Michael Chen")
    make_deal(extra, name="Temporary", value=1)

    leaders, deals = DashboardRepository(db_session).restore(backup)

    assert (leaders, deals) == (1, 2)
    assert [leader.name for leader in db_session.query(ClientLeader).all()] == ["Sarah Johnson"]
    restored = {deal.name: deal for deal in db_session.query(Deal).all()}
    assert set(restored) == {"Yale CMS", "Cruise App"}
    assert restored["Cruise App"].probability == 100
    assert json.loads(DashboardRepository(db_session).dump_backup()) == json.loads(backup)


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"clientLeaders": []}),
        json.dumps([1, 2]),
        json.dumps({"clientLeaders": [{"name": "No Email"}], "deals": []}),
    ],
)
def test_bad_backups_raise_and_leave_state_untouched(db_session, make_leader, make_deal, raw):
    leader = make_leader()
    make_deal(leader)

    with pytest.raises(RestoreError):
        DashboardRepository(db_session).restore(raw)

    assert db_session.query(ClientLeader).count() == 1
    assert db_session.query(Deal).count() == 1


def test_sample_data_shape():
    document = generate_sample_data(seed=42)
    assert len(document["clientLeaders"]) == len(SAMPLE_LEADERS) == 18
    assert len(document["deals"]) == SAMPLE_DEAL_COUNT == 85
    leader_groups = {leader["id"]: leader["groups"] for leader in document["clientLeaders"]}
    for deal in document["deals"]:
        assert deal["industryGroup"] in leader_groups[deal["clientLeaderId"]]
        if deal["stage"] == "Closed Won":
            assert deal["probability"] == 100
    assert generate_sample_data(seed=42)["deals"][0]["name"] == document["deals"][0]["name"]


def test_seed_only_loads_into_an_empty_database(db_session):
    assert seed_sample_data(db_session, seed=1) is True
    assert db_session.query(Deal).count() == 85
    assert seed_sample_data(db_session, seed=1) is False


class _RecordingSession:
    def __init__(self, dialect: str) -> None:
        self.statements: list[str] = []
        self._bind = SimpleNamespace(dialect=SimpleNamespace(name=dialect))

    def get_bind(self):
        return self._bind

    def execute(self, statement):
        self.statements.append(str(statement))


def test_postgres_id_sequences_are_moved_past_restored_ids():
    session = _RecordingSession("postgresql")
    DashboardRepository(session)._sync_id_sequences()

    assert len(session.statements) == 2
    assert "pg_get_serial_sequence('users', 'id')" in session.statements[0]
    assert "pg_get_serial_sequence('deals', 'id')" in session.statements[1]
    assert all("setval" in statement for statement in session.statements)


def test_sqlite_needs_no_sequence_update():
    session = _RecordingSession("sqlite")
    DashboardRepository(session)._sync_id_sequences()
    assert session.statements == []


def test_new_records_after_restore_get_fresh_ids(db_session, make_leader, make_deal):
    DashboardRepository(db_session).restore(generate_sample_data(seed=3))

    leader = make_leader("New Hire")
    deal = make_deal(leader, name="Fresh Deal")

    assert leader.id == len(SAMPLE_LEADERS) + 1
    assert deal.id == SAMPLE_DEAL_COUNT + 1
