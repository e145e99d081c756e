from __future__ import annotations

from datetime import date

from pipedash.importing.field_mapper import FieldMapper
from pipedash.importing.parser import parse_csv
from pipedash.importing.registry import get_schema
from pipedash.models import Account, ActivityLog, ClientLeader, Deal, Job
from pipedash.services.import_service import ImportService

PROJECTS_CSV = (
    "client_name,project_name,client_short,unique_id,start_quarter,end_quarter,is_new_business\n"
    "Yale University,CMS Migration,HSNE,YALE001,Q325,Q425,true\n"
    "Yale University,Alumni Portal,HSNE,YALE002,New Biz Opp,,false\n"
)


def _run(db_session, schema_id: str, text: str, batch_values: dict[str, str] | None = None):
    schema = get_schema(schema_id)
    parsed = parse_csv(text)
    mapper = FieldMapper(parsed.headers, schema, auto_accept_threshold=0.7)
    for target_field, value in (batch_values or {}).items():
        mapper.apply_batch_value(target_field, value)
    return ImportService(db_session).execute(schema, parsed.rows, mapper.complete())


def test_project_import_creates_accounts_and_jobs(db_session):
    result = _run(db_session, "projects", PROJECTS_CSV)

    assert (result.imported, result.skipped, result.errors) == (2, 0, [])
    accounts = db_session.query(Account).all()
    assert [(account.name, account.industry, account.industry_group) for account in accounts] == [
        ("Yale University", "Higher Education", "HSME")
    ]

    jobs = {job.name: job for job in db_session.query(Job).all()}
    cms = jobs["CMS Migration"]
    assert cms.stage == "Proposal Preparation"
    assert cms.project_start_date == date(2025, 7, 1)
    assert cms.project_end_date == date(2025, 10, 1)
    assert cms.account_id == accounts[0].id
    assert cms.job_code.startswith("JOB-")
    portal = jobs["Alumni Portal"]
    assert portal.stage == "Backlog"
    assert portal.project_start_date is None


def test_reimport_skips_existing_projects(db_session):
    _run(db_session, "projects", PROJECTS_CSV)
    result = _run(db_session, "projects", PROJECTS_CSV)
    assert (result.imported, result.skipped) == (0, 2)
    assert result.summary.duplicates == 2
    assert db_session.query(Job).count() == 2


def test_user_import_updates_by_email_and_reports_bad_rows(db_session):
    db_session.add(ClientLeader(name="J", email="john@example.com", role="client_leader", industry_groups=[]))
    db_session.commit()
    text = (
        "name,email,role,industry_groups\n"
        'John Doe,JOHN@example.com,industry_leader,"TMT;Consumer"\n'
        "Jane Smith,jane@example.com,,\n"
        "Broken,not-an-email,,\n"
    )
    result = _run(db_session, "users", text)

    assert (result.imported, result.updated) == (1, 1)
    assert [(issue.row, issue.field, issue.message) for issue in result.errors] == [
        (4, "email", "Invalid email format")
    ]
    assert result.success is True
    john = db_session.query(ClientLeader).filter(ClientLeader.email == "john@example.com").one()
    assert (john.name, john.role, john.industry_groups) == ("John Doe", "industry_leader", ["TMT", "Consumer"])
    jane = db_session.query(ClientLeader).filter(ClientLeader.email == "jane@example.com").one()
    assert jane.role == "client_leader"


def test_deal_import_resolves_leaders_and_keeps_extra_columns(db_session, make_leader):
    first = make_leader("Sarah Johnson", groups=["HSME"])
    make_leader("Michael Chen", groups=["SBMA"])
    text = (
        "Deal Name,Value,Stage,Client Leader,Probability,Region\n"
        'Yale CMS,"$120,000",Closed Won,Michael Chen,40,East\n'
        "Cruise App,5000,Lead,Nobody Known,,West\n"
    )
    result = _run(db_session, "deals", text)

    assert result.imported == 2
    deals = {deal.name: deal for deal in db_session.query(Deal).all()}
    yale = deals["Yale CMS"]
    assert yale.value == 120000.0
    assert yale.probability == 100
    assert yale.industry_group == "SBMA"
    assert yale.custom_fields["extra"] == {"Region": "East"}
    cruise = deals["Cruise App"]
    assert cruise.client_leader_id == first.id
    assert cruise.probability == 10


def test_batch_value_fills_missing_required_column(db_session):
    result = _run(db_session, "projects", "project_name\nWebsite\nPortal\n", batch_values={"client_name": "Acme"})
    assert result.imported == 2
    assert db_session.query(Account).one().name == "Acme"


def test_mostly_failing_import_is_not_successful(db_session, make_leader):
    make_leader()
    result = _run(db_session, "deals", "Deal Name,Value\nA,abc\nB,xyz\nC,10\n")
    assert result.imported == 1
    assert {issue.row for issue in result.errors} == {2, 3}
    assert result.success is False
    assert result.errors[0].message.startswith("Transformation failed")


def test_import_records_activity(db_session):
    _run(db_session, "clients", "name\nAcme\n")
    entry = db_session.query(ActivityLog).filter(ActivityLog.action == "clients_import_completed").one()
    assert entry.details["imported"] == 1


def test_non_finite_numbers_become_row_issues(db_session, make_leader):
    make_leader()
    text = (
        "Deal Name,Value,Stage,Probability\n"
        "A,nan,Lead,\n"
        "B,1000,Lead,inf\n"
        "C,1e400,Lead,\n"
        "D,250,Lead,20\n"
    )
    result = _run(db_session, "deals", text)

    assert result.imported == 1
    assert {issue.row for issue in result.errors} == {2, 3, 4}
    assert [deal.name for deal in db_session.query(Deal).all()] == ["D"]
