from __future__ import annotations

import pytest

from pipedash.core.exceptions import ValidationError
from pipedash.models import Account, ActivityLog, ClientLeader, Deal, Job
from pipedash.schemas.accounts import AccountCreateRequest, AccountUpdateRequest
from pipedash.schemas.deals import DealCreateRequest, DealUpdateRequest
from pipedash.schemas.filters import FilterState
from pipedash.schemas.jobs import JobCreateRequest, JobUpdateRequest
from pipedash.schemas.leaders import ClientLeaderCreateRequest, ClientLeaderUpdateRequest
from pipedash.services.account_service import AccountService
from pipedash.services.activity_log_service import ActivityLogService
from pipedash.services.client_leader_service import ClientLeaderService
from pipedash.services.deal_service import DealService
from pipedash.services.job_service import JobService, format_job_code


def test_create_deal_fills_defaults_and_clamps_probability(db_session, make_leader):
    leader = make_leader(groups=["TLCE", "HSME"])
    service = DealService(db=db_session)

    deal = service.create_deal(DealCreateRequest(name="Cruise App", client_leader_id=leader.id))
    assert (deal.stage, deal.probability, deal.value) == ("Lead", 10, 0.0)
    assert deal.industry_group == "TLCE"
    assert deal.created_at == deal.last_activity

    won = service.create_deal(
        DealCreateRequest(name="Won", client_leader_id=leader.id, stage="Closed Won", probability=30)
    )
    assert won.probability == 100


def test_create_deal_rejects_unknown_leader(db_session):
    with pytest.raises(ValidationError):
        DealService(db_session).create_deal(DealCreateRequest(name="Ghost", client_leader_id=99))


def test_update_deal_restamps_last_activity_only(db_session, make_leader, make_deal):
    deal = make_deal(make_leader(), stage="Qualified")
    created_at = deal.created_at
    previous_activity = deal.last_activity

    updated = DealService(db_session).update_deal(deal.id, DealUpdateRequest(notes="Call booked", stage="Closed Lost"))

    assert updated.notes == "Call booked"
    assert updated.probability == 0
    assert updated.created_at == created_at
    assert updated.last_activity >= previous_activity
    assert DealService(db_session).update_deal(12345, DealUpdateRequest(notes="x")) is None


def test_moving_to_proposal_creates_one_job(db_session, make_leader, make_deal):
    deal = make_deal(make_leader(groups=["SBMA"]), name="Factory Analytics", value=5000)
    service = DealService(db_session)

    service.update_deal(deal.id, DealUpdateRequest(stage="Proposal"))
    service.update_deal(deal.id, DealUpdateRequest(stage="Negotiation"))
    service.update_deal(deal.id, DealUpdateRequest(stage="Proposal"))

    jobs = db_session.query(Job).all()
    assert len(jobs) == 1
    job = jobs[0]
    assert job.deal_id == deal.id
    assert job.name == "Factory Analytics - Project"
    assert job.value == 5000
    assert job.industry_group == "SBMA"
    assert job.job_code == format_job_code(job.id, job.created_at.year)


def test_list_deals_applies_filter_state(db_session, make_leader, make_deal):
    leader = make_leader()
    make_deal(leader, name="Alpha", industry_group="HSME")
    make_deal(leader, name="Beta", industry_group="TLCE")
    names = [deal.name for deal in DealService(db_session).list_deals(FilterState(industry_groups=["TLCE"]))]
    assert names == ["Beta"]


def test_delete_leader_cascades_to_owned_deals(db_session, make_leader, make_deal):
    sarah = make_leader("Sarah Johnson")
    sarah_id = sarah.id
    michael = make_leader("Michael Chen")
    first = make_deal(sarah, name="S1")
    make_deal(sarah, name="S2")
    make_deal(michael, name="M1")
    DealService(db_session).update_deal(first.id, DealUpdateRequest(stage="Proposal"))
    account = AccountService(db_session).create_account(
        AccountCreateRequest(name="Yale University", account_owner_id=sarah.id)
    )

    cascaded = ClientLeaderService(db_session).delete_leader(sarah_id)

    assert cascaded == 2
    assert [leader.name for leader in db_session.query(ClientLeader).all()] == ["Michael Chen"]
    assert [deal.name for deal in db_session.query(Deal).all()] == ["M1"]
    job = db_session.query(Job).one()
    assert job.deal_id is None
    assert job.client_leader_id is None
    assert db_session.get(Account, account.id).account_owner_id is None
    assert ClientLeaderService(db_session).delete_leader(sarah_id) is None


def test_leader_email_must_be_unique(db_session, make_leader):
    make_leader("Sarah Johnson", email="sarah@example.com")
    service = ClientLeaderService(db_session)
    with pytest.raises(ValidationError):
        service.create_leader(ClientLeaderCreateRequest(name="Other Sarah", email="SARAH@example.com"))

    other = make_leader("Michael Chen")
    with pytest.raises(ValidationError):
        service.update_leader(other.id, ClientLeaderUpdateRequest(email="sarah@example.com"))


def test_list_leaders_filters_by_group_and_search(db_session, make_leader):
    make_leader("Sarah Johnson", groups=["HSME", "TLCE"])
    make_leader("Michael Chen", groups=["SBMA"])
    service = ClientLeaderService(db_session)
    assert [leader.name for leader in service.list_leaders(industry_groups=["TLCE"])] == ["Sarah Johnson"]
    assert [leader.name for leader in service.list_leaders(search_query="chen")] == ["Michael Chen"]
    assert service.find_by_name("sarah johnson").name == "Sarah Johnson"


def test_job_inherits_account_group_and_rejects_duplicate_codes(db_session):
    account = AccountService(db_session).create_account(
        AccountCreateRequest(name="Arizona State University", industry_group="HSME")
    )
    service = JobService(db_session)

    job = service.create_job(JobCreateRequest(name="Campus Portal", account_id=account.id, value=1000))
    assert job.industry_group == "HSME"
    assert job.job_code == format_job_code(job.id, job.created_at.year)
    assert job.project_status == "To Be Started"

    with pytest.raises(ValidationError):
        service.create_job(JobCreateRequest(name="Copy", job_code=job.job_code))

    updated = service.update_job(job.id, JobUpdateRequest(project_status="On-Going", notes=None))
    assert updated.project_status == "On-Going"
    assert updated.notes == ""
    assert service.list_jobs(project_status="On-Going")[0].id == job.id
    assert service.delete_job(job.id) is True
    assert service.delete_job(job.id) is False


def test_format_job_code():
    assert format_job_code(7, 2025) == "JOB-2025-0007"


def test_account_crud_and_delete_detaches_records(db_session, make_leader, make_deal):
    service = AccountService(db_session)
    account = service.create_account(AccountCreateRequest(name="Yale University", industry="Higher Education"))
    assert account.payment_terms == "Net 30"

    service.update_account(account.id, AccountUpdateRequest(payment_terms=None, billing_address="149 Elm St"))
    assert service.get_account(account.id).payment_terms == "Net 30"
    assert [a.name for a in service.list_accounts(search_query="higher")] == ["Yale University"]

    deal = make_deal(make_leader(), account_id=account.id)
    assert service.delete_account(account.id) is True
    assert db_session.get(Deal, deal.id).account_id is None
    assert service.find_by_name("yale university") is None


def test_activity_log_records_mutations(db_session, make_leader, make_deal):
    deal = make_deal(make_leader())
    DealService(db_session).delete_deal(deal.id)
    actions = [entry.action for entry in ActivityLogService(db_session).list_activity(entity_type="deal")]
    assert actions == ["deleted", "created"]
    assert db_session.query(ActivityLog).filter(ActivityLog.entity_type == "user").count() == 1
