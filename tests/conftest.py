from __future__ import annotations

from pathlib import Path
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pipedash.core.dependencies import get_db_session
from pipedash.main import app
from pipedash.models import Base
from pipedash.schemas.deals import DealCreateRequest
from pipedash.schemas.leaders import ClientLeaderCreateRequest
from pipedash.services.client_leader_service import ClientLeaderService
from pipedash.services.deal_service import DealService


@pytest.fixture
def db_session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_leader(db_session):
    def _make_leader(name: str = "Sarah Johnson", groups: list[str] | None = None, **extra):
        email = extra.pop("email", f"{name.split()[0].lower()}.{uuid.uuid4().hex[:6]}@example.com")
        payload = ClientLeaderCreateRequest(
            name=name,
            email=email,
            industry_groups=groups if groups is not None else ["HSME"],
            **extra,
        )
        return ClientLeaderService(db_session).create_leader(payload)

    return _make_leader


@pytest.fixture
def make_deal(db_session):
    def _make_deal(leader, name: str = "Acme - Project 1", **fields):
        payload = DealCreateRequest(name=name, client_leader_id=leader.id, **fields)
        return DealService(db_session).create_deal(payload)

    return _make_deal


@pytest.fixture
def api_client():
    tmp_root = Path(".test_tmp")
    tmp_root.mkdir(exist_ok=True)
    db_path = tmp_root / f"pipedash_api_{uuid.uuid4().hex}.db"
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def _get_db_session():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _get_db_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db_session, None)
        engine.dispose()
