"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time; point them at throwaway values first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("REFERENCE_DATE", None)

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from community_events.api.deps import get_clock
from community_events.core.clock import DateClock
from community_events.db.base import Base
from community_events.db.session import get_db
from community_events.main import app
from community_events.models.profile import Profile
from community_events.models.ticket import Ticket

from factories import TODAY, create_access_token, utc


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db) -> TestClient:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: DateClock(TODAY)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_profile(db):
    def _make(full_name="Member", email=None, is_admin=False, created_at=None):
        profile = Profile(
            user_id=uuid.uuid4(),
            full_name=full_name,
            email=email,
            is_admin=is_admin,
            created_at=created_at or utc(2025, 1, 1),
        )
        db.add(profile)
        db.commit()
        return profile

    return _make


@pytest.fixture
def make_ticket(db):
    def _make(user, created_at, amount=2000, status="paid", session_id="cs_test", intent_id=None, used_at=None):
        ticket = Ticket(
            id=uuid.uuid4(),
            user_id=user.user_id,
            amount=amount,
            status=status,
            stripe_session_id=session_id,
            stripe_payment_intent_id=intent_id,
            created_at=created_at,
            used_at=used_at,
        )
        db.add(ticket)
        db.commit()
        return ticket

    return _make


@pytest.fixture
def admin(make_profile) -> Profile:
    return make_profile(full_name="Admin", email="admin@example.com", is_admin=True)


@pytest.fixture
def admin_headers(admin) -> dict:
    return {"Authorization": f"Bearer {create_access_token(str(admin.user_id))}"}
