"""Pytest fixtures for StillGood backend tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers every table on Base.metadata
from app.core.enums import MemberRole
from app.db.base import Base
from app.models.household import Household, HouseholdMember
from app.models.user import User
from app.services.freshness_rule_service import ensure_default_rules


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs the app in a worker thread)."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Session with the default freshness rules seeded."""
    session = session_factory()
    ensure_default_rules(session)
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def make_household(db):
    """Factory: make_household(name, members=[("alice", prefs_email, prefs_in_app), ...]) -> (household, [users])."""
    counter = {"n": 0}

    def _make(name: str = "Home", members=(("alice", True, True),)):
        counter["n"] += 1
        household = Household(name=name, invite_code=f"CODE{counter['n']}")
        db.add(household)
        db.flush()
        users = []
        for i, (username, prefs_email, prefs_in_app) in enumerate(members):
            user = User(
                email=f"{username}.{counter['n']}@stillgood.local",
                name=username.title(),
                prefs_email=prefs_email,
                prefs_in_app=prefs_in_app,
            )
            db.add(user)
            db.flush()
            role = MemberRole.OWNER if i == 0 else MemberRole.MEMBER
            db.add(HouseholdMember(household_id=household.id, user_id=user.id, role=role.value))
            users.append(user)
        db.commit()
        return household, users

    return _make
