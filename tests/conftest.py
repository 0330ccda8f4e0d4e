"""Pytest configuration and fixtures."""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from donor_registry.database.database import Base, get_db
from donor_registry.services.donor_intake import DonorIntake
from donor_registry.services.eligibility import EligibilityPolicy, PolicyConfig
from donor_registry import models  # noqa: F401

REFERENCE_DAY = date(2025, 6, 15)


@pytest.fixture
def today():
    return REFERENCE_DAY


@pytest.fixture
def policy():
    return EligibilityPolicy(PolicyConfig(cooldown_days=90))


@pytest.fixture
def intake(policy):
    return DonorIntake(policy)


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    from donor_registry.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
