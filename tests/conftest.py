"""
Shared fixtures: in-memory SQLite store and a TestClient bound to it
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app import models  # noqa: F401  (registers all tables on Base.metadata)


@pytest.fixture
def engine():
    """One in-memory database shared by every connection of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """TestClient whose get_db dependency yields the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def snapshot():
    """A small but complete snapshot document."""
    return {
        "participants": [
            {"id": 1, "name": "Anna", "gender": "F", "status": "Aktiv", "active": True, "age": 27},
            {"id": 2, "name": "Ben", "gender": "M", "status": "Aktiv", "active": True, "knownFrom": "Love Island"},
            {"id": 3, "name": "Clara", "gender": "F", "status": "Inaktiv", "active": False},
        ],
        "matchingNights": [
            {
                "id": 1,
                "name": "Matching Night 1",
                "date": "2025-09-08T00:00:00.000Z",
                "pairs": [{"woman": "Anna", "man": "Ben"}],
                "totalLights": 2,
            },
        ],
        "matchboxes": [
            {
                "id": 1,
                "woman": "Anna",
                "man": "Ben",
                "matchType": "sold",
                "price": 5000,
                "buyer": "Clara",
                "soldDate": "2025-09-10T20:15:00",
            },
        ],
        "penalties": [
            {
                "id": 1,
                "participantName": "Ben",
                "reason": "Regelverstoss",
                "amount": 1000,
                "date": "2025-09-12",
            },
        ],
        "broadcastNotes": [
            {"id": 1, "date": "2025-09-08", "notes": "Auftaktfolge"},
        ],
    }
