"""Pytest fixtures — file-backed SQLite database per test, local image storage in tmp_path."""
import os

# The app engine is created at import time; keep it off disk.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from eventhub.database import Base, get_db
from eventhub.main import app
from eventhub.storage import ImageStorage, get_storage

# Import all models so they register with Base.metadata
from eventhub.models.user import User                  # noqa: F401
from eventhub.models.event import Event                # noqa: F401
from eventhub.models.registration import Registration  # noqa: F401

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})

    # SQLite only honours ON DELETE CASCADE with foreign keys switched on
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def storage(tmp_path):
    return ImageStorage(str(tmp_path / "media"))


@pytest.fixture(scope="function")
def client(db_engine, storage):
    """FastAPI TestClient with database and storage dependencies overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def create_test_user(client: TestClient, name: str = "Test User", email: str = None) -> dict:
    """Helper — POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={
        "name": name,
        "email": email or f"{name.lower().replace(' ', '.')}@example.com",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth(user: dict) -> dict:
    """Principal header for ``user``."""
    return {"X-User-Id": user["user_id"]}


def event_form(**overrides) -> dict:
    """A valid create/update form; ``None`` removes a field."""
    data = {
        "title": "Jazz Night",
        "description": "Live jazz with the house band.",
        "event_date": "2026-11-05T19:00:00",
        "location": "Blue Note Hall",
        "city": "Austin",
        "state": "Texas",
        "capacity": "3",
        "is_paid": "false",
    }
    for key, value in overrides.items():
        if value is None:
            data.pop(key, None)
        else:
            data[key] = str(value)
    return data


def create_test_event(client: TestClient, user: dict, files: dict = None, **overrides) -> dict:
    """Helper — POST /api/events and return the created event."""
    resp = client.post("/api/events/", data=event_form(**overrides), files=files, headers=auth(user))
    assert resp.status_code == 201, resp.text
    return resp.json()["event"]


def set_status(client: TestClient, user: dict, event: dict, status: str, **overrides) -> dict:
    """Helper — PUT the event back with a new status and return it."""
    fields = {
        "title": event["title"],
        "description": event["description"],
        "event_date": event["event_date"],
        "location": event["location"],
        "city": event["city"],
        "state": event["state"],
        "capacity": event["capacity"],
        "is_paid": str(event["is_paid"]).lower(),
        "price": event["price"],
        "status": status,
    }
    fields.update(overrides)
    resp = client.put(f"/api/events/{event['event_id']}", data=event_form(**fields), headers=auth(user))
    assert resp.status_code == 200, resp.text
    return resp.json()["event"]
