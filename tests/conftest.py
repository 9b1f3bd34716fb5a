"""Shared fixtures: a fresh in-memory schema per test and an API client."""

import os

os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

import app.models  # noqa: F401
from app.config import get_settings
from app.db import Base, SessionLocal, engine, get_db
from app.main import create_app

pytest_plugins = [
    "tests.fixtures.user_fixtures",
    "tests.fixtures.message_fixtures",
]


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """API client sharing the test session; authenticate with auth_headers(user)."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    header = get_settings().user_id_header

    def _headers(user):
        return {header: str(user.id)}

    return _headers
