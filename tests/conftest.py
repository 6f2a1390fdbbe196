"""Shared test configuration: in-memory sqlite for the persistence and api tests."""

import os

# must be set before storehours.db.session builds its engine
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("APP_ENV", "testing")

import pytest


@pytest.fixture
def db():
    from storehours.db.base import Base
    from storehours.db.session import engine, SessionLocal

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from storehours.main import app

    with TestClient(app) as test_client:
        yield test_client
