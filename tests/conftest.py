"""Shared fixtures: an isolated in-memory database per test and an API client."""
import os

# keep the app off the on-disk database before anything imports it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mspdesk.app.api import app
from mspdesk.app.db import get_db, init_db


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, headers={"X-Actor": "tech@example.com"})
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(client):
    def _make(name="Acme Corp", **fields):
        r = client.post("/api/clients", json={"name": name, **fields})
        assert r.status_code == 201, r.text
        return r.json()
    return _make
