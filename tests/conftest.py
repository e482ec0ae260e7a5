import os
import sys
import datetime as dt

# --- ensure project root is importable ---
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, create_engine, Session

from liftplan.main import app
from liftplan.db import get_session as prod_get_session
from liftplan.client.errors import RemoteFailure
from liftplan.client.remote import RemoteStore
from liftplan.client.planner import Planner
from liftplan.client.store import PlanningStore

# Thursday; its week is Mon 2024-06-10 .. Sun 2024-06-16
TODAY = dt.date(2024, 6, 13)


@pytest.fixture
def _engine(tmp_path):
    url = f"sqlite:///{tmp_path / 'test.db'}"
    engine = create_engine(url, connect_args={"check_same_thread": False})
    # Import models to register metadata, then create tables
    from liftplan import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def db(_engine):
    with Session(_engine) as s:
        yield s


@pytest.fixture
def client(_engine):
    # Override the app's DB session dependency to use the test engine
    def _get_session_override():
        with Session(_engine) as s:
            yield s

    app.dependency_overrides[prod_get_session] = _get_session_override
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


def login(client, email="lifter@example.com", password="secret123"):
    r = client.post("/api/auth/register", json={"email": email, "password": password})
    assert r.status_code in (201, 409)
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return r.json()


class RecordingRemote(RemoteStore):
    """RemoteStore that records every call and can be told to fail some of them."""

    def __init__(self, http):
        super().__init__(http)
        self.calls = []
        self.fail_when = None

    def _call(self, method, url, **kwargs):
        self.calls.append((method, url))
        if self.fail_when is not None and self.fail_when(method, url, kwargs):
            raise RemoteFailure("Network error: simulated")
        return super()._call(method, url, **kwargs)


@pytest.fixture
def remote(client):
    login(client)
    return RecordingRemote(client)


@pytest.fixture
def make_workout(remote):
    def _make(title="Push A", exercises=None, **extra):
        structured = {"title": title, "exercises": exercises or [], **extra}
        return remote.insert_workout(title=title, raw_input=f"{title} text", structured=structured)

    return _make


@pytest.fixture
def planner(remote):
    return Planner(remote, PlanningStore(today=lambda: TODAY))
