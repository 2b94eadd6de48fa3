import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from tasktrack.app import create_app
from tasktrack.auth.session import MemorySessionStore
from tasktrack.config import Settings

SECRET = "test-secret"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        secret_key=SECRET,
        database_url=f"sqlite:///{tmp_path / 'tasktrack.db'}",
        hash_time_cost=1,
        hash_memory_cost=8 * 1024,
    )


@pytest.fixture()
def sessions() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture()
def app(settings, sessions):
    return create_app(settings, session_store=sessions)


@pytest.fixture()
def client(app):
    # Entering the context runs startup, which creates the tables.
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(app, client):
    s = app.state.session_factory()
    try:
        yield s
    finally:
        s.close()


USER = {"username": "a", "email": "a@x.com", "password": "p"}


@pytest.fixture()
def registered(client):
    r = client.post("/api/register", json=USER)
    assert r.status_code == 201
    return r.json()["user"]


@pytest.fixture()
def logged_in(client, registered):
    r = client.post("/api/login", json={"email": USER["email"], "password": USER["password"]})
    assert r.status_code == 200
    return registered


@pytest.fixture()
def count_rows(db):
    """Return a callable giving the current row count of a model's table."""

    def _count(model) -> int:
        return int(db.scalar(select(func.count()).select_from(model)) or 0)

    return _count
