"""Shared test fixtures."""
import os

# anything falling back to get_settings() stays off disk and away from the LLM
os.environ["DATABASE_URL"] = "memory://"
os.environ.pop("GEMINI_API_KEY", None)

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from cronos.assistant import NullSuggestionProvider
from cronos.config import Settings
from cronos.main import create_app
from cronos.repositories import Repositories
from cronos.schemas import Appointment
from cronos.storage import MemoryPersistence
from cronos.store import AppointmentStore

FIXED_NOW = datetime(2026, 10, 18, 8, 0)


@pytest.fixture
def persistence():
    return MemoryPersistence()


@pytest.fixture
def repos(persistence):
    return Repositories(persistence)


@pytest.fixture
def store(repos):
    return AppointmentStore(repos, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_appt():
    """Build an appointment on 2026-10-19 from "HH:MM" strings."""
    def _create(appt_id: str, start: str, end: str, **kwargs) -> Appointment:
        day = kwargs.pop("day", "2026-10-19")
        return Appointment(
            id=appt_id,
            client_id=kwargs.pop("client_id", "1"),
            title=kwargs.pop("title", "Corte"),
            start=datetime.fromisoformat(f"{day}T{start}"),
            end=datetime.fromisoformat(f"{day}T{end}"),
            **kwargs,
        )
    return _create


@pytest.fixture
def test_settings():
    return Settings(DATABASE_URL="memory://", SEED_DEMO_DATA=False, GEMINI_API_KEY=None)


@pytest.fixture
def assistant():
    return NullSuggestionProvider()


@pytest.fixture
def app(test_settings, persistence, assistant):
    return create_app(settings=test_settings, persistence=persistence, assistant=assistant)


@pytest.fixture
def client(app):
    return TestClient(app)


def _login(client, email):
    resp = client.post("/auth/login", data={"username": email, "password": "secret"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin@salon.com")


@pytest.fixture
def client_headers(client):
    return _login(client, "maria@example.com")
