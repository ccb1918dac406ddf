from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from tranquil.config import Settings
from tranquil.main import create_app
from tranquil.services.auth_service import TokenService


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tranquil.db'}",
        secret_key="test-secret",
        create_tables=True,
        log_level="WARNING",
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def app(settings, clock):
    return create_app(settings, token_service=TokenService.from_settings(settings, clock=clock))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup(client):
    def _signup(email="mina@example.com", password="calm-breath", name="Mina"):
        return client.post(
            "/api/auth/signup",
            json={"name": name, "email": email, "password": password},
        )
    return _signup


@pytest.fixture
def auth_headers(signup):
    def _headers(email="mina@example.com"):
        r = signup(email=email)
        assert r.status_code == 201
        return {"Authorization": f"Bearer {r.json()['token']}"}
    return _headers
