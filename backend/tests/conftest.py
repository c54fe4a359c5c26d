"""
Shared fixtures.

- In-memory SQLite database (one per test)
- Token vault with a fixed test key
- Fake Strava API built on httpx.MockTransport
- ASGI test client with the database dependency overridden
"""

import json
import time

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.session import get_async_db
from app.models import register_models
from app.models.base import Base
from app.features.strava import (
    StravaClient,
    StravaConnectionRepository,
    StravaOAuth,
    TokenVault,
)
from app.features.strava import tokens as tokens_module


TEST_KEY = "0123456789abcdef0123456789abcdef"
ATHLETE_ID = 42


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def reset_refresh_locks():
    """Locks are bound to the event loop that first awaited them."""
    tokens_module._refresh_locks.clear()
    yield
    tokens_module._refresh_locks.clear()


# =============================================================================
# Tokens
# =============================================================================

@pytest.fixture
def vault():
    return TokenVault(TEST_KEY)


@pytest.fixture
def make_connection(db, vault):
    """Store a connection with encrypted tokens."""

    async def _make(
        athlete_id: int = ATHLETE_ID,
        access_token: str = "access-1",
        refresh_token: str = "refresh-1",
        expires_at: int | None = None,
    ):
        if expires_at is None:
            expires_at = int(time.time()) + 3600
        connection = await StravaConnectionRepository(db).create_connection(
            athlete_id=athlete_id,
            access_token=vault.seal(access_token),
            refresh_token=vault.seal(refresh_token),
            expires_at=expires_at,
        )
        await db.commit()
        return connection

    return _make


# =============================================================================
# Fake Strava
# =============================================================================

class FakeStrava:
    """
    In-memory stand-in for the Strava HTTP API.

    Serves /oauth/token and /api/v3/activities/{id}; records every request.
    """

    def __init__(self):
        self.activities: dict[int, dict] = {}
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.token_counter = 0
        self.athlete_id = ATHLETE_ID
        self.token_expires_in = 6 * 3600

    def add_activity(self, activity_id: int, **fields) -> dict:
        activity = {
            "id": activity_id,
            "name": "Morning Run",
            "type": "Run",
            "distance": 5000.0,
            "moving_time": 1500,
            "start_date": "2024-01-01T08:00:00Z",
            "private": False,
        }
        activity.update(fields)
        self.activities[activity_id] = activity
        return activity

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/oauth/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"message": "Bad Request"})
            self.token_counter += 1
            return httpx.Response(200, json={
                "access_token": f"new-access-{self.token_counter}",
                "refresh_token": f"new-refresh-{self.token_counter}",
                "expires_at": int(time.time()) + self.token_expires_in,
                "athlete": {"id": self.athlete_id},
            })

        if path.startswith("/api/v3/activities/"):
            activity_id = int(path.rsplit("/", 1)[1])
            activity = self.activities.get(activity_id)
            if activity is None:
                return httpx.Response(404, json={"message": "Record Not Found"})
            return httpx.Response(200, content=json.dumps(activity))

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def token_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/oauth/token"]

    def activity_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/api/v3/")]


@pytest.fixture
def fake_strava():
    return FakeStrava()


@pytest.fixture
def strava_oauth(fake_strava):
    return StravaOAuth(
        client_id="client-id",
        client_secret="client-secret",
        transport=fake_strava.transport,
    )


@pytest.fixture
def strava_client(fake_strava):
    return StravaClient(transport=fake_strava.transport)


# =============================================================================
# API client
# =============================================================================

@pytest.fixture
async def api_client(session_factory):
    from app.main import app

    async def override_get_async_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_get_async_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
