"""
Tests for /api/v1/strava connection endpoints.
"""

import pytest

from app.api.v1.routes.strava import get_strava_oauth, get_token_vault
from app.config import settings
from app.features.strava import StravaConnectionRepository, StravaOAuth, TokenVault


BASE = "/api/v1/strava"


@pytest.fixture
def strava_overrides(strava_oauth, vault):
    from app.main import app

    app.dependency_overrides[get_strava_oauth] = lambda: strava_oauth
    app.dependency_overrides[get_token_vault] = lambda: vault


class TestAuthorizeUrl:

    async def test_returns_url(self, api_client, monkeypatch):
        from app.main import app

        monkeypatch.setattr(settings, "strava_redirect_uri", "https://app.example/strava")
        app.dependency_overrides[get_strava_oauth] = lambda: StravaOAuth(
            client_id="123", client_secret="s"
        )

        response = await api_client.get(f"{BASE}/authorize-url")

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("https://www.strava.com/oauth/authorize?")
        assert "scope=activity%3Aread" in url
        assert "client_id=123" in url

    async def test_missing_client_id(self, api_client, monkeypatch):
        from app.main import app

        monkeypatch.setattr(settings, "strava_redirect_uri", "https://app.example/strava")
        app.dependency_overrides[get_strava_oauth] = lambda: StravaOAuth(
            client_id="", client_secret=""
        )

        response = await api_client.get(f"{BASE}/authorize-url")

        assert response.status_code == 500
        assert response.json()["detail"] == "Server configuration error"


class TestConnect:

    async def test_connect(self, api_client, strava_overrides, db, vault):
        response = await api_client.post(f"{BASE}/connect", json={"code": "auth-code"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["strava_athlete_id"] == 42
        assert body["connected_at"] is not None

        stored = await StravaConnectionRepository(db).get_by_athlete_id(42)
        assert vault.open(stored.access_token) == "new-access-1"

    async def test_empty_code(self, api_client, strava_overrides, fake_strava):
        response = await api_client.post(f"{BASE}/connect", json={"code": ""})

        assert response.status_code == 400
        assert fake_strava.requests == []

    async def test_exchange_failure_is_generic(self, api_client, strava_overrides, fake_strava):
        fake_strava.token_status = 400

        response = await api_client.post(f"{BASE}/connect", json={"code": "bad"})

        assert response.status_code == 500
        assert "Bad Request" not in response.text

    async def test_missing_key(self, api_client, strava_oauth):
        from app.main import app

        app.dependency_overrides[get_strava_oauth] = lambda: strava_oauth
        app.dependency_overrides[get_token_vault] = lambda: TokenVault(None)

        response = await api_client.post(f"{BASE}/connect", json={"code": "auth-code"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Server configuration error"


class TestStatus:

    async def test_not_connected(self, api_client, strava_overrides):
        response = await api_client.get(f"{BASE}/status")

        assert response.status_code == 200
        assert response.json()["connected"] is False

    async def test_connected(self, api_client, strava_overrides, make_connection):
        await make_connection(athlete_id=42)

        response = await api_client.get(f"{BASE}/status")

        body = response.json()
        assert body["connected"] is True
        assert body["strava_athlete_id"] == 42
        assert body["last_sync"] is None
        assert "access_token" not in body

    async def test_by_athlete_id(self, api_client, strava_overrides, make_connection):
        await make_connection(athlete_id=42)
        await make_connection(athlete_id=43)

        response = await api_client.get(f"{BASE}/status", params={"athlete_id": 43})

        assert response.json()["strava_athlete_id"] == 43


class TestDisconnect:

    async def test_disconnect(self, api_client, strava_overrides, make_connection):
        await make_connection(athlete_id=42)

        response = await api_client.delete(f"{BASE}/disconnect")

        assert response.status_code == 200
        assert response.json()["strava_athlete_id"] == 42
        status = (await api_client.get(f"{BASE}/status")).json()
        assert status["connected"] is False

    async def test_nothing_connected(self, api_client, strava_overrides):
        response = await api_client.delete(f"{BASE}/disconnect")
        assert response.status_code == 404
