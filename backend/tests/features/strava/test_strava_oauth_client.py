"""
Tests for the Strava OAuth handler and API client.

All HTTP traffic goes through httpx.MockTransport.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.features.strava import (
    StravaAPIError,
    StravaClient,
    StravaConfigError,
    StravaDecodeError,
    StravaOAuth,
    StravaTransportError,
)


def _oauth(handler, client_id="client-id", client_secret="client-secret"):
    return StravaOAuth(
        client_id=client_id,
        client_secret=client_secret,
        transport=httpx.MockTransport(handler),
    )


def _client(handler):
    return StravaClient(transport=httpx.MockTransport(handler))


# =============================================================================
# Authorization URL
# =============================================================================

class TestAuthorizationUrl:

    def test_requests_read_only_scope(self):
        oauth = StravaOAuth(client_id="123", client_secret="s")
        url = oauth.get_authorization_url(redirect_uri="https://app.example/cb")

        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        assert parsed.netloc == "www.strava.com"
        assert params["client_id"] == ["123"]
        assert params["scope"] == ["activity:read"]
        assert params["redirect_uri"] == ["https://app.example/cb"]
        assert params["response_type"] == ["code"]

    def test_missing_client_id(self):
        oauth = StravaOAuth(client_id="", client_secret="s")
        with pytest.raises(StravaConfigError):
            oauth.get_authorization_url(redirect_uri="https://app.example/cb")


# =============================================================================
# Token exchange / refresh
# =============================================================================

class TestTokenRequests:

    async def test_exchange_code(self, fake_strava, strava_oauth):
        bundle = await strava_oauth.exchange_code("auth-code")

        assert bundle.access_token == "new-access-1"
        assert bundle.refresh_token == "new-refresh-1"
        assert bundle.athlete_id == 42

        request = fake_strava.token_requests()[0]
        form = parse_qs(request.content.decode())
        assert form["grant_type"] == ["authorization_code"]
        assert form["code"] == ["auth-code"]
        assert form["client_id"] == ["client-id"]
        assert form["client_secret"] == ["client-secret"]

    async def test_refresh_token(self, fake_strava, strava_oauth):
        bundle = await strava_oauth.refresh_token("old-refresh")

        assert bundle.access_token == "new-access-1"
        form = parse_qs(fake_strava.token_requests()[0].content.decode())
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["old-refresh"]

    async def test_missing_credentials_make_no_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        oauth = _oauth(handler, client_secret="")
        with pytest.raises(StravaConfigError):
            await oauth.refresh_token("r")
        assert calls == []

    async def test_non_200_carries_status_and_body(self):
        oauth = _oauth(lambda request: httpx.Response(401, text='{"message":"Authorization Error"}'))

        with pytest.raises(StravaAPIError) as exc_info:
            await oauth.exchange_code("bad-code")

        assert exc_info.value.status_code == 401
        assert "Authorization Error" in exc_info.value.body

    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(StravaTransportError):
            await _oauth(handler).refresh_token("r")

    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"access_token": "a"}),
        httpx.Response(200, json=["unexpected"]),
    ])
    async def test_malformed_token_response(self, response):
        with pytest.raises(StravaDecodeError):
            await _oauth(lambda request: response).refresh_token("r")


# =============================================================================
# Activities
# =============================================================================

class TestGetActivity:

    async def test_parses_activity(self, fake_strava, strava_client):
        fake_strava.add_activity(123)

        activity = await strava_client.get_activity("token-abc", 123)

        assert activity.id == 123
        assert activity.is_run
        assert activity.distance_km == 5.0
        assert activity.moving_time == 1500
        assert activity.name == "Morning Run"

        request = fake_strava.activity_requests()[0]
        assert request.headers["Authorization"] == "Bearer token-abc"
        assert request.url.params["include_all_efforts"] == "false"

    async def test_not_found(self, strava_client):
        with pytest.raises(StravaAPIError) as exc_info:
            await strava_client.get_activity("token", 999)
        assert exc_info.value.status_code == 404

    async def test_invalid_json(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(StravaDecodeError):
            await client.get_activity("token", 1)

    async def test_missing_fields(self):
        client = _client(lambda request: httpx.Response(200, json={"id": 1}))
        with pytest.raises(StravaDecodeError):
            await client.get_activity("token", 1)

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StravaTransportError):
            await _client(handler).get_activity("token", 1)
