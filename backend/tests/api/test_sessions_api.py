"""
Tests for /api/v1/sessions.
"""

from datetime import datetime, timedelta

import pytest

from app.features.sessions import SessionRepository
from app.shared.dates import utcnow


BASE = "/api/v1/sessions"


def _payload(**overrides):
    payload = {
        "date": "2024-01-05T07:30:00Z",
        "distance": 10.0,
        "duration": 3000,
        "notes": "Tempo",
    }
    payload.update(overrides)
    return payload


class TestCreateSession:

    async def test_create_manual(self, api_client):
        response = await api_client.post(BASE, json=_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["id"] > 0
        assert body["distance"] == 10.0
        assert body["duration"] == 3000
        assert body["notes"] == "Tempo"
        assert body["source"] == "manual"
        assert body["external_activity_id"] is None

    @pytest.mark.parametrize("overrides", [
        {"distance": 0},
        {"distance": -1.5},
        {"duration": 0},
        {"date": "not-a-date"},
    ])
    async def test_invalid_body(self, api_client, overrides):
        response = await api_client.post(BASE, json=_payload(**overrides))
        assert response.status_code == 400

    async def test_malformed_json(self, api_client):
        response = await api_client.post(
            BASE, content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400


class TestListSessions:

    async def test_range_is_inclusive_of_end_day(self, api_client):
        for day, distance in [("2024-01-01", 5.0), ("2024-01-10", 6.0), ("2024-01-11", 7.0)]:
            await api_client.post(BASE, json=_payload(date=f"{day}T20:00:00", distance=distance))

        response = await api_client.get(
            BASE, params={"start_date": "2024-01-01", "end_date": "2024-01-10"}
        )

        assert response.status_code == 200
        assert [s["distance"] for s in response.json()] == [6.0, 5.0]

    async def test_default_range_is_last_month(self, api_client):
        now = utcnow()
        await api_client.post(BASE, json=_payload(date=now.isoformat(), distance=3.0))
        await api_client.post(
            BASE, json=_payload(date=(now - timedelta(days=45)).isoformat(), distance=4.0)
        )

        response = await api_client.get(BASE)

        assert response.status_code == 200
        assert [s["distance"] for s in response.json()] == [3.0]

    @pytest.mark.parametrize("params", [
        {"start_date": "01/02/2024"},
        {"end_date": "2024-13-01"},
    ])
    async def test_malformed_dates(self, api_client, params):
        response = await api_client.get(BASE, params=params)
        assert response.status_code == 400


class TestSingleSession:

    async def test_get(self, api_client):
        created = (await api_client.post(BASE, json=_payload())).json()

        response = await api_client.get(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["notes"] == "Tempo"

    async def test_get_missing(self, api_client):
        response = await api_client.get(f"{BASE}/999")
        assert response.status_code == 404

    async def test_update(self, api_client):
        created = (await api_client.post(BASE, json=_payload())).json()

        response = await api_client.put(
            f"{BASE}/{created['id']}", json=_payload(distance=12.5, notes="Long tempo")
        )

        assert response.status_code == 200
        assert response.json()["distance"] == 12.5
        assert response.json()["notes"] == "Long tempo"

    async def test_update_validation(self, api_client):
        created = (await api_client.post(BASE, json=_payload())).json()

        response = await api_client.put(f"{BASE}/{created['id']}", json=_payload(duration=-5))
        assert response.status_code == 400

    async def test_delete(self, api_client):
        created = (await api_client.post(BASE, json=_payload())).json()

        response = await api_client.delete(f"{BASE}/{created['id']}")

        assert response.status_code == 204
        assert (await api_client.get(f"{BASE}/{created['id']}")).status_code == 404

    async def test_delete_missing(self, api_client):
        response = await api_client.delete(f"{BASE}/999")
        assert response.status_code == 404


class TestExternalSessions:
    """Sessions imported from Strava belong to sync."""

    @pytest.fixture
    async def external_id(self, db):
        session = await SessionRepository(db).create_external(
            activity_id=123,
            date=datetime(2024, 1, 1, 8),
            distance=5.0,
            duration=1500,
            notes="Morning Run",
        )
        await db.commit()
        return session.id

    async def test_visible_in_list(self, api_client, external_id):
        response = await api_client.get(
            BASE, params={"start_date": "2024-01-01", "end_date": "2024-01-01"}
        )

        body = response.json()
        assert [s["id"] for s in body] == [external_id]
        assert body[0]["source"] == "external"
        assert body[0]["external_activity_id"] == 123

    async def test_manual_update_rejected(self, api_client, external_id):
        response = await api_client.put(f"{BASE}/{external_id}", json=_payload())
        assert response.status_code == 409

    async def test_manual_delete_rejected(self, api_client, external_id):
        response = await api_client.delete(f"{BASE}/{external_id}")
        assert response.status_code == 409
