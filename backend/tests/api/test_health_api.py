"""
Tests for the health endpoint.
"""


async def test_health(api_client):
    response = await api_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "version" in response.json()
