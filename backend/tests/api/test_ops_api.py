import pytest

from socialspot.settings import settings


@pytest.mark.asyncio
async def test_health_endpoints(api_client):
	resp = await api_client.get("/health/live")
	assert resp.status_code == 200
	assert resp.json()["status"] == "ok"

	resp = await api_client.get("/health/ready")
	assert resp.status_code == 200
	assert resp.json()["checks"]["redis"]["ok"] is True
	assert "postgres" not in resp.json()["checks"]


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_search_counters(api_client, memory_store):
	await api_client.get("/activities")

	resp = await api_client.get("/metrics")

	assert resp.status_code == 200
	assert "socialspot_searches_total" in resp.text


@pytest.mark.asyncio
async def test_metrics_require_token_when_private(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_metrics_public", False)
	monkeypatch.setattr(settings, "obs_admin_token", "s3cret")

	resp = await api_client.get("/metrics")
	assert resp.status_code == 403

	resp = await api_client.get("/metrics", headers={"X-Admin-Token": "s3cret"})
	assert resp.status_code == 200
