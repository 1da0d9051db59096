import pytest


@pytest.mark.asyncio
async def test_zip_lookup_known_and_fallback(api_client):
	resp = await api_client.get("/locations/zip/21222")
	assert resp.status_code == 200
	assert resp.json() == {"zip_code": "21222", "lat": 39.2575, "lon": -76.5226, "fallback": False}

	resp = await api_client.get("/locations/zip/10001")
	assert resp.status_code == 200
	body = resp.json()
	assert body["fallback"] is True
	assert (body["lat"], body["lon"]) == (38.8, -76.5)


@pytest.mark.asyncio
async def test_zip_lookup_rejects_malformed_codes(api_client):
	resp = await api_client.get("/locations/zip/abc")
	assert resp.status_code == 422
	assert resp.json()["detail"] == "invalid_zip"
