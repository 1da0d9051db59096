import pytest


@pytest.mark.asyncio
async def test_preferences_put_get_delete(api_client):
	blob = {"selectedCategory": "Indoor Fun", "showFreeOnly": False}

	resp = await api_client.put("/preferences/home", json=blob)
	assert resp.status_code == 200

	resp = await api_client.get("/preferences/home")
	assert resp.status_code == 200
	assert resp.json() == blob

	resp = await api_client.delete("/preferences/home")
	assert resp.status_code == 204

	resp = await api_client.get("/preferences/home")
	assert resp.status_code == 404


@pytest.mark.asyncio
async def test_preferences_reject_bad_screen(api_client):
	resp = await api_client.put("/preferences/NOT_VALID", json={})
	assert resp.status_code == 400
	assert resp.json()["detail"] == "invalid_screen"
