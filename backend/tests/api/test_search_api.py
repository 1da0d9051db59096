import math

import pytest

from socialspot.api import catalog as catalog_api
from socialspot.domain.catalog.store import QueryFailure
from socialspot.domain.geo import geohash
from socialspot.domain.geo.distance import EARTH_RADIUS_MILES
from socialspot.domain.geo.models import Coordinate

BALTIMORE = Coordinate(39.2904, -76.6122)
MILES_PER_DEGREE_LAT = EARTH_RADIUS_MILES * math.pi / 180.0


def _stored(name: str, miles_north: float, category: str = "Outdoor", **extra) -> dict:
	coord = Coordinate(BALTIMORE.latitude + miles_north / MILES_PER_DEGREE_LAT, BALTIMORE.longitude)
	data = {
		"name": name,
		"parentCategory": category,
		"location": {
			"coordinates": {"latitude": coord.latitude, "longitude": coord.longitude},
			"geohash": geohash.encode(coord, 6),
		},
		"filters": {"isFree": False, "ageRange": "Kids (4-12)"},
	}
	data.update(extra)
	return data


@pytest.mark.asyncio
async def test_activities_by_coordinates(api_client, memory_store):
	await memory_store.seed(
		"activities",
		{"two": _stored("Two", 2), "eight": _stored("Eight", 8), "fifteen": _stored("Fifteen", 15)},
	)

	resp = await api_client.get(
		"/activities", params={"lat": BALTIMORE.latitude, "lon": BALTIMORE.longitude, "radius_miles": 10}
	)

	assert resp.status_code == 200
	body = resp.json()
	assert [item["id"] for item in body["items"]] == ["two", "eight"]
	assert body["items"][0]["distance_miles"] == 2.0
	assert body["has_location_filter"] is True
	assert body["total"] == 2


@pytest.mark.asyncio
async def test_activities_by_zip_and_category(api_client, memory_store):
	await memory_store.seed(
		"activities",
		{
			"park": _stored("Park", 1, category="Outdoor"),
			"museum": _stored("Museum", 1, category="Indoor"),
		},
	)

	resp = await api_client.get("/activities", params={"zip": "21201", "category": "Indoor Fun"})

	assert resp.status_code == 200
	assert [item["id"] for item in resp.json()["items"]] == ["museum"]


@pytest.mark.asyncio
async def test_activities_without_location_list_catalog(api_client, memory_store):
	await memory_store.seed("activities", {"z": _stored("Zoo", 400), "a": _stored("Arcade", 1)})

	resp = await api_client.get("/activities")

	body = resp.json()
	assert [item["name"] for item in body["items"]] == ["Arcade", "Zoo"]
	assert body["has_location_filter"] is False
	assert body["items"][0]["distance_miles"] is None


@pytest.mark.asyncio
async def test_events_accept_date_window(api_client, memory_store):
	await memory_store.seed(
		"events",
		{
			"weekly": _stored("Story Hour", 1, schedule="Weekly"),
			"undated": _stored("Mystery Event", 1),
		},
	)

	resp = await api_client.get("/events", params={"date_window": "week"})

	assert resp.status_code == 200
	assert [item["id"] for item in resp.json()["items"]] == ["weekly"]


@pytest.mark.asyncio
async def test_invalid_parameters_are_rejected(api_client):
	resp = await api_client.get("/activities", params={"lat": 39.0})
	assert resp.status_code == 422
	assert "request_id" in resp.json()

	resp = await api_client.get("/activities", params={"zip": "12"})
	assert resp.status_code == 422

	resp = await api_client.get("/activities", params={"radius_miles": 0})
	assert resp.status_code == 422

	resp = await api_client.get("/events", params={"date_window": "upcoming"})
	assert resp.status_code == 422


@pytest.mark.asyncio
async def test_store_failure_maps_to_503(api_client, monkeypatch):
	async def _fail(kind, query):
		raise QueryFailure("activities", "offline")

	monkeypatch.setattr(catalog_api._service, "search_response", _fail)

	resp = await api_client.get("/activities", params={"zip": "21201"})

	assert resp.status_code == 503
	assert resp.json()["detail"] == "store_unavailable"


@pytest.mark.asyncio
async def test_filter_options_per_kind(api_client):
	resp = await api_client.get("/filters/activity")
	assert resp.status_code == 200
	body = resp.json()
	assert body["categories"][0] == "All"
	assert "Outdoor Fun" in body["categories"]
	assert body["date_windows"] == []
	assert {"value": "kids", "label": "Kids (4-12)"} in body["age_bands"]
	assert body["radius_options_miles"] == [5, 10, 25, 50]

	resp = await api_client.get("/filters/event")
	body = resp.json()
	assert "Festivals & Celebrations" in body["categories"]
	assert body["date_windows"] == ["all", "today", "week", "month"]

	resp = await api_client.get("/filters/venue")
	assert resp.status_code == 422
