import logging

import pytest

from socialspot.domain.catalog.models import ItemKind
from socialspot.domain.catalog.normalize import MalformedItem, normalize_document, normalize_many
from socialspot.domain.catalog.store import StoredDocument
from socialspot.domain.geo import geohash
from socialspot.domain.geo.models import Coordinate


def test_nested_location_and_filters():
	doc = StoredDocument(
		id="a1",
		data={
			"name": "  Port Discovery  ",
			"parentCategory": "Indoor",
			"subcategory": "Museums",
			"location": {
				"coordinates": {"latitude": 39.2904, "longitude": -76.6122},
				"geohash": "dqcjqc",
				"address": "35 Market Pl",
				"city": "Baltimore",
				"zipCode": "21202",
			},
			"filters": {"ageRange": "Kids (4-12)", "isFree": False, "cost": "$$"},
		},
	)

	item = normalize_document(doc, ItemKind.ACTIVITY)

	assert item.id == "a1"
	assert item.name == "Port Discovery"
	assert item.display_category == "Indoor Fun"
	assert item.coordinates == Coordinate(39.2904, -76.6122)
	assert item.location.geohash == "dqcjqc"
	assert item.location.zip_code == "21202"
	assert item.filters.age_range == "Kids (4-12)"
	assert item.filters.is_free is False
	assert item.schedule is None
	assert item.distance is None


def test_flat_coordinates_and_top_level_fields():
	doc = StoredDocument(
		id="e1",
		data={
			"title": "Harbor Fest",
			"lat": "38.9784",
			"lng": -76.4922,
			"ageRange": "All ages",
			"isFree": True,
			"eventDate": "7/4/2025",
			"schedule": "Weekly",
			"location": "City Dock",
		},
	)

	item = normalize_document(doc, ItemKind.EVENT)

	assert item.name == "Harbor Fest"
	assert item.coordinates == Coordinate(38.9784, -76.4922)
	assert item.location.venue == "City Dock"
	assert item.location.geohash == geohash.encode(Coordinate(38.9784, -76.4922), 6)
	assert item.filters.is_free is True
	assert item.schedule.event_date == "7/4/2025"
	assert item.schedule.schedule == "Weekly"


def test_is_free_requires_literal_true():
	doc = StoredDocument(id="x", data={"name": "Maybe", "filters": {"isFree": "true"}})
	assert normalize_document(doc, ItemKind.ACTIVITY).filters.is_free is False


def test_unmapped_category_passes_through():
	doc = StoredDocument(id="x", data={"name": "Zoo", "parentCategory": "Animals"})
	assert normalize_document(doc, ItemKind.ACTIVITY).display_category == "Animals"


def test_missing_name_and_coordinates_do_not_fail():
	item = normalize_document(StoredDocument(id="bare", data={}), ItemKind.ACTIVITY)
	assert item.name == ""
	assert item.coordinates is None
	assert item.location.geohash is None


def test_out_of_range_coordinates_are_dropped():
	doc = StoredDocument(id="bad", data={"location": {"coordinates": {"latitude": 123, "longitude": 0}}})
	assert normalize_document(doc, ItemKind.ACTIVITY).coordinates is None


def test_geopoint_like_objects_are_accepted():
	class GeoPoint:
		latitude = 39.0840
		longitude = -77.1528

	doc = StoredDocument(id="g", data={"location": {"coordinates": GeoPoint()}})
	assert normalize_document(doc, ItemKind.ACTIVITY).coordinates == Coordinate(39.0840, -77.1528)


def test_non_object_payload_is_malformed(caplog):
	with pytest.raises(MalformedItem):
		normalize_document(StoredDocument(id="m", data=["not", "a", "dict"]), ItemKind.ACTIVITY)

	with caplog.at_level(logging.DEBUG):
		items = normalize_many(
			[StoredDocument(id="m", data="junk"), StoredDocument(id="ok", data={"name": "Fine"})],
			ItemKind.ACTIVITY,
		)
	assert [item.id for item in items] == ["ok"]


def test_normalize_many_accepts_any_iterable():
	documents = (StoredDocument(id=str(idx), data={"name": f"Item {idx}"}) for idx in range(3))

	items = normalize_many(documents, ItemKind.EVENT)

	assert isinstance(items, list)
	assert [item.id for item in items] == ["0", "1", "2"]
	assert all(item.kind is ItemKind.EVENT for item in items)
