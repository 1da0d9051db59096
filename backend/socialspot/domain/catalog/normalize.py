"""Map stored documents of varying shape onto the canonical ``Item``."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from socialspot.domain.catalog.models import (
	EventSchedule,
	Item,
	ItemFilters,
	ItemKind,
	ItemLocation,
	display_category_for,
)
from socialspot.domain.catalog.store import StoredDocument, value_at
from socialspot.domain.geo import geohash
from socialspot.domain.geo.models import Coordinate

logger = logging.getLogger(__name__)


class MalformedItem(ValueError):
	"""Raised when a stored document cannot be read as an item at all."""


def _text(value: Any) -> Optional[str]:
	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, (int, float)):
		return str(value)
	if not isinstance(value, str):
		return None
	value = value.strip()
	return value or None


def _first_text(data: Mapping[str, Any], *paths: str) -> Optional[str]:
	for path in paths:
		value = _text(value_at(data, path))
		if value is not None:
			return value
	return None


def _number(value: Any) -> Optional[float]:
	if value is None or isinstance(value, bool):
		return None
	try:
		return float(value)
	except (TypeError, ValueError):
		return None


def _coerce_coordinate(raw: Any) -> Optional[Coordinate]:
	if isinstance(raw, Mapping):
		lat = next((raw[key] for key in ("latitude", "lat") if raw.get(key) is not None), None)
		lon = next((raw[key] for key in ("longitude", "lng", "lon") if raw.get(key) is not None), None)
	elif hasattr(raw, "latitude") and hasattr(raw, "longitude"):
		# GeoPoint-like objects from document SDKs
		lat, lon = raw.latitude, raw.longitude
	else:
		return None
	lat_value, lon_value = _number(lat), _number(lon)
	if lat_value is None or lon_value is None:
		return None
	try:
		return Coordinate(latitude=lat_value, longitude=lon_value)
	except ValueError:
		return None


def extract_coordinates(data: Mapping[str, Any]) -> Optional[Coordinate]:
	location = data.get("location")
	candidates = []
	if isinstance(location, Mapping):
		candidates.extend([location.get("coordinates"), location])
	candidates.extend([data.get("coordinates"), data])
	for candidate in candidates:
		coord = _coerce_coordinate(candidate)
		if coord is not None:
			return coord
	return None


def _location(data: Mapping[str, Any], precision: int) -> ItemLocation:
	coordinates = extract_coordinates(data)
	stored_hash = _first_text(data, "location.geohash", "geohash")
	if stored_hash is None and coordinates is not None:
		stored_hash = geohash.encode(coordinates, precision)
	raw_location = data.get("location")
	venue = _text(raw_location) if isinstance(raw_location, str) else _first_text(data, "location.venue", "venue")
	return ItemLocation(
		coordinates=coordinates,
		geohash=stored_hash,
		venue=venue,
		address=_first_text(data, "location.address", "address"),
		city=_first_text(data, "location.city", "city"),
		zip_code=_first_text(data, "location.zipCode", "location.zip", "zipCode", "zip"),
	)


def _filters(data: Mapping[str, Any]) -> ItemFilters:
	is_free = value_at(data, "filters.isFree")
	if is_free is None:
		is_free = data.get("isFree")
	return ItemFilters(
		age_range=_first_text(data, "filters.ageRange", "ageRange"),
		is_free=is_free is True,
		cost=_first_text(data, "filters.cost", "cost"),
	)


def _schedule(data: Mapping[str, Any]) -> EventSchedule:
	return EventSchedule(
		event_date=_first_text(data, "eventDate", "eventStartDate", "date"),
		schedule_description=_first_text(data, "scheduleDescription"),
		schedule=_first_text(data, "schedule"),
		time=_first_text(data, "time", "eventTime"),
		recurring=data.get("recurring") is True,
	)


def normalize_document(
	document: StoredDocument,
	kind: ItemKind,
	*,
	precision: int = geohash.DEFAULT_PRECISION,
) -> Item:
	"""Build an ``Item`` from a stored document.

	Missing coordinates or names are tolerated; only a payload that is not a
	mapping raises ``MalformedItem``.
	"""

	data = document.data
	if not isinstance(data, Mapping):
		raise MalformedItem(f"document {document.id!r} is not an object")
	parent_category = _first_text(data, "parentCategory", "category")
	return Item(
		id=str(document.id),
		kind=kind,
		name=_first_text(data, "name", "title") or "",
		location=_location(data, precision),
		parent_category=parent_category,
		subcategory=_first_text(data, "subcategory"),
		display_category=display_category_for(parent_category),
		filters=_filters(data),
		schedule=_schedule(data) if kind is ItemKind.EVENT else None,
		description=_first_text(data, "description"),
		website=_first_text(data, "website", "url"),
	)


def normalize_many(
	documents: Iterable[StoredDocument],
	kind: ItemKind,
	*,
	precision: int = geohash.DEFAULT_PRECISION,
) -> List[Item]:
	items: List[Item] = []
	for document in documents:
		try:
			items.append(normalize_document(document, kind, precision=precision))
		except MalformedItem as exc:
			logger.debug("catalog_document_skipped", extra={"doc_id": document.id, "error": str(exc)})
	return items


__all__ = ["MalformedItem", "extract_coordinates", "normalize_document", "normalize_many"]
