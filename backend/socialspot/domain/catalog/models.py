"""Canonical item shapes produced by ingestion-time normalization."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from socialspot.domain.geo.models import Coordinate


class ItemKind(str, Enum):
	ACTIVITY = "activity"
	EVENT = "event"


# Stored parent categories mapped to the labels the filter bars show.
CATEGORY_MAPPING = {
	"Food & Dining": "Food & Dining",
	"Outdoor": "Outdoor Fun",
	"Indoor": "Indoor Fun",
	"Educational & Enrichment": "Arts, Culture & Learning",
	"Events & Programs": "Events & Programs",
}

ALL_CATEGORIES = "All"

ACTIVITY_CATEGORIES = (
	ALL_CATEGORIES,
	"Food & Dining",
	"Outdoor Fun",
	"Indoor Fun",
	"Arts, Culture & Learning",
)

EVENT_CATEGORIES = (
	ALL_CATEGORIES,
	"Festivals & Celebrations",
	"Storytimes & Library",
	"Classes & Workshops",
	"Arts & Culture",
	"Community Events",
	"Indoor Activities",
	"Outdoor & Nature",
	"Animals & Wildlife",
)


def display_category_for(parent_category: Optional[str]) -> Optional[str]:
	if parent_category is None:
		return None
	return CATEGORY_MAPPING.get(parent_category, parent_category)


@dataclass(slots=True, frozen=True)
class ItemLocation:
	coordinates: Optional[Coordinate] = None
	geohash: Optional[str] = None
	venue: Optional[str] = None
	address: Optional[str] = None
	city: Optional[str] = None
	zip_code: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ItemFilters:
	age_range: Optional[str] = None
	is_free: bool = False
	cost: Optional[str] = None


@dataclass(slots=True, frozen=True)
class EventSchedule:
	"""Free-text schedule fields carried by events."""

	event_date: Optional[str] = None
	schedule_description: Optional[str] = None
	schedule: Optional[str] = None
	time: Optional[str] = None
	recurring: bool = False


@dataclass(slots=True, frozen=True)
class Item:
	"""An activity or event. Immutable; per-search fields are set on copies."""

	id: str
	kind: ItemKind
	name: str = ""
	location: ItemLocation = field(default_factory=ItemLocation)
	parent_category: Optional[str] = None
	subcategory: Optional[str] = None
	display_category: Optional[str] = None
	filters: ItemFilters = field(default_factory=ItemFilters)
	schedule: Optional[EventSchedule] = None
	description: Optional[str] = None
	website: Optional[str] = None
	distance: Optional[float] = None

	@property
	def coordinates(self) -> Optional[Coordinate]:
		return self.location.coordinates

	def with_distance(self, distance: float) -> "Item":
		return replace(self, distance=distance)
