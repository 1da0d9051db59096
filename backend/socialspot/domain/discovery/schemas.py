"""Pydantic schemas for search queries and serialized result sets."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from socialspot.domain.catalog.models import ALL_CATEGORIES, Item, ItemKind
from socialspot.domain.geo.distance import round_miles
from socialspot.domain.geo.models import Coordinate
from socialspot.settings import settings

AgeBand = Literal["all", "toddler", "kids", "teens", "adults"]
DateWindow = Literal["all", "today", "week", "month"]

RADIUS_OPTIONS_MILES = (5, 10, 25, 50)


class SearchQuery(BaseModel):
	"""Everything a screen searches by. Replaced wholesale on every change."""

	model_config = ConfigDict(frozen=True)

	center: Optional[Coordinate] = None
	radius_miles: float = Field(default_factory=lambda: settings.default_radius_miles, gt=0)
	category: str = ALL_CATEGORIES
	free_only: bool = False
	age_band: AgeBand = "all"
	# Events only
	date_window: DateWindow = "all"
	show_past: bool = False

	@property
	def has_location_filter(self) -> bool:
		return self.center is not None

	def with_changes(self, **changes) -> "SearchQuery":
		return self.model_copy(update=changes)


class LocationOut(BaseModel):
	lat: Optional[float] = None
	lon: Optional[float] = None
	geohash: Optional[str] = None
	venue: Optional[str] = None
	address: Optional[str] = None
	city: Optional[str] = None
	zip_code: Optional[str] = None


class FiltersOut(BaseModel):
	age_range: Optional[str] = None
	is_free: bool = False
	cost: Optional[str] = None


class ScheduleOut(BaseModel):
	event_date: Optional[str] = None
	schedule_description: Optional[str] = None
	schedule: Optional[str] = None
	time: Optional[str] = None
	recurring: bool = False


class ItemOut(BaseModel):
	"""Wire shape of a single activity or event."""

	id: str
	kind: ItemKind
	name: str
	display_category: Optional[str] = None
	parent_category: Optional[str] = None
	subcategory: Optional[str] = None
	# Rounded for display; filtering always uses the exact distance.
	distance_miles: Optional[float] = None
	location: LocationOut = Field(default_factory=LocationOut)
	filters: FiltersOut = Field(default_factory=FiltersOut)
	schedule: Optional[ScheduleOut] = None
	description: Optional[str] = None
	website: Optional[str] = None

	@classmethod
	def from_item(cls, item: Item) -> "ItemOut":
		coords = item.location.coordinates
		schedule = None
		if item.schedule is not None:
			schedule = ScheduleOut(
				event_date=item.schedule.event_date,
				schedule_description=item.schedule.schedule_description,
				schedule=item.schedule.schedule,
				time=item.schedule.time,
				recurring=item.schedule.recurring,
			)
		return cls(
			id=item.id,
			kind=item.kind,
			name=item.name,
			display_category=item.display_category,
			parent_category=item.parent_category,
			subcategory=item.subcategory,
			distance_miles=round_miles(item.distance) if item.distance is not None else None,
			location=LocationOut(
				lat=coords.latitude if coords else None,
				lon=coords.longitude if coords else None,
				geohash=item.location.geohash,
				venue=item.location.venue,
				address=item.location.address,
				city=item.location.city,
				zip_code=item.location.zip_code,
			),
			filters=FiltersOut(
				age_range=item.filters.age_range,
				is_free=item.filters.is_free,
				cost=item.filters.cost,
			),
			schedule=schedule,
			description=item.description,
			website=item.website,
		)


class FilterOption(BaseModel):
	value: str
	label: str


class FilterOptions(BaseModel):
	"""Choices a screen offers in its filter bar."""

	kind: ItemKind
	categories: list[str]
	age_bands: list[FilterOption]
	radius_options_miles: list[int]
	default_radius_miles: float
	date_windows: list[str] = Field(default_factory=list)


class SearchResponse(BaseModel):
	kind: ItemKind
	items: list[ItemOut] = Field(default_factory=list)
	total: int = 0
	has_location_filter: bool = False
	radius_miles: Optional[float] = None


__all__ = [
	"AgeBand",
	"DateWindow",
	"FilterOption",
	"FilterOptions",
	"ItemOut",
	"RADIUS_OPTIONS_MILES",
	"SearchQuery",
	"SearchResponse",
]
