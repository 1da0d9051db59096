"""Attribute filters shared by the activities and events screens."""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, List, Optional

from socialspot.domain.catalog.models import ALL_CATEGORIES, Item, ItemKind
from socialspot.domain.discovery.age_bands import matches_age_band
from socialspot.domain.discovery.schedule import matches_date_window
from socialspot.domain.discovery.schemas import SearchQuery

Predicate = Callable[[Item], bool]


class AttributeFilterChain:
	"""Category, cost, age and (for events) date predicates.

	Each predicate is independent of the others, so the order they run in
	does not change the result.
	"""

	def __init__(self, kind: ItemKind, *, clock: Callable[[], date] = date.today) -> None:
		self.kind = kind
		self._clock = clock

	def _category(self, category: str) -> Predicate:
		if self.kind is ItemKind.EVENT:
			# Event filter labels are stored as the subcategory.
			return lambda item: category in (item.display_category, item.subcategory)
		return lambda item: item.display_category == category

	def predicates(self, query: SearchQuery, today: Optional[date] = None) -> List[Predicate]:
		checks: List[Predicate] = []
		if query.category != ALL_CATEGORIES:
			checks.append(self._category(query.category))
		if query.free_only:
			checks.append(lambda item: item.filters.is_free is True)
		if query.age_band != "all":
			band = query.age_band
			checks.append(lambda item: matches_age_band(item.filters.age_range, band))
		if self.kind is ItemKind.EVENT:
			day = today or self._clock()
			window, show_past = query.date_window, query.show_past
			checks.append(lambda item: matches_date_window(item.schedule, window, day, show_past=show_past))
		return checks

	def apply(self, items: Iterable[Item], query: SearchQuery, today: Optional[date] = None) -> List[Item]:
		checks = self.predicates(query, today)
		return [item for item in items if all(check(item) for check in checks)]


__all__ = ["AttributeFilterChain"]
