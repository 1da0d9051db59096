"""Composition of the proximity search steps for one screen."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional, Sequence

from socialspot.domain.catalog.fetcher import CandidateFetcher, CatalogLoader
from socialspot.domain.catalog.models import Item, ItemKind
from socialspot.domain.catalog.store import DocumentStore
from socialspot.domain.discovery.filters import AttributeFilterChain
from socialspot.domain.discovery.proximity import ProximityFilter
from socialspot.domain.discovery.ranking import rank
from socialspot.domain.discovery.schemas import SearchQuery
from socialspot.domain.geo import geohash
from socialspot.domain.geo.distance import miles_to_meters
from socialspot.domain.geo.models import GeohashBound
from socialspot.obs import metrics as obs_metrics
from socialspot.settings import settings

logger = logging.getLogger(__name__)


def collection_for(kind: ItemKind) -> str:
	if kind is ItemKind.EVENT:
		return settings.events_collection
	return settings.activities_collection


class SearchPipeline:
	"""store -> candidates -> radius cutoff -> attribute filters -> ranking."""

	def __init__(
		self,
		store: DocumentStore,
		kind: ItemKind,
		*,
		collection: Optional[str] = None,
		clock: Callable[[], date] = date.today,
		max_per_bound: Optional[int] = None,
		page_size: Optional[int] = None,
	) -> None:
		self.kind = kind
		self.collection = collection or collection_for(kind)
		self.max_per_bound = max_per_bound or settings.max_per_bound
		self.fetcher = CandidateFetcher(store, kind)
		self.loader = CatalogLoader(store, kind, page_size=page_size)
		self.proximity = ProximityFilter()
		self.filters = AttributeFilterChain(kind, clock=clock)

	def bounds_for(self, query: SearchQuery) -> List[GeohashBound]:
		if query.center is None:
			raise ValueError("query has no center")
		bounds = geohash.query_bounds(
			query.center,
			miles_to_meters(query.radius_miles),
			max_bits=settings.geohash_query_bits(),
		)
		obs_metrics.observe_bounds(len(bounds))
		return bounds

	async def fetch_candidates(self, query: SearchQuery) -> List[Item]:
		bounds = self.bounds_for(query)
		return await self.fetcher.fetch(bounds, self.collection, self.max_per_bound)

	async def load_catalog(self) -> List[Item]:
		return await self.loader.load_all(self.collection)

	def refine(self, items: Sequence[Item], query: SearchQuery, today: Optional[date] = None) -> List[Item]:
		"""Apply the synchronous steps to already-fetched items.

		With a center, ``items`` are geo candidates and get the exact radius
		cutoff; without one they are the full catalog.
		"""

		if query.center is not None:
			nearby = self.proximity.apply(items, query.center, query.radius_miles)
			obs_metrics.inc_discarded(self.kind.value, len(items) - len(nearby))
			items = nearby
		filtered = self.filters.apply(items, query, today)
		ranked = rank(filtered, query.has_location_filter)
		obs_metrics.observe_results(self.kind.value, len(ranked))
		return ranked


__all__ = ["SearchPipeline", "collection_for"]
