"""Request-scoped discovery used by the HTTP layer."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Optional

from socialspot.domain.catalog.models import Item, ItemKind
from socialspot.domain.catalog.store import DocumentStore, get_document_store
from socialspot.domain.discovery import schemas
from socialspot.domain.discovery.pipeline import SearchPipeline
from socialspot.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class DiscoveryService:
	"""Runs one complete search per call; holds no per-user state."""

	def __init__(
		self,
		store: Optional[DocumentStore] = None,
		*,
		clock: Callable[[], date] = date.today,
	) -> None:
		self._store = store
		self._clock = clock
		self._pipelines: Dict[ItemKind, SearchPipeline] = {}

	def _pipeline(self, kind: ItemKind) -> SearchPipeline:
		pipeline = self._pipelines.get(kind)
		if pipeline is None:
			store = self._store or get_document_store()
			pipeline = SearchPipeline(store, kind, clock=self._clock)
			if self._store is not None:
				self._pipelines[kind] = pipeline
		return pipeline

	async def search(self, kind: ItemKind, query: schemas.SearchQuery) -> List[Item]:
		pipeline = self._pipeline(kind)
		if query.center is None:
			obs_metrics.inc_search(kind.value, "catalog")
			items = await pipeline.load_catalog()
		else:
			obs_metrics.inc_search(kind.value, "geo")
			items = await pipeline.fetch_candidates(query)
		results = pipeline.refine(items, query)
		logger.info(
			"search_completed",
			extra={
				"kind": kind.value,
				"has_location_filter": query.has_location_filter,
				"candidates": len(items),
				"results": len(results),
			},
		)
		return results

	async def search_response(self, kind: ItemKind, query: schemas.SearchQuery) -> schemas.SearchResponse:
		results = await self.search(kind, query)
		return schemas.SearchResponse(
			kind=kind,
			items=[schemas.ItemOut.from_item(item) for item in results],
			total=len(results),
			has_location_filter=query.has_location_filter,
			radius_miles=query.radius_miles if query.has_location_filter else None,
		)


__all__ = ["DiscoveryService"]
