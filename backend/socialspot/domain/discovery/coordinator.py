"""Per-screen search state machine.

A coordinator owns one screen's query and result set. Attribute changes
are recomputed in place from the items already held; a new centre or a
wider radius needs a geo-bounded fetch. Every fetch takes a sequence number
and only the latest one may publish results, so a slow superseded search
never overwrites a newer one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable, List, Optional, Tuple

from socialspot.domain.catalog.models import Item, ItemKind
from socialspot.domain.catalog.store import DocumentStore, QueryFailure
from socialspot.domain.discovery.pipeline import SearchPipeline
from socialspot.domain.discovery.schemas import SearchQuery
from socialspot.domain.geo.models import Coordinate
from socialspot.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

GeoKey = Tuple[Coordinate, float]


class SearchState(str, Enum):
	IDLE = "idle"
	LOADING = "loading"
	READY = "ready"
	ERROR = "error"


class _Operation(str, Enum):
	CATALOG = "catalog"
	GEO = "geo"


@dataclass(slots=True)
class SearchSnapshot:
	state: SearchState
	query: SearchQuery
	results: List[Item] = field(default_factory=list)
	error: Optional[str] = None
	catalog_size: int = 0


class SearchCoordinator:
	def __init__(
		self,
		kind: ItemKind,
		store: DocumentStore,
		*,
		pipeline: Optional[SearchPipeline] = None,
		clock: Callable[[], date] = date.today,
		query: Optional[SearchQuery] = None,
	) -> None:
		self.kind = kind
		self._pipeline = pipeline or SearchPipeline(store, kind, clock=clock)
		self._query = query or SearchQuery()
		self._state = SearchState.IDLE
		self._results: List[Item] = []
		self._error: Optional[QueryFailure] = None
		self._catalog: List[Item] = []
		self._catalog_loaded = False
		self._catalog_inflight = 0
		self._candidates: List[Item] = []
		self._candidates_key: Optional[GeoKey] = None
		self._seq = 0
		self._pending: Optional[_Operation] = None
		self._pending_key: Optional[GeoKey] = None
		self._failed: Optional[_Operation] = None

	@property
	def state(self) -> SearchState:
		return self._state

	@property
	def query(self) -> SearchQuery:
		return self._query

	@property
	def results(self) -> List[Item]:
		return list(self._results)

	@property
	def error(self) -> Optional[QueryFailure]:
		return self._error

	@property
	def catalog_size(self) -> int:
		return len(self._catalog)

	def snapshot(self) -> SearchSnapshot:
		return SearchSnapshot(
			state=self._state,
			query=self._query,
			results=list(self._results),
			error=str(self._error) if self._error else None,
			catalog_size=len(self._catalog),
		)

	# Sequencing

	def _begin(self, operation: _Operation) -> int:
		self._seq += 1
		self._pending = operation
		self._state = SearchState.LOADING
		return self._seq

	def _is_current(self, seq: int) -> bool:
		return seq == self._seq

	def _invalidate_pending(self) -> None:
		# Any in-flight fetch now carries an outdated sequence number.
		self._seq += 1
		self._pending = None
		self._pending_key = None

	def _publish(self, results: List[Item]) -> None:
		self._results = results
		self._error = None
		self._failed = None
		self._pending = None
		self._pending_key = None
		self._state = SearchState.READY

	def _fail(self, operation: _Operation, exc: QueryFailure) -> None:
		logger.warning(
			"search_failed",
			extra={"kind": self.kind.value, "operation": operation.value, "collection": exc.collection},
		)
		self._error = exc
		self._failed = operation
		self._pending = None
		self._pending_key = None
		self._state = SearchState.ERROR

	def _discard_stale(self, seq: int) -> None:
		obs_metrics.inc_stale_result(self.kind.value)
		logger.debug("search_result_stale", extra={"kind": self.kind.value, "seq": seq, "latest": self._seq})

	# Operations

	def _awaiting_catalog(self) -> bool:
		# A superseded load is the only thing left that can fill an unlocated screen.
		return self._query.center is None and self._pending is None and self._state is SearchState.LOADING

	async def load_catalog(self) -> SearchSnapshot:
		seq = self._begin(_Operation.CATALOG)
		obs_metrics.inc_search(self.kind.value, _Operation.CATALOG.value)
		self._catalog_inflight += 1
		try:
			items = await self._pipeline.load_catalog()
		except QueryFailure as exc:
			if self._is_current(seq) or self._awaiting_catalog():
				self._fail(_Operation.CATALOG, exc)
			else:
				self._discard_stale(seq)
			return self.snapshot()
		finally:
			self._catalog_inflight -= 1
		self._catalog = items
		self._catalog_loaded = True
		if not self._is_current(seq):
			# The catalog is still good data even if a geo search won the race.
			if self._awaiting_catalog():
				self._publish(self._pipeline.refine(self._catalog, self._query))
			else:
				self._discard_stale(seq)
			return self.snapshot()
		if self._query.center is None:
			self._publish(self._pipeline.refine(self._catalog, self._query))
		elif self._candidates_key is None:
			# The query gained a centre while the catalog loaded.
			return await self._fetch()
		else:
			self._publish(self._pipeline.refine(self._candidates, self._query))
		return self.snapshot()

	def _target_key(self) -> Optional[GeoKey]:
		if self._pending is _Operation.GEO:
			return self._pending_key
		return self._candidates_key

	def _needs_fetch(self, query: SearchQuery) -> bool:
		if query.center is None:
			return False
		key = self._target_key()
		if key is None:
			return True
		center, radius = key
		return query.center != center or query.radius_miles > radius

	async def _fetch(self) -> SearchSnapshot:
		query = self._query
		if query.center is None:
			raise ValueError("query has no center")
		seq = self._begin(_Operation.GEO)
		key = (query.center, query.radius_miles)
		self._pending_key = key
		obs_metrics.inc_search(self.kind.value, _Operation.GEO.value)
		try:
			candidates = await self._pipeline.fetch_candidates(query)
		except QueryFailure as exc:
			if self._is_current(seq):
				self._fail(_Operation.GEO, exc)
			else:
				self._discard_stale(seq)
			return self.snapshot()
		if not self._is_current(seq):
			self._discard_stale(seq)
			return self.snapshot()
		self._candidates = candidates
		self._candidates_key = key
		# Filters may have changed while the fetch was in flight.
		self._publish(self._pipeline.refine(candidates, self._query))
		return self.snapshot()

	async def _show_catalog(self) -> SearchSnapshot:
		if self._catalog_loaded:
			self._publish(self._pipeline.refine(self._catalog, self._query))
			return self.snapshot()
		if self._catalog_inflight:
			self._state = SearchState.LOADING
			return self.snapshot()
		return await self.load_catalog()

	async def update_query(self, query: SearchQuery) -> SearchSnapshot:
		"""Replace the query and bring the result set up to date."""

		self._query = query
		if self._needs_fetch(query):
			return await self._fetch()

		if self._pending is _Operation.GEO:
			if query.center is None:
				self._invalidate_pending()
			else:
				# The in-flight fetch covers this query and applies it on arrival.
				return self.snapshot()
		if self._pending is _Operation.CATALOG:
			return self.snapshot()

		if query.center is None:
			if self._state is SearchState.IDLE:
				return self.snapshot()
			return await self._show_catalog()
		self._publish(self._pipeline.refine(self._candidates, query))
		return self.snapshot()

	async def retry(self) -> SearchSnapshot:
		"""Re-issue the operation that last failed."""

		if self._state is not SearchState.ERROR or self._failed is None:
			return self.snapshot()
		if self._failed is _Operation.CATALOG:
			return await self.load_catalog()
		if self._query.center is None:
			return await self._show_catalog()
		return await self._fetch()


__all__ = ["SearchCoordinator", "SearchSnapshot", "SearchState"]
