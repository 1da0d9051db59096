"""Read paths against the document store: geo-bounded fan-out and full scans."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from socialspot.domain.catalog.models import Item, ItemKind
from socialspot.domain.catalog.normalize import normalize_many
from socialspot.domain.catalog.store import DocumentStore, Page, QueryFailure, StoredDocument
from socialspot.domain.geo.models import GeohashBound
from socialspot.obs import metrics as obs_metrics
from socialspot.settings import settings

logger = logging.getLogger(__name__)


class CandidateFetcher:
	"""Issues one range query per geohash bound and merges the results."""

	def __init__(
		self,
		store: DocumentStore,
		kind: ItemKind,
		*,
		geohash_field: Optional[str] = None,
		precision: Optional[int] = None,
	) -> None:
		self._store = store
		self._kind = kind
		self._field = geohash_field or settings.geohash_field
		self._precision = precision or settings.geohash_precision

	async def _query(self, collection: str, bound: GeohashBound, limit: int) -> Page:
		try:
			page = await self._store.range_query(
				collection,
				self._field,
				bound.lower,
				bound.upper,
				order_by=self._field,
				limit=limit,
			)
		except Exception:
			obs_metrics.inc_store_query(collection, "error")
			raise
		obs_metrics.inc_store_query(collection, "ok")
		return page

	async def fetch(
		self,
		bounds: Sequence[GeohashBound],
		collection: str,
		max_per_bound: Optional[int] = None,
	) -> List[Item]:
		"""Candidates inside any bound, first-seen order, unique by id.

		Every query settles before a failure is raised; one failed bound fails
		the whole fetch.
		"""

		if not bounds:
			return []
		limit = max_per_bound or settings.max_per_bound
		results = await asyncio.gather(
			*(self._query(collection, bound, limit) for bound in bounds),
			return_exceptions=True,
		)
		for bound, result in zip(bounds, results):
			if isinstance(result, asyncio.CancelledError):
				raise result
			if isinstance(result, QueryFailure):
				if result.bound is None:
					result.bound = bound
				raise result
			if isinstance(result, BaseException):
				logger.warning(
					"candidate_query_failed",
					extra={"collection": collection, "bound": f"{bound.lower}..{bound.upper}"},
				)
				raise QueryFailure(collection, str(result) or type(result).__name__, bound=bound) from result

		seen: Dict[str, StoredDocument] = {}
		for page in results:
			for document in page.documents:
				seen.setdefault(document.id, document)
		return normalize_many(seen.values(), self._kind, precision=self._precision)


class CatalogLoader:
	"""Reads a whole collection page by page until a short page arrives."""

	def __init__(self, store: DocumentStore, kind: ItemKind, *, page_size: Optional[int] = None) -> None:
		self._store = store
		self._kind = kind
		self._page_size = page_size or settings.catalog_page_size

	async def load_all(self, collection: str, order_by: str = "name") -> List[Item]:
		documents: List[StoredDocument] = []
		cursor: Optional[str] = None
		pages = 0
		while True:
			try:
				page = await self._store.range_query(
					collection,
					order_by,
					None,
					None,
					order_by=order_by,
					limit=self._page_size,
					cursor=cursor,
				)
			except QueryFailure:
				obs_metrics.inc_store_query(collection, "error")
				raise
			except Exception as exc:
				obs_metrics.inc_store_query(collection, "error")
				raise QueryFailure(collection, str(exc) or type(exc).__name__) from exc
			obs_metrics.inc_store_query(collection, "ok")
			pages += 1
			documents.extend(page.documents)
			if len(page.documents) < self._page_size or page.cursor is None:
				break
			cursor = page.cursor
		items = normalize_many(documents, self._kind, precision=settings.geohash_precision)
		obs_metrics.set_catalog_size(collection, len(items))
		logger.info("catalog_loaded", extra={"collection": collection, "pages": pages, "items": len(items)})
		return items


__all__ = ["CandidateFetcher", "CatalogLoader"]
