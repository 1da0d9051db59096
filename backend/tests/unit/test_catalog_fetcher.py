import asyncio

import pytest

from socialspot.domain.catalog.fetcher import CandidateFetcher, CatalogLoader
from socialspot.domain.catalog.models import ItemKind
from socialspot.domain.catalog.store import MemoryDocumentStore, Page, QueryFailure, StoredDocument
from socialspot.domain.geo.models import GeohashBound


def _doc(name: str, hash_value: str) -> dict:
	return {"name": name, "location": {"geohash": hash_value}}


@pytest.mark.asyncio
async def test_fetch_merges_bounds_and_drops_duplicates():
	store = MemoryDocumentStore()
	await store.seed(
		"activities",
		{
			"a": _doc("A", "dqcjq0"),
			"b": _doc("B", "dqcjr5"),
			"c": _doc("C", "dqcn00"),
		},
	)
	fetcher = CandidateFetcher(store, ItemKind.ACTIVITY)
	bounds = [GeohashBound("dqcjq", "dqcjs"), GeohashBound("dqcjr", "dqcjr~")]

	items = await fetcher.fetch(bounds, "activities", max_per_bound=50)

	assert [item.id for item in items] == ["a", "b"]


@pytest.mark.asyncio
async def test_fetch_with_no_bounds_issues_no_queries():
	class _Exploding:
		async def range_query(self, *args, **kwargs):
			raise AssertionError("should not query")

	assert await CandidateFetcher(_Exploding(), ItemKind.EVENT).fetch([], "events") == []


@pytest.mark.asyncio
async def test_fetch_caps_each_bound():
	store = MemoryDocumentStore()
	await store.seed("activities", {f"d{idx}": _doc(f"N{idx}", f"dqcjq{idx}") for idx in range(5)})

	items = await CandidateFetcher(store, ItemKind.ACTIVITY).fetch(
		[GeohashBound("dqcjq", "dqcjq~")], "activities", max_per_bound=3
	)

	assert len(items) == 3


@pytest.mark.asyncio
async def test_one_failed_bound_fails_the_fetch_after_all_settle():
	finished = []

	class _FlakyStore:
		async def range_query(self, collection, field, lower, upper, **kwargs):
			if lower == "bad":
				raise ConnectionError("store offline")
			await asyncio.sleep(0)
			finished.append(lower)
			return Page(documents=[StoredDocument(id=lower, data={"name": lower})])

	fetcher = CandidateFetcher(_FlakyStore(), ItemKind.ACTIVITY)
	bounds = [GeohashBound("bad", "bae"), GeohashBound("dq", "dr")]

	with pytest.raises(QueryFailure) as excinfo:
		await fetcher.fetch(bounds, "activities")

	assert excinfo.value.bound == bounds[0]
	assert finished == ["dq"]


class _PagingStore:
	def __init__(self, total: int):
		self.total = total
		self.calls = 0

	async def range_query(self, collection, field, lower, upper, *, order_by=None, limit, cursor=None):
		self.calls += 1
		start = int(cursor) if cursor else 0
		end = min(start + limit, self.total)
		docs = [StoredDocument(id=f"i{idx:04d}", data={"name": f"Item {idx:04d}"}) for idx in range(start, end)]
		return Page(documents=docs, cursor=str(end) if end - start == limit else None)


@pytest.mark.asyncio
async def test_catalog_loader_follows_cursor_until_short_page():
	store = _PagingStore(total=25)
	items = await CatalogLoader(store, ItemKind.ACTIVITY, page_size=10).load_all("activities")

	assert len(items) == 25
	assert store.calls == 3
	assert items[0].id == "i0000"
	assert items[-1].id == "i0024"


@pytest.mark.asyncio
async def test_catalog_loader_stops_on_empty_page_after_exact_multiple():
	store = _PagingStore(total=20)
	items = await CatalogLoader(store, ItemKind.ACTIVITY, page_size=10).load_all("activities")

	assert len(items) == 20
	assert store.calls == 3


@pytest.mark.asyncio
async def test_catalog_loader_wraps_store_errors():
	class _Broken:
		async def range_query(self, *args, **kwargs):
			raise TimeoutError("slow")

	with pytest.raises(QueryFailure):
		await CatalogLoader(_Broken(), ItemKind.EVENT).load_all("events")
