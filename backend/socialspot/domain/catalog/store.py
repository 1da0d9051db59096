"""Document store adapters exposing the range-query read path."""

from __future__ import annotations

import asyncio
import base64
import copy
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

import asyncpg

from socialspot.domain.geo.models import GeohashBound
from socialspot.infra.postgres import get_pool
from socialspot.settings import settings

logger = logging.getLogger(__name__)

_PATH_SEGMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(slots=True)
class StoredDocument:
	id: str
	data: Dict[str, Any]


@dataclass(slots=True)
class Page:
	documents: List[StoredDocument] = field(default_factory=list)
	cursor: Optional[str] = None


class QueryFailure(Exception):
	"""The store was unreachable or rejected a query."""

	def __init__(self, collection: str, detail: str, *, bound: Optional[GeohashBound] = None) -> None:
		super().__init__(f"{collection}: {detail}")
		self.collection = collection
		self.detail = detail
		self.bound = bound


class DocumentStore(Protocol):
	async def range_query(
		self,
		collection: str,
		field: str,
		lower: Optional[str],
		upper: Optional[str],
		*,
		order_by: Optional[str] = None,
		limit: int,
		cursor: Optional[str] = None,
	) -> Page:
		"""Documents with ``lower <= field <= upper`` ordered by ``order_by`` then id."""
		...


def encode_cursor(sort_key: str, doc_id: str) -> str:
	payload = {"k": sort_key, "id": doc_id}
	blob = json.dumps(payload, separators=(",", ":"))
	return base64.urlsafe_b64encode(blob.encode("utf-8")).decode("ascii")


def decode_cursor(value: str) -> Tuple[str, str]:
	try:
		data = json.loads(base64.urlsafe_b64decode(value.encode("ascii")).decode("utf-8"))
		return str(data["k"]), str(data["id"])
	except (ValueError, KeyError, TypeError) as exc:
		raise ValueError("bad_cursor") from exc


def value_at(data: Mapping[str, Any], path: str) -> Optional[Any]:
	current: Any = data
	for segment in path.split("."):
		if not isinstance(current, Mapping) or segment not in current:
			return None
		current = current[segment]
	return current


def _sort_text(data: Mapping[str, Any], path: str) -> str:
	value = value_at(data, path)
	if value is None:
		return ""
	return value if isinstance(value, str) else str(value)


class MemoryDocumentStore:
	"""In-process store with the same ordering rules as the Postgres adapter."""

	def __init__(self) -> None:
		self._lock = asyncio.Lock()
		self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

	async def reset(self) -> None:
		async with self._lock:
			self._collections.clear()

	async def seed(self, collection: str, documents: Mapping[str, Mapping[str, Any]]) -> None:
		async with self._lock:
			target = self._collections.setdefault(collection, {})
			for doc_id, data in documents.items():
				target[str(doc_id)] = copy.deepcopy(dict(data))

	async def range_query(
		self,
		collection: str,
		field: str,
		lower: Optional[str],
		upper: Optional[str],
		*,
		order_by: Optional[str] = None,
		limit: int,
		cursor: Optional[str] = None,
	) -> Page:
		order_field = order_by or field
		async with self._lock:
			snapshot = list(self._collections.get(collection, {}).items())
		rows: List[Tuple[str, str, Dict[str, Any]]] = []
		for doc_id, data in snapshot:
			value = _sort_text(data, field)
			if lower is not None and value < lower:
				continue
			if upper is not None and value > upper:
				continue
			rows.append((_sort_text(data, order_field), doc_id, data))
		rows.sort(key=lambda row: (row[0], row[1]))
		if cursor:
			after = decode_cursor(cursor)
			rows = [row for row in rows if (row[0], row[1]) > after]
		page = rows[:limit]
		next_cursor = encode_cursor(page[-1][0], page[-1][1]) if page and len(page) == limit else None
		return Page(
			documents=[StoredDocument(id=doc_id, data=copy.deepcopy(data)) for _, doc_id, data in page],
			cursor=next_cursor,
		)


def _json_path(path: str) -> str:
	segments = path.split(".")
	if not all(_PATH_SEGMENT.match(segment) for segment in segments):
		raise ValueError(f"unsupported field path: {path!r}")
	return "'{" + ",".join(segments) + "}'"


def _text_expr(path: str) -> str:
	return f"COALESCE(data #>> {_json_path(path)}, '') COLLATE \"C\""


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
	collection TEXT NOT NULL,
	id TEXT NOT NULL,
	data JSONB NOT NULL,
	updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
	PRIMARY KEY (collection, id)
)
"""


async def ensure_schema(pool: asyncpg.pool.Pool, indexed_fields: Iterable[str] = ("name",)) -> None:
	"""Create the documents table plus one expression index per ordered field."""

	fields = [settings.geohash_field, *indexed_fields]
	async with pool.acquire() as conn:
		await conn.execute(SCHEMA_SQL)
		for path in fields:
			index_name = "documents_" + path.replace(".", "_") + "_idx"
			await conn.execute(
				f"CREATE INDEX IF NOT EXISTS {index_name} ON documents (collection, ({_text_expr(path)}), id)"
			)


class PostgresDocumentStore:
	"""JSONB documents keyed by ``(collection, id)``; comparisons are bytewise."""

	def __init__(self, pool_factory: Callable[[], Awaitable[asyncpg.pool.Pool]] = get_pool) -> None:
		self._pool_factory = pool_factory

	def build_query(
		self,
		collection: str,
		field: str,
		lower: Optional[str],
		upper: Optional[str],
		*,
		order_by: Optional[str],
		limit: int,
		cursor: Optional[str],
	) -> Tuple[str, List[Any]]:
		value = _text_expr(field)
		key = _text_expr(order_by or field)
		params: List[Any] = [collection]
		clauses = ["collection = $1"]
		if lower is not None:
			params.append(lower)
			clauses.append(f"{value} >= ${len(params)}")
		if upper is not None:
			params.append(upper)
			clauses.append(f"{value} <= ${len(params)}")
		if cursor:
			after_key, after_id = decode_cursor(cursor)
			params.extend([after_key, after_id])
			clauses.append(f"({key}, id COLLATE \"C\") > (${len(params) - 1}, ${len(params)})")
		params.append(limit)
		sql = (
			f"SELECT id, data, {key} AS sort_key FROM documents "
			f"WHERE {' AND '.join(clauses)} "
			f"ORDER BY {key}, id COLLATE \"C\" LIMIT ${len(params)}"
		)
		return sql, params

	async def range_query(
		self,
		collection: str,
		field: str,
		lower: Optional[str],
		upper: Optional[str],
		*,
		order_by: Optional[str] = None,
		limit: int,
		cursor: Optional[str] = None,
	) -> Page:
		sql, params = self.build_query(
			collection, field, lower, upper, order_by=order_by, limit=limit, cursor=cursor
		)
		try:
			pool = await self._pool_factory()
			rows = await pool.fetch(sql, *params)
		except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as exc:
			logger.warning("store_range_query_failed", extra={"collection": collection, "error": str(exc)})
			raise QueryFailure(collection, str(exc)) from exc
		documents = []
		for row in rows:
			data = row["data"]
			if isinstance(data, str):
				data = json.loads(data)
			documents.append(StoredDocument(id=str(row["id"]), data=data))
		next_cursor = None
		if rows and len(rows) == limit:
			last = rows[-1]
			next_cursor = encode_cursor(last["sort_key"], str(last["id"]))
		return Page(documents=documents, cursor=next_cursor)


_memory_store = MemoryDocumentStore()


def memory_store() -> MemoryDocumentStore:
	return _memory_store


def get_document_store() -> DocumentStore:
	if settings.store_backend == "memory":
		return _memory_store
	return PostgresDocumentStore()


__all__ = [
	"DocumentStore",
	"MemoryDocumentStore",
	"Page",
	"PostgresDocumentStore",
	"QueryFailure",
	"StoredDocument",
	"ensure_schema",
	"get_document_store",
	"memory_store",
]
