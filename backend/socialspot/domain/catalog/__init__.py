"""Catalog items, their storage adapters and read paths."""

from .fetcher import CandidateFetcher, CatalogLoader
from .models import ACTIVITY_CATEGORIES, CATEGORY_MAPPING, EVENT_CATEGORIES, Item, ItemKind
from .normalize import MalformedItem, normalize_document
from .store import DocumentStore, MemoryDocumentStore, PostgresDocumentStore, QueryFailure, get_document_store

__all__ = [
	"ACTIVITY_CATEGORIES",
	"CATEGORY_MAPPING",
	"CandidateFetcher",
	"CatalogLoader",
	"DocumentStore",
	"EVENT_CATEGORIES",
	"Item",
	"ItemKind",
	"MalformedItem",
	"MemoryDocumentStore",
	"PostgresDocumentStore",
	"QueryFailure",
	"get_document_store",
	"normalize_document",
]
