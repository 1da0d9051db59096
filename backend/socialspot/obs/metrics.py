"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, Histogram

log = logging.getLogger(__name__)


REQUEST_COUNTER = Counter(
	"socialspot_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"socialspot_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

SEARCHES = Counter(
	"socialspot_searches_total",
	"Searches executed through the discovery pipeline",
	["kind", "path"],
)

SEARCH_RESULTS = Histogram(
	"socialspot_search_results",
	"Number of items in a produced result set",
	["kind"],
	buckets=(0, 1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500),
)

STORE_QUERIES = Counter(
	"socialspot_store_range_queries_total",
	"Range queries issued against the document store",
	["collection", "outcome"],
)

GEOHASH_BOUNDS = Histogram(
	"socialspot_geohash_bounds",
	"Geohash query bounds produced per geo search",
	buckets=(1, 2, 3, 4, 5, 6, 8, 10, 16),
)

CANDIDATES_DISCARDED = Counter(
	"socialspot_candidates_outside_radius_total",
	"Geo candidates dropped by the exact radius cutoff",
	["kind"],
)

STALE_RESULTS = Counter(
	"socialspot_stale_results_discarded_total",
	"Fetch results discarded because a newer search superseded them",
	["kind"],
)

CATALOG_SIZE = Gauge(
	"socialspot_catalog_items",
	"Items held by the most recent full catalog load",
	["collection"],
)

POSTGRES_UP = Gauge("socialspot_postgres_up", "Postgres readiness (1 up, 0 down)")
REDIS_UP = Gauge("socialspot_redis_up", "Redis readiness (1 up, 0 down)")
BUILD_INFO = Gauge("socialspot_build_info", "Running build", ["service", "commit", "env"])


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def inc_search(kind: str, path: str) -> None:
	SEARCHES.labels(kind=kind, path=path).inc()


def observe_results(kind: str, count: int) -> None:
	SEARCH_RESULTS.labels(kind=kind).observe(count)


def inc_store_query(collection: str, outcome: str) -> None:
	STORE_QUERIES.labels(collection=collection, outcome=outcome).inc()


def observe_bounds(count: int) -> None:
	GEOHASH_BOUNDS.observe(count)


def inc_discarded(kind: str, count: int) -> None:
	if count > 0:
		CANDIDATES_DISCARDED.labels(kind=kind).inc(count)


def inc_stale_result(kind: str) -> None:
	STALE_RESULTS.labels(kind=kind).inc()


def set_catalog_size(collection: str, count: int) -> None:
	CATALOG_SIZE.labels(collection=collection).set(count)


def mark_postgres(ok: bool) -> None:
	POSTGRES_UP.set(1 if ok else 0)


def mark_redis(ok: bool) -> None:
	REDIS_UP.set(1 if ok else 0)


def set_build_info(service: str, commit: str, env: str) -> None:
	BUILD_INFO.labels(service=service, commit=commit, env=env).set(1)
