"""REST endpoints for activity and event search."""

from __future__ import annotations

import logging
from typing import Optional, get_args

from fastapi import APIRouter, Depends, HTTPException, Query, status

from socialspot.domain.catalog.models import ACTIVITY_CATEGORIES, ALL_CATEGORIES, EVENT_CATEGORIES, ItemKind
from socialspot.domain.catalog.store import QueryFailure
from socialspot.domain.discovery import schemas
from socialspot.domain.discovery.age_bands import AGE_BAND_LABELS
from socialspot.domain.discovery.service import DiscoveryService
from socialspot.domain.geo.models import Coordinate
from socialspot.domain.locations.provider import StaticLocationProvider, resolve_search_center
from socialspot.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["discovery"])

_service = DiscoveryService()


def _as_http_error(exc: Exception) -> HTTPException:
	if isinstance(exc, QueryFailure):
		return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="store_unavailable")
	return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


async def _base_query(
	lat: Optional[float] = Query(default=None, ge=-90.0, le=90.0),
	lon: Optional[float] = Query(default=None, ge=-180.0, le=180.0),
	zip_code: Optional[str] = Query(default=None, alias="zip"),
	radius_miles: Optional[float] = Query(default=None, gt=0, le=settings.max_radius_miles),
	category: str = Query(default=ALL_CATEGORIES, max_length=64),
	free_only: bool = False,
	age_band: schemas.AgeBand = "all",
) -> schemas.SearchQuery:
	if (lat is None) != (lon is None):
		raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="lat_lon_required_together")
	device = Coordinate(lat, lon) if lat is not None and lon is not None else None
	try:
		center = await resolve_search_center(
			zip_code=zip_code,
			use_device_location=device is not None,
			provider=StaticLocationProvider(device),
		)
	except ValueError as exc:
		raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="invalid_zip") from exc
	return schemas.SearchQuery(
		center=center,
		radius_miles=radius_miles or settings.default_radius_miles,
		category=category,
		free_only=free_only,
		age_band=age_band,
	)


async def _event_query(
	base: schemas.SearchQuery = Depends(_base_query),
	date_window: schemas.DateWindow = "all",
	show_past: bool = False,
) -> schemas.SearchQuery:
	return base.with_changes(date_window=date_window, show_past=show_past)


@router.get("/activities", response_model=schemas.SearchResponse)
async def search_activities_endpoint(
	query: schemas.SearchQuery = Depends(_base_query),
) -> schemas.SearchResponse:
	try:
		return await _service.search_response(ItemKind.ACTIVITY, query)
	except QueryFailure as exc:
		raise _as_http_error(exc) from exc


@router.get("/events", response_model=schemas.SearchResponse)
async def search_events_endpoint(
	query: schemas.SearchQuery = Depends(_event_query),
) -> schemas.SearchResponse:
	try:
		return await _service.search_response(ItemKind.EVENT, query)
	except QueryFailure as exc:
		raise _as_http_error(exc) from exc


@router.get("/filters/{kind}", response_model=schemas.FilterOptions)
async def filter_options_endpoint(kind: ItemKind) -> schemas.FilterOptions:
	categories = EVENT_CATEGORIES if kind is ItemKind.EVENT else ACTIVITY_CATEGORIES
	return schemas.FilterOptions(
		kind=kind,
		categories=list(categories),
		age_bands=[schemas.FilterOption(value=value, label=label) for value, label in AGE_BAND_LABELS.items()],
		radius_options_miles=list(schemas.RADIUS_OPTIONS_MILES),
		default_radius_miles=settings.default_radius_miles,
		date_windows=list(get_args(schemas.DateWindow)) if kind is ItemKind.EVENT else [],
	)
