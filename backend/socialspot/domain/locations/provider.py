"""Search centre resolution from ZIP codes or device location."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from socialspot.domain.geo.models import Coordinate
from socialspot.domain.locations.zip_codes import ZipResolver

logger = logging.getLogger(__name__)


class LocationError(Exception):
	"""Base class for device location failures."""


class LocationPermissionDenied(LocationError):
	pass


class PositionUnavailable(LocationError):
	pass


class LocationProvider(Protocol):
	async def get_current_coordinates(self) -> Coordinate:
		...


class StaticLocationProvider:
	"""Provider that reports a fixed position, or a fixed failure."""

	def __init__(self, coordinate: Optional[Coordinate] = None, *, denied: bool = False) -> None:
		self._coordinate = coordinate
		self._denied = denied

	async def get_current_coordinates(self) -> Coordinate:
		if self._denied:
			raise LocationPermissionDenied("location permission denied")
		if self._coordinate is None:
			raise PositionUnavailable("no position fix")
		return self._coordinate


async def resolve_search_center(
	*,
	zip_code: Optional[str] = None,
	use_device_location: bool = False,
	provider: Optional[LocationProvider] = None,
	resolver: Optional[ZipResolver] = None,
) -> Optional[Coordinate]:
	"""Centre for a search, or ``None`` for no location filter.

	A ZIP code wins over the device. Device failures are not errors here;
	they mean the search runs without a location filter.
	"""

	if zip_code:
		return (resolver or ZipResolver()).resolve(zip_code)
	if not use_device_location or provider is None:
		return None
	try:
		return await provider.get_current_coordinates()
	except LocationError as exc:
		logger.info("device_location_unavailable", extra={"reason": type(exc).__name__})
		return None


__all__ = [
	"LocationError",
	"LocationPermissionDenied",
	"LocationProvider",
	"PositionUnavailable",
	"StaticLocationProvider",
	"resolve_search_center",
]
