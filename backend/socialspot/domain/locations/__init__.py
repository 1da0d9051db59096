"""Location services: ZIP lookup and device location."""

from .provider import (
	LocationPermissionDenied,
	LocationProvider,
	PositionUnavailable,
	StaticLocationProvider,
	resolve_search_center,
)
from .zip_codes import ZipResolution, ZipResolver

__all__ = [
	"LocationPermissionDenied",
	"LocationProvider",
	"PositionUnavailable",
	"StaticLocationProvider",
	"ZipResolution",
	"ZipResolver",
	"resolve_search_center",
]
