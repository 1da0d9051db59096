"""Geohash encoding and disc-covering range queries.

Items are indexed by a geohash string written at storage time. A circular
search area is turned into a handful of lexicographic ``[lower, upper]``
ranges over that field; each range is one store query. The ranges may
over-select (the exact radius cutoff happens later) but must never miss a
cell that intersects the disc.

The covering follows the usual bounding-box approach: pick a bit precision
whose cells are at least as large as the radius, then collect the cells
touched by a grid of sample points spread over the disc's bounding box. The
sample spacing is half the cell size, so every cell overlapping the box is
hit. Discs that reach a pole, or whose longitude span covers half the globe,
fall back to a single full-range bound. Cell encoding itself is pygeohash.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Tuple

import pygeohash as gh

from socialspot.domain.geo.distance import EARTH_RADIUS_M
from socialspot.domain.geo.models import Coordinate, GeohashBound

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
_BASE32_INDEX = {char: idx for idx, char in enumerate(BASE32)}

BITS_PER_CHAR = 5
DEFAULT_PRECISION = 6
MAX_PRECISION = 22
MAXIMUM_BITS_PRECISION = MAX_PRECISION * BITS_PER_CHAR

# Sorts after every base-32 character; closes ranges that would wrap past "z".
RANGE_END = "~"
FULL_RANGE = GeohashBound(BASE32[0], RANGE_END)

METERS_PER_DEGREE = EARTH_RADIUS_M * math.pi / 180.0
_EPSILON = 1e-12
_SAMPLES_PER_AXIS = 5

Bounds = Tuple[float, float, float, float]


def encode(coord: Coordinate, precision: int = DEFAULT_PRECISION) -> str:
	"""Encode *coord* as a geohash of ``precision`` characters."""

	if not 1 <= precision <= MAX_PRECISION:
		raise ValueError(f"precision must be between 1 and {MAX_PRECISION}")
	return gh.encode(coord.latitude, coord.longitude, precision=precision)


def _validated(geohash: str) -> str:
	if not geohash:
		raise ValueError("geohash must not be empty")
	lowered = geohash.lower()
	for char in lowered:
		if char not in _BASE32_INDEX:
			raise ValueError(f"invalid geohash character: {char!r}")
	return lowered


def decode_bounds(geohash: str) -> Bounds:
	"""Return the ``(south, west, north, east)`` box of a geohash cell."""

	latitude, longitude, lat_err, lon_err = gh.decode_exactly(_validated(geohash))
	return (latitude - lat_err, longitude - lon_err, latitude + lat_err, longitude + lon_err)


def decode(geohash: str) -> Coordinate:
	"""Return the centre of a geohash cell."""

	latitude, longitude, _, _ = gh.decode_exactly(_validated(geohash))
	return Coordinate(latitude=latitude, longitude=longitude)


def _meters_to_longitude_degrees(distance: float, latitude: float) -> float:
	per_degree = math.cos(math.radians(latitude)) * METERS_PER_DEGREE
	if per_degree < _EPSILON:
		return 360.0 if distance > 0 else 0.0
	return min(360.0, distance / per_degree)


def _longitude_bits(resolution: float, latitude: float) -> float:
	degrees = _meters_to_longitude_degrees(resolution, latitude)
	if abs(degrees) <= 0.000001:
		return 1.0
	return max(1.0, math.log2(360.0 / degrees))


def _latitude_bits(resolution: float) -> float:
	return min(math.log2(math.pi * EARTH_RADIUS_M / resolution), MAXIMUM_BITS_PRECISION)


def _wrap_longitude(longitude: float) -> float:
	if -180.0 <= longitude <= 180.0:
		return longitude
	adjusted = longitude + 180.0
	if adjusted > 0:
		return (adjusted % 360.0) - 180.0
	return 180.0 - (-adjusted % 360.0)


def bounding_box_bits(center: Coordinate, radius_meters: float) -> int:
	"""Number of geohash bits whose cells are no smaller than the radius."""

	lat_delta = radius_meters / METERS_PER_DEGREE
	north = min(90.0, center.latitude + lat_delta)
	south = max(-90.0, center.latitude - lat_delta)
	bits_lat = math.floor(_latitude_bits(radius_meters)) * 2
	bits_north = math.floor(_longitude_bits(radius_meters, north)) * 2 - 1
	bits_south = math.floor(_longitude_bits(radius_meters, south)) * 2 - 1
	return min(bits_lat, bits_north, bits_south, MAXIMUM_BITS_PRECISION)


def range_for_prefix(geohash: str, bits: int) -> GeohashBound:
	"""Range of all geohashes sharing the first ``bits`` bits of *geohash*."""

	precision = math.ceil(bits / BITS_PER_CHAR)
	if len(geohash) < precision:
		return GeohashBound(geohash, geohash + RANGE_END)
	prefix = geohash[:precision]
	base = prefix[:-1]
	last_value = _BASE32_INDEX[prefix[-1]]
	significant_bits = bits - len(base) * BITS_PER_CHAR
	unused_bits = BITS_PER_CHAR - significant_bits
	start = (last_value >> unused_bits) << unused_bits
	end = start + (1 << unused_bits)
	if end > len(BASE32) - 1:
		return GeohashBound(base + BASE32[start], base + RANGE_END)
	return GeohashBound(base + BASE32[start], base + BASE32[end])


def _merge(bounds: Iterable[GeohashBound]) -> List[GeohashBound]:
	merged: List[GeohashBound] = []
	for bound in sorted(set(bounds)):
		if merged and bound.lower <= merged[-1].upper:
			last = merged[-1]
			merged[-1] = GeohashBound(last.lower, max(last.upper, bound.upper))
		else:
			merged.append(bound)
	return merged


def _spread(low: float, high: float) -> List[float]:
	steps = _SAMPLES_PER_AXIS - 1
	return [low + (high - low) * idx / steps for idx in range(_SAMPLES_PER_AXIS)]


def query_bounds(
	center: Coordinate,
	radius_meters: float,
	*,
	max_bits: Optional[int] = None,
) -> List[GeohashBound]:
	"""Return sorted, non-overlapping geohash ranges covering the disc.

	``max_bits`` caps the query precision, which must not exceed the length
	of the geohash strings stored in the collection (``precision * 5``).
	"""

	if radius_meters <= 0:
		raise ValueError("radius_meters must be positive")
	if max_bits is not None and max_bits < 1:
		raise ValueError("max_bits must be at least 1")

	lat_delta = radius_meters / METERS_PER_DEGREE
	north = min(90.0, center.latitude + lat_delta)
	south = max(-90.0, center.latitude - lat_delta)
	lon_delta = max(
		_meters_to_longitude_degrees(radius_meters, north),
		_meters_to_longitude_degrees(radius_meters, south),
	)
	if north >= 90.0 or south <= -90.0 or lon_delta >= 180.0:
		return [FULL_RANGE]

	bits = max(1, bounding_box_bits(center, radius_meters))
	if max_bits is not None:
		bits = min(bits, max_bits)
	precision = math.ceil(bits / BITS_PER_CHAR)

	ranges: List[GeohashBound] = []
	for latitude in _spread(south, north):
		for longitude in _spread(center.longitude - lon_delta, center.longitude + lon_delta):
			point = Coordinate(latitude=latitude, longitude=_wrap_longitude(longitude))
			ranges.append(range_for_prefix(encode(point, precision), bits))
	return _merge(ranges)


__all__ = [
	"BASE32",
	"DEFAULT_PRECISION",
	"FULL_RANGE",
	"RANGE_END",
	"bounding_box_bits",
	"decode",
	"decode_bounds",
	"encode",
	"query_bounds",
	"range_for_prefix",
]
