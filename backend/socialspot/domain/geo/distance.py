"""Great-circle distance helpers."""

from __future__ import annotations

import math

from socialspot.domain.geo.models import Coordinate

EARTH_RADIUS_MILES = 3959.0
METERS_PER_MILE = 1609.344
EARTH_RADIUS_M = EARTH_RADIUS_MILES * METERS_PER_MILE


def haversine_term(a: Coordinate, b: Coordinate) -> float:
	phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
	dphi = math.radians(b.latitude - a.latitude)
	dlambda = math.radians(b.longitude - a.longitude)
	term = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
	# Floating-point overshoot near antipodes can push the term past 1.0.
	return min(1.0, max(0.0, term))


def distance_miles(a: Coordinate, b: Coordinate) -> float:
	"""Return the great-circle distance between two points in miles, unrounded."""

	term = haversine_term(a, b)
	return 2 * EARTH_RADIUS_MILES * math.atan2(math.sqrt(term), math.sqrt(max(0.0, 1 - term)))


def miles_to_meters(miles: float) -> float:
	return miles * METERS_PER_MILE


def meters_to_miles(meters: float) -> float:
	return meters / METERS_PER_MILE


def round_miles(distance: float) -> float:
	"""Display rounding (one decimal). Never use before a radius comparison."""

	return round(distance, 1)
