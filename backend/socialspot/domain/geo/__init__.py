"""Geospatial primitives: coordinates, geohash index, distances."""

from .distance import distance_miles, meters_to_miles, miles_to_meters, round_miles
from .geohash import decode, encode, query_bounds
from .models import Coordinate, GeohashBound

__all__ = [
	"Coordinate",
	"GeohashBound",
	"decode",
	"distance_miles",
	"encode",
	"meters_to_miles",
	"miles_to_meters",
	"query_bounds",
	"round_miles",
]
