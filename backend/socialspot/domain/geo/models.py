"""Value types shared by the geo helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


@dataclass(slots=True, frozen=True)
class Coordinate:
	"""A WGS84 point in decimal degrees."""

	latitude: float
	longitude: float

	def __post_init__(self) -> None:
		if not -90.0 <= self.latitude <= 90.0:
			raise ValueError(f"latitude out of range: {self.latitude}")
		if not -180.0 <= self.longitude <= 180.0:
			raise ValueError(f"longitude out of range: {self.longitude}")


class GeohashBound(NamedTuple):
	"""Inclusive lexicographic range of geohash strings."""

	lower: str
	upper: str

	def contains(self, geohash: str) -> bool:
		return self.lower <= geohash <= self.upper
